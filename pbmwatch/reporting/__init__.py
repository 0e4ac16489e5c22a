"""Article reports and email delivery."""

from .mailer import BrevoMailer, EmailDispatcher, mailto_link
from .models import DispatchResult, RecipientResult
from .report import format_report, report_subject

__all__ = [
    "BrevoMailer",
    "DispatchResult",
    "EmailDispatcher",
    "RecipientResult",
    "format_report",
    "mailto_link",
    "report_subject",
]
