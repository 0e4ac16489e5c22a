"""Email dispatch result models."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

DispatchStatus = Literal["sent", "partial", "failed", "manual"]


class RecipientResult(BaseModel):
    """Delivery result for a single recipient."""

    recipient: str = Field(..., description="Recipient address")
    success: bool = Field(..., description="Whether the provider accepted the message")
    message_id: Optional[str] = Field(None, description="Provider message id")
    error: Optional[str] = Field(None, description="Error message if failed")


class DispatchResult(BaseModel):
    """Overall result of sending a report."""

    status: DispatchStatus = Field(..., description="sent, partial, failed or manual")
    subject: str = Field("", description="Email subject")
    articles_count: int = Field(0, ge=0)
    recipients: List[RecipientResult] = Field(default_factory=list)
    message: str = Field("", description="Human-readable summary")
    mailto_link: Optional[str] = Field(None, description="Compose link when no provider key is set")

    @property
    def success(self) -> bool:
        return self.status == "sent"

    @property
    def succeeded(self) -> List[str]:
        return [r.recipient for r in self.recipients if r.success]

    @property
    def failed(self) -> List[str]:
        return [r.recipient for r in self.recipients if not r.success]
