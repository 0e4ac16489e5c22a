"""Adapter registry: builds configured adapters in priority order."""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Type

import httpx

from ..config import Config
from ..models import utc_now
from .base import SourceAdapter
from .base_search import BASEAdapter
from .doaj import DOAJAdapter
from .europepmc import EuropePMCAdapter
from .medrxiv import MedRxivAdapter
from .openalex import OpenAlexAdapter
from .plos import PLOSAdapter
from .pubmed import PubMedAdapter
from .scielo import SciELOAdapter
from .semantic_scholar import SemanticScholarAdapter

logger = logging.getLogger(__name__)

ADAPTERS: Dict[str, Type[SourceAdapter]] = {
    adapter.name: adapter
    for adapter in (
        PubMedAdapter,
        EuropePMCAdapter,
        SciELOAdapter,
        SemanticScholarAdapter,
        OpenAlexAdapter,
        DOAJAdapter,
        PLOSAdapter,
        MedRxivAdapter,
        BASEAdapter,
    )
}


def build_adapters(
    config: Config,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    clock: Callable[[], datetime] = utc_now,
) -> List[SourceAdapter]:
    """Instantiate enabled sources in configured order (highest priority first)."""
    settings = config.config
    adapters = []

    for source in settings.sources:
        if not source.enabled:
            continue
        adapter_cls = ADAPTERS.get(source.name)
        if adapter_cls is None:
            logger.warning("Unknown source %r in config, skipping", source.name)
            continue

        kwargs = {
            "timeout": source.timeout,
            "max_results": source.max_results,
            "year_from": settings.search.year_from,
            "year_to": settings.search.year_to,
            "api_key": config.get_api_key(source),
            "base_url": source.base_url,
            "user_agent": settings.search.user_agent,
            "transport": transport,
            "expiration_days": settings.storage.expiration_days,
            "clock": clock,
        }
        if adapter_cls is MedRxivAdapter:
            kwargs["subjects"] = source.subjects
        elif adapter_cls is OpenAlexAdapter:
            kwargs["contact_email"] = source.contact_email

        adapters.append(adapter_cls(**kwargs))

    return adapters
