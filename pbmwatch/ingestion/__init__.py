"""Literature source adapters and concurrent aggregation."""

from .aggregator import SourceAggregator, collect_articles, print_source_summary
from .base import SourceAdapter
from .base_search import BASEAdapter
from .doaj import DOAJAdapter
from .europepmc import EuropePMCAdapter
from .medrxiv import MedRxivAdapter
from .models import SourceResult
from .openalex import OpenAlexAdapter
from .plos import PLOSAdapter
from .pubmed import PubMedAdapter
from .registry import ADAPTERS, build_adapters
from .scielo import SciELOAdapter
from .semantic_scholar import SemanticScholarAdapter

__all__ = [
    "ADAPTERS",
    "BASEAdapter",
    "DOAJAdapter",
    "EuropePMCAdapter",
    "MedRxivAdapter",
    "OpenAlexAdapter",
    "PLOSAdapter",
    "PubMedAdapter",
    "SciELOAdapter",
    "SemanticScholarAdapter",
    "SourceAdapter",
    "SourceAggregator",
    "SourceResult",
    "build_adapters",
    "collect_articles",
    "print_source_summary",
]
