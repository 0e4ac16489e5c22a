"""Configuration models."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_QUERIES = [
    "bloodless medicine surgery treatment",
    "Patient Blood Management PBM guidelines",
    "transfusion alternatives medical research",
    "blood conservation surgery techniques",
    "medicina sem sangue tratamento sem transfusão",
    "bloodless cardiac surgery outcomes",
    "anemia management without transfusion",
    "cell salvage autologous transfusion",
]

DEFAULT_TRUSTED_DOMAINS = [
    "pmc.ncbi.nlm.nih.gov",
    "pubmed.ncbi.nlm.nih.gov",
    "ncbi.nlm.nih.gov",
    "europepmc.org",
    "semanticscholar.org",
    "doaj.org",
    "medrxiv.org",
    "scielo.br",
    "scielo.org",
    "scielo.pt",
    "base-search.net",
    "openalex.org",
    "doi.org",
    "aabb.org",
    "who.int",
    "ashpublications.org",
    "sciencedirect.com",
    "link.springer.com",
    "jmir.org",
    "researchgate.net",
    "nejm.org",
    "thelancet.com",
    "bmj.com",
    "jamanetwork.com",
    "nature.com",
    "frontiersin.org",
    "plos.org",
    "mdpi.com",
    "biomedcentral.com",
]

DEFAULT_DENIED_DOMAINS = [
    "example.com",
    "example.org",
    "example.net",
    "localhost",
    "test.com",
    "placeholder.com",
    "fake-journal.com",
    "lorem-ipsum.com",
]

DEFAULT_RELEVANCE_KEYWORDS = [
    # English
    "bloodless",
    "patient blood management",
    "blood management",
    "transfusion",
    "blood conservation",
    "cell salvage",
    "anemia",
    "anaemia",
    "hemoglobin",
    "haemoglobin",
    "jehovah",
    "tranexamic",
    "erythropoietin",
    "iron deficiency",
    "blood loss",
    "autologous",
    "hemostasis",
    "haemostasis",
    # Portuguese
    "sem sangue",
    "transfusão",
    "transfusao",
    "gestão do sangue",
    "conservação de sangue",
    "hemoglobina",
    "anemia ferropriva",
    "testemunhas de jeová",
    "ácido tranexâmico",
    "eritropoietina",
    "perda sanguínea",
    "autóloga",
    "hemostasia",
]

DEFAULT_SOURCE_ORDER = [
    "pubmed",
    "europepmc",
    "scielo",
    "semantic_scholar",
    "openalex",
    "doaj",
    "plos",
    "medrxiv",
    "base",
]


class SearchConfig(BaseModel):
    """Search run parameters."""

    queries: List[str] = Field(
        default_factory=lambda: list(DEFAULT_QUERIES),
        description="Queries issued to every source on each run",
    )
    year_from: Optional[int] = Field(None, description="Earliest publication year", ge=1800)
    year_to: Optional[int] = Field(None, description="Latest publication year", ge=1800)
    max_concurrent: int = Field(8, description="Max simultaneous outbound calls", ge=1, le=64)
    user_agent: str = Field(
        "pbmwatch/1.0 (Bloodless Medicine Monitor)",
        description="User agent sent to every provider",
    )

    @field_validator("queries")
    @classmethod
    def validate_queries(cls, v: List[str]) -> List[str]:
        """Drop blank queries."""
        cleaned = [q.strip() for q in v if q and q.strip()]
        if not cleaned:
            raise ValueError("At least one search query is required")
        return cleaned

    @field_validator("year_to")
    @classmethod
    def validate_year_range(cls, v: Optional[int], info) -> Optional[int]:
        """Validate that the year range is ordered."""
        year_from = info.data.get("year_from")
        if v is not None and year_from is not None and v < year_from:
            raise ValueError(f"year_to ({v}) is before year_from ({year_from})")
        return v


class SourceConfig(BaseModel):
    """A configured literature source adapter."""

    name: str = Field(..., description="Adapter name (pubmed, europepmc, ...)")
    enabled: bool = Field(True, description="Whether the source is queried")
    timeout: float = Field(10.0, description="Per-request timeout in seconds", gt=0.0, le=120.0)
    max_results: int = Field(10, description="Results requested per query", ge=1, le=100)
    api_key_env: Optional[str] = Field(None, description="Environment variable holding an API key")
    base_url: Optional[str] = Field(None, description="Override of the provider endpoint")
    subjects: List[str] = Field(
        default_factory=list,
        description="Subject feeds (medRxiv only)",
    )
    contact_email: Optional[str] = Field(
        None,
        description="Contact address for polite API pools (OpenAlex)",
    )


def default_sources() -> List[SourceConfig]:
    """Sources in their default priority order."""
    return [SourceConfig(name=name) for name in DEFAULT_SOURCE_ORDER]


class FilterPolicy(BaseModel):
    """Trust and relevance filter policy.

    ``trust_mode`` selects one of two explicit policies: ``allowlist`` accepts
    only hosts in ``trusted_domains``; ``denylist`` accepts any host except
    those in ``denied_domains``.
    """

    trust_mode: Literal["allowlist", "denylist"] = Field(
        "denylist",
        description="Domain trust policy",
    )
    trusted_domains: List[str] = Field(default_factory=lambda: list(DEFAULT_TRUSTED_DOMAINS))
    denied_domains: List[str] = Field(default_factory=lambda: list(DEFAULT_DENIED_DOMAINS))
    require_keyword_match: bool = Field(
        True,
        description="Reject articles with no relevance keyword in title or snippet",
    )
    relevance_keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_RELEVANCE_KEYWORDS),
    )
    min_title_length: int = Field(10, description="Titles must be longer than this", ge=0)

    @field_validator("trusted_domains", "denied_domains", "relevance_keywords")
    @classmethod
    def normalize_terms(cls, v: List[str]) -> List[str]:
        """Lower-case and strip list entries."""
        return [term.strip().lower() for term in v if term and term.strip()]


class RankingConfig(BaseModel):
    """Ranking configuration."""

    use_relevance_score: bool = Field(
        True,
        description="Order by keyword relevance score before the other tiers",
    )


class StorageConfig(BaseModel):
    """Lifecycle store configuration."""

    data_dir: str = Field("~/.local/share/pbmwatch", description="Directory for persisted state")
    max_articles: int = Field(15, description="Cap on persisted articles", ge=1, le=1000)
    expiration_days: int = Field(30, description="Article retention window", ge=1)
    search_interval_days: int = Field(7, description="Days between scheduled searches", ge=1)


class EmailConfig(BaseModel):
    """Email report delivery configuration."""

    provider: str = Field("brevo", description="Transactional email provider")
    api_key_env: Optional[str] = Field("BREVO_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    api_url: str = Field("https://api.brevo.com/v3/smtp/email", description="Provider endpoint")
    sender_name: str = Field("Bloodless Medicine Monitor")
    sender_email: str = Field("monitor@example.org")
    recipients: List[str] = Field(default_factory=list, description="Report recipients")
    timeout: float = Field(15.0, gt=0.0)


class ConfigModel(BaseModel):
    """Main configuration model."""

    search: SearchConfig = Field(default_factory=SearchConfig)
    sources: List[SourceConfig] = Field(default_factory=default_sources)
    filter: FilterPolicy = Field(default_factory=FilterPolicy)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)

    @field_validator("sources")
    @classmethod
    def validate_unique_sources(cls, v: List[SourceConfig]) -> List[SourceConfig]:
        """Source names must be unique; list order is priority order."""
        seen = set()
        for source in v:
            if source.name in seen:
                raise ValueError(f"Duplicate source: {source.name}")
            seen.add(source.name)
        return v
