"""Aggregation-run orchestration."""

from .orchestrator import PipelineStage, SearchOrchestrator, build_store, print_articles

__all__ = ["PipelineStage", "SearchOrchestrator", "build_store", "print_articles"]
