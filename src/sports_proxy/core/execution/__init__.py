"""Tool execution and the resolve/enrich pipeline."""

from .executor import ToolExecutor
from .pipeline import ResolutionEnrichmentPipeline

__all__ = ["ToolExecutor", "ResolutionEnrichmentPipeline"]
