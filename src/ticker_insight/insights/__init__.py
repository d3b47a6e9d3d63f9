"""Insight engine exports."""

from ticker_insight.insights.engine import (
    FACET_SPECS,
    FacetSpec,
    InsightEngine,
    derive_insights,
)
from ticker_insight.insights.models import Classification, FacetResult, InsightReport
from ticker_insight.insights.rules import ClassificationRule, classify

__all__ = [
    "FACET_SPECS",
    "Classification",
    "ClassificationRule",
    "FacetResult",
    "FacetSpec",
    "InsightEngine",
    "InsightReport",
    "classify",
    "derive_insights",
]
