"""Ordered classification tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from ticker_insight.insights.models import Classification


Predicate = Callable[[Mapping[str, Any]], bool]


def always(_: Mapping[str, Any]) -> bool:
    return True


@dataclass(frozen=True)
class ClassificationRule:
    predicate: Predicate
    classification: Classification


def classify(
    rules: Sequence[ClassificationRule], context: Mapping[str, Any]
) -> Classification:
    """Return the classification of the first rule whose predicate holds."""
    for rule in rules:
        if rule.predicate(context):
            return rule.classification
    raise LookupError("classification table has no catch-all rule")
