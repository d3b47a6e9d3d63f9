"""Insight report models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass(frozen=True)
class Classification:
    """A labeled outcome; description/advice may hold str.format placeholders."""

    level: str
    emoji: str
    description: str
    advice: str


@dataclass(frozen=True)
class FacetResult:
    facet: str
    level: str
    emoji: str
    description: str
    advice: str
    values: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_classification(
        cls, facet: str, classification: Classification, **values: Any
    ) -> "FacetResult":
        return cls(
            facet=facet,
            level=classification.level,
            emoji=classification.emoji,
            description=classification.description.format(**values),
            advice=classification.advice.format(**values),
            values=dict(values),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "level": self.level,
            "emoji": self.emoji,
            "description": self.description,
            "advice": self.advice,
        }
        payload.update(self.values)
        return payload

    def to_text(self) -> str:
        return f"{self.emoji} {self.description}\n   → {self.advice}"


@dataclass(frozen=True)
class InsightReport:
    facets: Dict[str, FacetResult] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.facets

    def __iter__(self) -> Iterator[FacetResult]:
        return iter(self.facets.values())

    def __len__(self) -> int:
        return len(self.facets)

    def get(self, name: str) -> Optional[FacetResult]:
        return self.facets.get(name)

    def names(self) -> List[str]:
        return list(self.facets)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: result.to_dict() for name, result in self.facets.items()}

    def to_text(self) -> str:
        return "\n".join(result.to_text() for result in self.facets.values())
