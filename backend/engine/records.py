"""Immutable quote and keyword records shared by every engine module."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict

UNKNOWN_AUTHOR = "Unknown"


@dataclass(frozen=True)
class Quote:
    id: int
    text: str
    author: str
    category: str

    def with_category(self, category: str) -> "Quote":
        return replace(self, category=category)

    def with_id(self, quote_id: int) -> "Quote":
        return replace(self, id=quote_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "author": self.author,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Quote":
        return cls(
            id=int(data.get("id", 0)),
            text=str(data.get("text", "")),
            author=str(data.get("author") or UNKNOWN_AUTHOR),
            category=str(data.get("category", "")),
        )


@dataclass(frozen=True)
class Keyword:
    """A topical category; ``source_url`` points at its provider page."""

    name: str
    source_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "sourceUrl": self.source_url}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Keyword":
        return cls(
            name=str(data["name"]),
            source_url=str(data.get("sourceUrl") or data.get("source_url") or ""),
        )


def renumber(quotes):
    """Return quotes with ids 1..n in their current order."""
    return [q.with_id(i) for i, q in enumerate(quotes, start=1)]
