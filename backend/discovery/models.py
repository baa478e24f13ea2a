from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


class NoPostsFoundError(Exception):
    """Every discovery tier was exhausted without a usable post."""


@dataclass
class Candidate:
    title: str
    url: str
    published: datetime | None = None
    source: str = ""

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "url": self.url,
            "published": self.published.isoformat() if self.published else None,
            "source": self.source,
        }


@dataclass
class DiscoveryContext:
    """Seen URLs and collected candidates for a single discovery run."""

    seen: set[str] = field(default_factory=set)
    candidates: list[Candidate] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.candidates)

    def has_seen(self, url: str) -> bool:
        return url in self.seen

    def mark_seen(self, url: str) -> None:
        self.seen.add(url)

    def add(self, candidate: Candidate) -> bool:
        """Adds a candidate unless its URL was already taken. Returns True when added."""
        if any(c.url == candidate.url for c in self.candidates):
            return False
        self.seen.add(candidate.url)
        self.candidates.append(candidate)
        return True
