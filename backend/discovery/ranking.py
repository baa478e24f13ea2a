from __future__ import annotations

from typing import Iterable

from .models import Candidate
from .settings import MAX_POSTS


def rank_candidates(candidates: Iterable[Candidate], limit: int = MAX_POSTS) -> list[Candidate]:
    """
    Newest dated candidates first, then undated ones in the order they were
    found, capped at `limit`. Equal dates keep discovery order (the sort is stable).
    """
    items = list(candidates)
    dated = [c for c in items if c.published is not None]
    undated = [c for c in items if c.published is None]
    ranked = sorted(dated, key=lambda c: c.published.timestamp(), reverse=True)[:limit]
    if len(ranked) < limit:
        ranked.extend(undated[:limit - len(ranked)])
    return ranked
