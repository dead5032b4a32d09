"""Recompute match state for a candidate set and order it for display."""

import logging
from dataclasses import dataclass
from typing import Sequence

from .fuzzy import match
from .items import ItemProjection, SearchItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankingOptions:
    """Tie-break policies applied on top of score ordering."""

    prioritize_shorter_values: bool = False
    prioritize_primary_match: bool = False


def recompute(
    query: str,
    items: Sequence[SearchItem],
    projection: ItemProjection | None = None,
) -> None:
    """
    Refresh every candidate's match state for query.

    The primary text is matched first. Secondary fields from the projection
    replace it only with a strictly higher score, so the primary text and
    earlier fields win ties.
    """
    query = query or ""
    fields = projection is not None and bool(projection.fields)

    for item in items:
        item.clear_match()
        item.apply(match(query, item.text))

        if not fields:
            continue

        for name, value in projection.field_values(item.value):
            outcome = match(query, value)
            if outcome.score > item.score:
                logger.debug("Field %r beat primary text for %r", name, item.text)
                item.apply(outcome, name, value)


def _recency_key(item: SearchItem) -> tuple[bool, float]:
    # Naive and aware datetimes both reduce to epoch seconds
    if item.last_hit is None:
        return (False, 0.0)
    return (True, item.last_hit.timestamp())


def rank(
    query: str,
    items: Sequence[SearchItem],
    options: RankingOptions | None = None,
    use_recency: bool = False,
) -> list[SearchItem]:
    """
    Return candidates in display order. Call recompute() first.

    Empty query: most recently selected first when use_recency is set,
    otherwise input order. Otherwise by score descending, optionally
    preceded by text length ascending and then primary-field matches first.
    Sorting is stable throughout.
    """
    options = options or RankingOptions()

    if not query:
        if use_recency:
            return sorted(items, key=_recency_key, reverse=True)
        return list(items)

    shorter = options.prioritize_shorter_values
    primary = options.prioritize_primary_match

    def sort_key(item: SearchItem) -> tuple[int, int, int]:
        return (
            len(item.text) if shorter else 0,
            0 if (not primary or item.is_primary_match) else 1,
            -item.score,
        )

    return sorted(items, key=sort_key)
