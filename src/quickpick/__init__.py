"""Fuzzy search, ranking and selection for quick-input pickers."""

from .fuzzy import EXACT_MATCH_SCORE, NO_MATCH_SCORE, MatchOutcome, highlight_segments, match
from .items import ItemProjection, SearchItem, field_getter
from .ranking import RankingOptions, rank, recompute
from .recent import InMemoryRecentRepository, RecentRepository
from .session import InputValueChanged, ItemSelected, QuickInputSession

__version__ = "0.1.0"

__all__ = [
    "EXACT_MATCH_SCORE",
    "NO_MATCH_SCORE",
    "InMemoryRecentRepository",
    "InputValueChanged",
    "ItemProjection",
    "ItemSelected",
    "MatchOutcome",
    "QuickInputSession",
    "RankingOptions",
    "RecentRepository",
    "SearchItem",
    "field_getter",
    "highlight_segments",
    "match",
    "rank",
    "recompute",
]
