"""Fuzzy subsequence matching with position-aware scoring."""

from dataclasses import dataclass

from thefuzz import fuzz

NO_MATCH_SCORE = -100
EMPTY_QUERY_SCORE = 0
MIN_MATCH_SCORE = 1
EXACT_MATCH_SCORE = 10_000

SEPARATORS = " -_./\\:"

BASE_SCORE = 100
LEADING_PENALTY = 3
MAX_LEADING_PENALTY = 30
BOUNDARY_BONUS = 10
CONSECUTIVE_BONUS = 15
GAP_PENALTY = 2
MAX_GAP_PENALTY = 10


@dataclass(frozen=True)
class MatchOutcome:
    """Result of matching a query against one string."""

    score: int
    positions: tuple[int, ...] = ()

    @property
    def is_match(self) -> bool:
        return self.score > NO_MATCH_SCORE


NO_MATCH = MatchOutcome(NO_MATCH_SCORE)
EMPTY_QUERY_MATCH = MatchOutcome(EMPTY_QUERY_SCORE)


def is_subsequence(query: str, text: str) -> bool:
    """Check if query is a subsequence of text (chars in order, not necessarily adjacent)."""
    it = iter(text)
    return all(char in it for char in query)


def fold_case(text: str) -> str:
    """Lowercase text one character at a time, keeping its length."""
    return "".join(c.lower() if len(c.lower()) == 1 else c for c in text)


def _is_boundary(text: str, index: int) -> bool:
    if index == 0:
        return True
    prev = text[index - 1]
    if prev in SEPARATORS:
        return True
    # camelCase hump
    return prev.islower() and text[index].isupper()


def _align(query_lower: str, text_lower: str, start: int) -> list[int] | None:
    """Greedily match query from start, returning positions or None."""
    positions = [start]
    cursor = start + 1
    for char in query_lower[1:]:
        found = text_lower.find(char, cursor)
        if found == -1:
            return None
        positions.append(found)
        cursor = found + 1
    return positions


def _score_positions(text: str, positions: list[int]) -> int:
    score = BASE_SCORE
    score -= min(positions[0] * LEADING_PENALTY, MAX_LEADING_PENALTY)

    prev = -1
    for pos in positions:
        if _is_boundary(text, pos):
            score += BOUNDARY_BONUS
        if prev >= 0:
            gap = pos - prev - 1
            if gap == 0:
                score += CONSECUTIVE_BONUS
            else:
                score -= min(gap * GAP_PENALTY, MAX_GAP_PENALTY)
        prev = pos

    return score


def match(query: str, text: str) -> MatchOutcome:
    """
    Fuzzy match query against text, case-insensitively.

    Every character of query must appear in text in order. The returned
    score rewards early starts, consecutive characters and word-boundary
    hits; exact (case-insensitive) equality always gets EXACT_MATCH_SCORE.
    An empty query matches everything with EMPTY_QUERY_SCORE and no positions.
    A failed match returns NO_MATCH.
    """
    if not query:
        return EMPTY_QUERY_MATCH

    query_lower = fold_case(query)
    text_lower = fold_case(text)

    if query_lower == text_lower:
        return MatchOutcome(EXACT_MATCH_SCORE, tuple(range(len(text))))

    if len(query_lower) > len(text_lower) or not is_subsequence(query_lower, text_lower):
        return NO_MATCH

    best_score = None
    best_positions: list[int] = []
    start = text_lower.find(query_lower[0])
    while start != -1:
        positions = _align(query_lower, text_lower, start)
        if positions is None:
            # later starts can only have fewer characters left
            break
        score = _score_positions(text, positions)
        if best_score is None or score > best_score:
            best_score = score
            best_positions = positions
        start = text_lower.find(query_lower[0], start + 1)

    if best_score is None:
        return NO_MATCH

    # Overall similarity, mostly favours texts close in length to the query
    best_score += fuzz.ratio(query_lower, text_lower) // 10

    best_score = max(MIN_MATCH_SCORE, min(best_score, EXACT_MATCH_SCORE - 1))
    return MatchOutcome(best_score, tuple(best_positions))


def highlight_segments(text: str, positions: tuple[int, ...] | list[int]) -> list[tuple[str, bool]]:
    """
    Split text into runs of (chunk, is_matched) for highlighting.

    Positions outside the text are ignored.
    """
    if not text:
        return []

    marked = set(positions)
    segments: list[tuple[str, bool]] = []
    chunk_start = 0
    current = 0 in marked

    for i in range(1, len(text)):
        flag = i in marked
        if flag != current:
            segments.append((text[chunk_start:i], current))
            chunk_start = i
            current = flag

    segments.append((text[chunk_start:], current))
    return segments
