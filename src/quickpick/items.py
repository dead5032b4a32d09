"""Search candidates and the projection from caller items onto them."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Generic, Iterable, TypeVar

from .fuzzy import NO_MATCH_SCORE, MatchOutcome

logger = logging.getLogger(__name__)

T = TypeVar("T")

Accessor = Callable[[Any], Any]


def field_getter(name: str) -> Accessor:
    """
    Build an accessor reading a named field off an item.

    Mappings are read by key, everything else by attribute. A missing
    field yields None.
    """

    def get(item: Any) -> Any:
        if isinstance(item, Mapping):
            return item.get(name)
        return getattr(item, name, None)

    get.__name__ = f"get_{name}"
    return get


def _as_accessor(value: str | Accessor | None) -> Accessor | None:
    if value is None or callable(value):
        return value
    return field_getter(value)


@dataclass(frozen=True)
class ItemProjection:
    """
    How to turn a caller item into searchable values.

    Each entry is a callable taking the item, or a field name which is
    turned into one with field_getter. Accessors are resolved once, when
    the projection is built.
    """

    text: Accessor
    key: Accessor | None = None
    fields: dict[str, Accessor] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        text: str | Accessor,
        key: str | Accessor | None = None,
        fields: Mapping[str, Accessor] | Iterable[str] | None = None,
    ) -> "ItemProjection":
        if text is None:
            raise ValueError("a text accessor or field name is required")
        if isinstance(fields, Mapping):
            resolved = {name: _as_accessor(acc) for name, acc in fields.items()}
        else:
            resolved = {name: field_getter(name) for name in (fields or ())}
        return cls(text=_as_accessor(text), key=_as_accessor(key), fields=resolved)

    @classmethod
    def for_strings(cls, keyed: bool = False) -> "ItemProjection":
        """Projection for plain string items, optionally keyed by the string itself."""
        return cls(text=str, key=str if keyed else None)

    def text_of(self, item: Any) -> str:
        try:
            value = self.text(item)
        except Exception:
            logger.debug("Text projection failed for %r", item, exc_info=True)
            return ""
        return "" if value is None else str(value)

    def key_of(self, item: Any) -> str | None:
        if self.key is None:
            return None
        try:
            value = self.key(item)
        except Exception:
            logger.debug("Key projection failed for %r", item, exc_info=True)
            return None
        if value is None:
            return None
        value = str(value)
        return value if value.strip() else None

    def field_values(self, item: Any) -> list[tuple[str, str]]:
        """Return (name, value) for configured fields, skipping blank or unresolvable ones."""
        values = []
        for name, accessor in self.fields.items():
            try:
                raw = accessor(item)
            except Exception:
                logger.debug("Field %r could not be read from %r", name, item, exc_info=True)
                continue
            if raw is None:
                continue
            text = str(raw)
            if not text.strip():
                continue
            values.append((name, text))
        return values


@dataclass(eq=False)
class SearchItem(Generic[T]):
    """One searchable candidate and its match state for the current query."""

    text: str
    value: T
    key: str | None = None
    last_hit: datetime | None = None
    score: int = NO_MATCH_SCORE
    matches: tuple[int, ...] = ()
    other_match_field_name: str | None = None
    other_match_field_value: str | None = None

    @property
    def is_match(self) -> bool:
        return self.score > NO_MATCH_SCORE

    @property
    def is_primary_match(self) -> bool:
        return self.other_match_field_name is None

    def clear_match(self) -> None:
        self.score = NO_MATCH_SCORE
        self.matches = ()
        self.other_match_field_name = None
        self.other_match_field_value = None

    def apply(self, outcome: MatchOutcome, field_name: str | None = None, field_value: str | None = None) -> None:
        self.score = outcome.score
        self.matches = outcome.positions
        self.other_match_field_name = field_name
        self.other_match_field_value = field_value

    @property
    def match_text(self) -> str:
        """The string that matches refer to."""
        if self.other_match_field_value is not None:
            return self.other_match_field_value
        return self.text

    def display_text(self, show_other_matches: bool = True) -> str:
        if show_other_matches and self.other_match_field_name is not None:
            return f"{self.text} ({self.other_match_field_name}: {self.other_match_field_value})"
        return self.text


def build_search_items(data: Iterable[T] | None, projection: ItemProjection) -> list[SearchItem[T]]:
    """Create fresh candidates for every non-None item, in input order."""
    if data is None:
        return []

    items = []
    for value in data:
        if value is None:
            continue
        items.append(
            SearchItem(
                text=projection.text_of(value),
                value=value,
                key=projection.key_of(value),
            )
        )
    return items
