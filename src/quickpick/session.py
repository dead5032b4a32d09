"""State of one quick-input widget: query, dropdown, selection and events."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Generic, Hashable, Iterable, TypeVar, Union

from .config import Config
from .items import ItemProjection, SearchItem, build_search_items, field_getter
from .ranking import rank, recompute
from .recent import RecentRepository
from .visibility import (
    initial_selection,
    move_selection_down,
    move_selection_up,
    selected_item,
    visible_items,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

KEY_DOWN = "ArrowDown"
KEY_UP = "ArrowUp"
KEY_ENTER = "Enter"
KEY_ESCAPE = "Escape"


@dataclass(frozen=True)
class ItemSelected:
    """A candidate was chosen, or the selection was cleared (value is None)."""

    value: Any


@dataclass(frozen=True)
class InputValueChanged:
    """The raw input text changed."""

    value: str


Event = Union[ItemSelected, InputValueChanged]
EventSink = Callable[[Event], None]


class QuickInputSession(Generic[T]):
    """
    Drives matching, ranking and visibility for one input box.

    The embedder feeds it items, keystrokes and focus changes; it reports
    back through typed events passed to on_event. Recency lookups are the
    only awaited calls.
    """

    def __init__(
        self,
        projection: ItemProjection | None = None,
        config: Config | None = None,
        recent_repository: RecentRepository | None = None,
        on_event: EventSink | None = None,
    ):
        self.config = config or Config()
        self.recent_repository = recent_repository
        self.on_event = on_event
        self.projection = self._resolve_projection(projection)
        self.ranking_options = self.config.ranking_options()

        self.input_value = ""
        self.is_open = False
        self.is_focused = False
        self.selected_index = initial_selection(self.config.list.select_first_match)
        self.last_selected: SearchItem[T] | None = None

        self.items: list[SearchItem[T]] = []
        self._ranked: list[SearchItem[T]] = []
        self._previous_count = 0
        self._generation: Hashable | None = None

    def _resolve_projection(self, projection: ItemProjection | None) -> ItemProjection:
        if projection is None:
            projection = ItemProjection.for_strings(keyed=self.recent_repository is not None)

        extra = [
            name for name in self.config.ranking.other_match_fields if name not in projection.fields
        ]
        if extra:
            fields = dict(projection.fields)
            fields.update({name: field_getter(name) for name in extra})
            projection = ItemProjection(projection.text, projection.key, fields)
        return projection

    # State

    @property
    def has_input_value(self) -> bool:
        return self.input_value != ""

    @property
    def ranked(self) -> list[SearchItem[T]]:
        return self._ranked

    @property
    def visible(self) -> list[SearchItem[T]]:
        return visible_items(
            self._ranked,
            self.is_open,
            self.config.list.max_items_to_show,
            self.has_input_value,
        )

    @property
    def selected_item(self) -> SearchItem[T] | None:
        return selected_item(self.visible, self.selected_index)

    @property
    def has_results(self) -> bool:
        """False when there is input and nothing matches it."""
        return not self.has_input_value or any(item.is_match for item in self.items)

    def _emit(self, event: Event) -> None:
        if self.on_event is not None:
            self.on_event(event)

    # Items

    async def set_items(self, data: Iterable[T] | None, generation: Hashable | None = None) -> bool:
        """
        Replace the candidate set if it changed.

        Without a generation token a change is detected by item count only,
        so a same-size replacement is ignored. Passing a token switches
        detection to token comparison. Returns True when rebuilt.
        """
        data = None if data is None else list(data)
        count = 0 if data is None else len(data)

        if generation is not None:
            changed = generation != self._generation
            self._generation = generation
        else:
            changed = count != self._previous_count

        if not changed:
            return False

        self._previous_count = count
        self.items = build_search_items(data, self.projection)
        await self._load_recents()
        logger.debug("Initialized %d search items", len(self.items))

        self.calculate()
        return True

    async def _load_recents(self) -> None:
        if self.recent_repository is None:
            return

        for item in self.items:
            if item.key is None:
                continue
            try:
                item.last_hit = await self.recent_repository.get_hits_for_key(item.key)
            except Exception as e:
                logger.warning("Recent lookup failed for key %r: %s", item.key, e)
                item.last_hit = None

    def calculate(self) -> None:
        """Recompute matches for the current input and reset the selection."""
        self.selected_index = initial_selection(self.config.list.select_first_match)
        recompute(self.input_value, self.items, self.projection)
        self._ranked = rank(
            self.input_value,
            self.items,
            self.ranking_options,
            use_recency=self.recent_repository is not None,
        )

    # Input events

    def change_input(self, value: str | None) -> None:
        self.input_value = value or ""
        self._emit(InputValueChanged(self.input_value))
        self.is_open = self.config.list.open_on_focus or self.has_input_value
        self.calculate()

    def focus(self) -> None:
        if self.config.list.open_on_focus:
            self.is_open = True
        self.is_focused = True

    async def blur(self) -> None:
        """Close the list and, when custom values are not allowed, undo free text."""
        self.is_open = False

        if not self.config.input.allow_custom_values and (
            not self.input_value.strip()
            or all(item.text != self.input_value for item in self.items)
        ):
            if not self.input_value.strip():
                if self.last_selected is not None:
                    await self.select(None)
                    self.calculate()
            else:
                self.input_value = self.last_selected.text if self.last_selected else ""

        self.is_focused = False

    async def key_down(self, key: str) -> None:
        if key == KEY_DOWN:
            self.selected_index = move_selection_down(self.selected_index, len(self.visible))
            self.is_open = True
        elif key == KEY_UP:
            self.selected_index = move_selection_up(self.selected_index, len(self.visible))
            self.is_open = True
        elif key == KEY_ENTER:
            item = self.selected_item
            if item is not None:
                await self.select(item)
            self.calculate()
        elif key == KEY_ESCAPE:
            if not self.has_input_value:
                self.is_open = not self.is_open
            elif self.config.input.clear_on_escape:
                self.clear_input()

    async def select(self, item: SearchItem[T] | None) -> None:
        """Choose item (None clears the selection) and report it."""
        self.last_selected = item
        self.input_value = item.text if item is not None else ""

        if self.recent_repository is not None and item is not None and item.key is not None:
            try:
                await self.recent_repository.add_hit(item.key)
            except Exception as e:
                logger.warning("Could not record recent hit for key %r: %s", item.key, e)
            item.last_hit = datetime.now()

        self._emit(ItemSelected(item.value if item is not None else None))

        if self.config.input.clear_after_selection:
            self._clear(emit=False)
        else:
            self.calculate()

        self.is_open = False

    def clear_input(self) -> None:
        self._clear(emit=self.config.input.emit_null_on_input_clear)

    def _clear(self, emit: bool) -> None:
        self.last_selected = None
        self.input_value = ""

        if self.is_focused:
            self.is_open = self.config.list.open_on_focus

        if emit:
            self._emit(ItemSelected(None))

        self.calculate()
