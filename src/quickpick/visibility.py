"""Which ranked candidates are shown, and keyboard selection over them."""

from typing import Sequence

from .items import SearchItem

NO_SELECTION = -1


def should_item_show(
    is_match: bool,
    showing_index: int,
    is_open: bool,
    max_items_to_show: int,
    has_input_value: bool,
) -> bool:
    """Decide whether the item at a ranked position is displayed."""
    if not is_open:
        return False

    # 0 means no limit
    if max_items_to_show and showing_index >= max_items_to_show:
        return False

    if is_match:
        return True

    # Without input the default list is shown
    return not has_input_value


def visible_items(
    ranked: Sequence[SearchItem],
    is_open: bool,
    max_items_to_show: int,
    has_input_value: bool,
) -> list[SearchItem]:
    """Filter the ranked list down to what is displayed, keeping rank order."""
    if max_items_to_show < 0:
        raise ValueError(f"max_items_to_show must be >= 0, got {max_items_to_show}")

    return [
        item
        for index, item in enumerate(ranked)
        if should_item_show(item.is_match, index, is_open, max_items_to_show, has_input_value)
    ]


def initial_selection(select_first_match: bool) -> int:
    return 0 if select_first_match else NO_SELECTION


def move_selection_down(index: int, visible_count: int) -> int:
    """Next index, wrapping past the last visible item to the first."""
    if index + 1 >= visible_count:
        return 0
    return index + 1


def move_selection_up(index: int, visible_count: int) -> int:
    """Previous index, wrapping before the first visible item to the last."""
    if index - 1 <= NO_SELECTION:
        return visible_count - 1
    return index - 1


def selected_item(visible: Sequence[SearchItem], index: int) -> SearchItem | None:
    if 0 <= index < len(visible):
        return visible[index]
    return None
