"""Tests for the Textual picker."""

import pytest

from quickpick.config import Config
from quickpick.fuzzy import match
from quickpick.items import ItemProjection, SearchItem
from quickpick.tui import MATCH_STYLE, QuickPickApp, render_candidate

FRUITS = ["Apple", "Banana", "Grape"]


class TestRenderCandidate:
    """Test rich text rendering of candidates."""

    def test_highlights_matched_characters(self):
        item = SearchItem(text="Apple", value="Apple")
        item.apply(match("ap", "Apple"))

        line = render_candidate(item)

        assert line.plain == "Apple"
        assert [(span.start, span.end, span.style) for span in line.spans] == [(0, 2, MATCH_STYLE)]

    def test_no_highlight(self):
        item = SearchItem(text="Apple", value="Apple")
        item.apply(match("ap", "Apple"))
        assert render_candidate(item, highlight=False).spans == []

    def test_other_field_match(self):
        item = SearchItem(text="Zebra", value="Zebra")
        item.apply(match("ap", "ap"), "code", "ap")

        assert render_candidate(item).plain == "Zebra (code: ap)"
        assert render_candidate(item, show_other_matches=False).plain == "Zebra"


class TestQuickPickApp:
    """Test the picker application."""

    @pytest.mark.asyncio(loop_scope="function")
    async def test_typing_filters_list(self):
        app = QuickPickApp(FRUITS, config=Config())
        async with app.run_test() as pilot:
            await pilot.pause()
            assert [item.text for item in app.session.visible] == FRUITS

            await pilot.press("a", "p")
            await pilot.pause()
            assert app.session.input_value == "ap"
            assert [item.text for item in app.session.visible] == ["Apple", "Grape"]

    @pytest.mark.asyncio(loop_scope="function")
    async def test_enter_returns_selection(self):
        app = QuickPickApp(FRUITS, config=Config())
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("g", "r")
            await pilot.press("enter")
            await pilot.pause()
        assert app.return_value == "Grape"

    @pytest.mark.asyncio(loop_scope="function")
    async def test_arrow_keys_move_selection(self):
        app = QuickPickApp(FRUITS, config=Config())
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("up")
            await pilot.pause()
            assert app.session.selected_index == 2
            await pilot.press("enter")
            await pilot.pause()
        assert app.return_value == "Grape"

    @pytest.mark.asyncio(loop_scope="function")
    async def test_escape_on_empty_input_quits(self):
        app = QuickPickApp(FRUITS, config=Config())
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("escape")
            await pilot.pause()
        assert app.return_value is None

    @pytest.mark.asyncio(loop_scope="function")
    async def test_dict_items(self):
        data = [{"name": "Zebra", "code": "zz-9"}, {"name": "Apple", "code": "ap-1"}]
        projection = ItemProjection.build("name", fields=["code"])
        app = QuickPickApp(data, projection=projection, config=Config())
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("z", "z", "9")
            await pilot.press("enter")
            await pilot.pause()
        assert app.return_value == {"name": "Zebra", "code": "zz-9"}
