"""Tests for statusline fragments, cursor throttling and the cached tabline."""

import pytest

from focusline.app.redraw_scheduler import CoalescingScheduler
from focusline.app.statusline import CursorStatusRefresher, StatuslineInfo
from focusline.app.tabline import TablineProvider
from focusline.core.expiring_cache import ExpiringCache
from focusline.host import RedrawKind, SearchCount, TabInfo


@pytest.fixture
def scheduler(host):
    return CoalescingScheduler(host)


@pytest.fixture
def search_cache(host):
    return ExpiringCache(10, 500, clock=host.now_ms)


@pytest.fixture
def info(host, scheduler, search_cache):
    return StatuslineInfo(host, scheduler, search_cache)


class TestSearchInfo:
    def test_formats_current_of_total(self, host, info):
        host.hlsearch, host.pattern = True, "def"
        host.count = SearchCount(3, 12)
        assert info.search_info() == " 3/12"

    def test_empty_when_highlight_off(self, host, info):
        host.hlsearch, host.pattern = False, "def"
        host.count = SearchCount(1, 2)
        assert info.search_info() == ""
        assert host.search_calls == 0

    def test_empty_when_no_matches(self, host, info):
        host.hlsearch, host.pattern = True, "zzz"
        host.count = SearchCount(0, 0)
        assert info.search_info() == ""

    def test_empty_when_count_fails(self, host, info):
        host.hlsearch, host.pattern = True, "("
        host.count_error = RuntimeError("E54: Unmatched (")
        assert info.search_info() == ""

    def test_memoized_within_ttl(self, host, info):
        host.hlsearch, host.pattern = True, "def"
        host.count = SearchCount(1, 4)
        assert info.search_info() == " 1/4"
        host.count = SearchCount(2, 4)
        host.advance(400)
        assert info.search_info() == " 1/4"
        assert host.search_calls == 1

        host.advance(200)
        assert info.search_info() == " 2/4"
        assert host.search_calls == 2

    def test_empty_results_are_memoized_too(self, host, info):
        host.hlsearch, host.pattern = True, "zzz"
        host.count = None
        info.search_info()
        info.search_info()
        assert host.search_calls == 1

    def test_new_pattern_is_a_new_key(self, host, info):
        host.hlsearch, host.pattern = True, "def"
        host.count = SearchCount(1, 4)
        info.search_info()
        host.pattern = "class"
        host.count = SearchCount(1, 1)
        assert info.search_info() == " 1/1"

    def test_clear_search_empties_cache(self, host, info, search_cache):
        host.hlsearch, host.pattern = True, "def"
        host.count = SearchCount(1, 4)
        info.search_info()
        assert info.clear_search() is True
        assert host.hlsearch is False
        assert len(search_cache) == 0
        host.advance(16)
        assert host.redraws == [frozenset({RedrawKind.STATUS})]

    def test_clear_search_noop_when_off(self, host, info, search_cache):
        search_cache.set((True, "x"), " 1/1")
        assert info.clear_search() is False
        assert len(search_cache) == 1


class TestMacroInfo:
    def test_recording_indicator(self, host, info):
        assert info.macro_info() == ""
        host.register = "q"
        info.on_recording_enter()
        assert info.macro_info() == " REC @q "
        info.on_recording_leave()
        assert info.macro_info() == ""

    def test_recording_changes_schedule_one_status_redraw(self, host, info):
        host.register = "a"
        info.on_recording_enter()
        info.on_recording_leave()
        host.advance(16)
        assert host.redraws == [frozenset({RedrawKind.STATUS})]


class TestCursorStatusRefresher:
    def test_throttles_to_one_request_per_window(self, host, scheduler):
        host.hlsearch = True
        refresher = CursorStatusRefresher(host, scheduler, throttle_ms=100)
        for _ in range(10):
            refresher.on_cursor_moved()
            host.advance(5)
        assert len(host.live_timers) == 1
        host.advance(100)
        assert host.redraws == [frozenset({RedrawKind.STATUS})]

    def test_no_redraw_without_highlight(self, host, scheduler):
        refresher = CursorStatusRefresher(host, scheduler, throttle_ms=100)
        refresher.on_cursor_moved()
        host.advance(200)
        assert host.redraws == []
        assert refresher.pending is False

    def test_stop_cancels_timer(self, host, scheduler):
        host.hlsearch = True
        refresher = CursorStatusRefresher(host, scheduler, throttle_ms=100)
        refresher.on_cursor_moved()
        refresher.stop()
        host.advance(200)
        assert host.redraws == []


class TestTabline:
    def _provider(self, host, active=False):
        state = {"active": active}
        cache = ExpiringCache(5, 200, clock=host.now_ms)
        return TablineProvider(host, cache, lambda: state["active"]), state, cache

    def test_labels_with_names_and_modified_marker(self, host):
        provider, _, _ = self._provider(host)
        assert provider.render().plain == " 1:a.py  2:b.md+ "

    def test_focus_mode_collapses_to_numbers(self, host):
        provider, state, _ = self._provider(host)
        state["active"] = True
        assert provider.render().plain == " 1  2 "

    def test_current_tab_is_selected_style(self, host):
        host.tab_index = 2
        provider, _, _ = self._provider(host)
        text = provider.render()
        styles = {str(span.style) for span in text.spans}
        assert "bold reverse" in styles

    def test_cached_until_invalidated(self, host):
        provider, _, cache = self._provider(host)
        first = provider.render()
        host.tab_list = [TabInfo("renamed.py"), TabInfo("b.md")]
        assert provider.render() is first
        provider.invalidate(True)
        assert provider.render().plain.startswith(" 1:renamed.py")

    def test_unnamed_tab(self, host):
        host.tab_list = [TabInfo("")]
        provider, _, _ = self._provider(host)
        assert provider.render().plain == " 1:[No Name] "
