"""Tests for per-filetype tuning."""

import pytest

from focusline.app.filetype_tuning import (
    FAST_GLOBAL_SETTINGS,
    HEAVY_VIEW_SETTINGS,
    FiletypeTuner,
)
from focusline.app.runtime import Runtime
from focusline.core.expiring_cache import ExpiringCache
from focusline.host import BufferInfo, HostError, HostEvent


@pytest.fixture
def tuner(host):
    return FiletypeTuner(host, ExpiringCache(20, 2000, clock=host.now_ms))


def test_fast_filetype_sets_sync_window(host, tuner):
    host.buffer = BufferInfo(1, "python", 40)
    assert tuner.on_filetype() == FAST_GLOBAL_SETTINGS
    assert host.global_options["syntax_sync_minlines"] == 200
    assert host.global_options["syntax_sync_maxlines"] == 500


def test_heavy_filetype_only_when_long(host, tuner):
    host.buffer = BufferInfo(2, "json", 1000)
    assert tuner.on_filetype() == {}

    host.buffer = BufferInfo(3, "json", 1001)
    assert tuner.on_filetype() == HEAVY_VIEW_SETTINGS
    assert host.view_options["w1"]["wrap"] is True
    assert "wrap" not in host.view_options["w2"]


def test_same_buffer_tuned_once_within_ttl(host, tuner):
    host.buffer = BufferInfo(1, "lua", 10)
    tuner.on_filetype()
    calls = len(host.set_calls)
    assert tuner.on_filetype() == {}
    assert len(host.set_calls) == calls

    host.advance(2001)
    assert tuner.on_filetype() == FAST_GLOBAL_SETTINGS


def test_other_filetypes_untouched(host, tuner):
    host.buffer = BufferInfo(4, "rust", 5000)
    assert tuner.on_filetype() == {}
    assert host.set_calls == []


def test_no_buffer(host, tuner):
    assert tuner.on_filetype() == {}


def test_host_errors_are_skipped_and_buffer_still_marked(host, tuner):
    original = host.set_option

    def flaky(name, value, view=None):
        if name == "wrap":
            raise HostError("view closed")
        original(name, value, view)

    host.set_option = flaky
    host.buffer = BufferInfo(5, "json", 5000)
    applied = tuner.on_filetype()

    assert "wrap" not in applied
    assert applied["foldmethod"] == "manual"
    assert host.view_options["w1"]["synmaxcol"] == 300
    assert tuner.on_filetype() == {}


def test_filetype_event_survives_closed_view(host, flag_store):
    runtime = Runtime(host, flag_store)
    runtime.bind()
    host.buffer = BufferInfo(6, "json", 5000)
    host.current = "gone"
    host.emit(HostEvent.FILETYPE)
    assert runtime.syntax_cache.get("json_6") is True
