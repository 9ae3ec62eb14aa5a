"""Pytest configuration and shared fixtures for focusline tests."""

import pytest

import focusline.io.logging_setup
from focusline.io.flag_store import FlagStore
from tests.harness import FakeHost


@pytest.fixture
def host():
    """Two open views, manual clock, nothing pending."""
    return FakeHost()


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "data" / "focus_mode_state"


@pytest.fixture
def flag_store(state_file):
    store = FlagStore(state_file)
    yield store
    store.close()


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Keep every test away from the real XDG directories and log configuration."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))
    monkeypatch.setenv("FOCUSLINE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("FOCUSLINE_LOG_FILE", raising=False)
    monkeypatch.delenv("FOCUSLINE_LOG_LEVEL", raising=False)
    monkeypatch.setattr(focusline.io.logging_setup, "_RUNTIME", None)
    yield
    focusline.io.logging_setup.reset()
