"""Test harness for focusline.

Re-exports all public API for convenient imports:
    from tests.harness import FakeHost, run_app, press_and_settle, ...
"""

from tests.harness.fake_host import FakeHost, FakeTimer, default_global_options, default_view_options
from tests.harness.app_runner import run_app
from tests.harness.interactions import press_and_settle, settle

__all__ = [
    "FakeHost",
    "FakeTimer",
    "default_global_options",
    "default_view_options",
    "run_app",
    "press_and_settle",
    "settle",
]
