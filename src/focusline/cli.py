"""CLI entry point for focusline."""

import argparse
import logging
from pathlib import Path

import focusline.app.settings_store
import focusline.io.logging_setup
from focusline.io.flag_store import FlagStore
from focusline.tui.app import FocuslineApp

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Editor-like demo host for focusline's redraw scheduler, caches and focus mode"
    )
    parser.add_argument(
        "--views", type=int, default=2, help="Number of panes to open at startup (default: 2)"
    )
    parser.add_argument(
        "--no-restore",
        dest="restore",
        action="store_false",
        help="Do not re-enter focus mode even if the previous session ended in it",
    )
    parser.add_argument(
        "--state-file",
        type=str,
        default=None,
        help="Focus-mode flag file (default: $XDG_DATA_HOME/focusline/focus_mode_state)",
    )
    parser.add_argument(
        "--redraw-delay-ms",
        type=int,
        default=None,
        help="Override the redraw coalescing window",
    )
    parser.add_argument(
        "--session",
        type=str,
        default="focusline",
        help="Session name used for the log file name (default: focusline)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    runtime = focusline.io.logging_setup.configure(args.session, console="textual")
    logger.info("logging to %s at %s", runtime.file_path, runtime.level_name)

    overrides = {}
    if args.redraw_delay_ms is not None:
        overrides["redraw_delay_ms"] = args.redraw_delay_ms
    settings = focusline.app.settings_store.create(overrides)

    flag_store = FlagStore(None if args.state_file is None else Path(args.state_file).expanduser())
    app = FocuslineApp(
        flag_store=flag_store,
        settings=settings,
        restore=args.restore,
        views=args.views,
    )
    try:
        app.run()
    finally:
        flag_store.close()


if __name__ == "__main__":
    main()
