"""Editor-like panes: the views the Textual host exposes to focusline.

Each pane owns its view-local options and renders them itself; the host
decides when to call refresh_content().
"""

from __future__ import annotations

from rich.syntax import Syntax
from rich.text import Text
from textual.widgets import Static

DEFAULT_VIEW_OPTIONS: dict[str, object] = {
    "number": True,
    "signcolumn": "yes",
    "cursorline": True,
    "cursorcolumn": False,
    "list": False,
    "spell": False,
    "wrap": False,
}

CURSORLINE_STYLE = "on grey23"

SAMPLE_DOCUMENTS: list[tuple[str, str, str]] = [
    (
        "scheduler.py",
        "python",
        "def schedule(kind):\n"
        "    pending.add(kind)\n"
        "    if timer is None:\n"
        "        timer = start(16, fire)\n"
        "\n"
        "def fire():\n"
        "    redraw(pending)\n"
        "    pending.clear()\n",
    ),
    (
        "NOTES.md",
        "markdown",
        "# Focus mode\n"
        "\n"
        "Toggle with `z`. Everything comes back exactly\n"
        "the way it was when you toggle again.\n",
    ),
    (
        "cache.lua",
        "lua",
        "local cache = Cache:new(10, 500)\n"
        "cache:set(key, value)\n"
        "return cache:get(key)\n",
    ),
]


class EditorPane(Static, can_focus=True):
    DEFAULT_CSS = """
    EditorPane {
        width: 1fr;
        height: 1fr;
        border: round $primary-darken-2;
        padding: 0 1;
    }
    EditorPane:focus {
        border: round $accent;
    }
    """

    def __init__(self, view_id: int, title: str, filetype: str, text: str) -> None:
        super().__init__(id=f"view-{view_id}")
        self.view_id = view_id
        self.file_name = title
        self.filetype = filetype
        self.lines = text.rstrip("\n").split("\n")
        self.view_options: dict[str, object] = dict(DEFAULT_VIEW_OPTIONS)
        self.cursor_line = 0
        self.border_title = title

    def move_cursor(self, delta: int) -> None:
        self.cursor_line = max(0, min(len(self.lines) - 1, self.cursor_line + delta))

    def build(self, syntax_on: bool) -> Text:
        code = "\n".join(self.lines)
        if syntax_on:
            body = Syntax(code, self.filetype, theme="ansi_dark").highlight(code)
        else:
            body = Text(code)
        rows = body.split("\n", allow_blank=True)[: len(self.lines)]

        out = Text(no_wrap=not self.view_options.get("wrap"))
        for i, line in enumerate(rows):
            row = Text()
            if self.view_options.get("signcolumn") == "yes":
                row.append("  ")
            if self.view_options.get("number"):
                row.append(f"{i + 1:>3} ", style="dim")
            row.append_text(line)
            if self.view_options.get("list"):
                row.append("$", style="dim")
            if self.view_options.get("cursorline") and i == self.cursor_line:
                row.stylize(CURSORLINE_STYLE)
            out.append_text(row)
            out.append("\n")
        return out

    def refresh_content(self, syntax_on: bool) -> None:
        self.update(self.build(syntax_on))

    def on_focus(self) -> None:
        view_entered = getattr(self.app, "view_entered", None)
        if view_entered is not None:
            view_entered(self.view_id)
