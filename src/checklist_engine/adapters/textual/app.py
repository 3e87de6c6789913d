"""Executable Textual app that hosts the checklist engine."""

from __future__ import annotations

import argparse
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use checklist_engine.adapters.textual.app"
    ) from exc

from checklist_engine.commands.dispatcher import ShortcutDispatcher
from checklist_engine.document import codec
from checklist_engine.document.model import (
    Checklist,
    ChecklistFile,
    Group,
    Item,
    ItemKind,
    new_id,
)
from checklist_engine.runtime import telemetry
from checklist_engine.session import ChecklistPath, DocumentStore

from .controller import ChecklistEditorAdapter, RowView, UIHooks, render_row


def sample_file() -> ChecklistFile:
    """Small built-in document used when no file is given."""

    items = (
        Item(id=new_id(), kind=ItemKind.TITLE, challenge_text="CABIN"),
        Item(id=new_id(), challenge_text="Seats", response_text="ADJUSTED"),
        Item(id=new_id(), challenge_text="Belts", response_text="FASTENED"),
        Item(id=new_id(), kind=ItemKind.TITLE, challenge_text="ENGINE START"),
        Item(id=new_id(), challenge_text="Mixture", response_text="RICH"),
        Item(id=new_id(), kind=ItemKind.NOTE, challenge_text="Prime if cold", depth=1),
        Item(id=new_id(), challenge_text="Ignition", response_text="START"),
    )
    checklist = Checklist(id=new_id(), name="Preflight", items=items)
    group = Group(id=new_id(), name="Normal", checklists=(checklist,))
    return ChecklistFile(id=new_id(), name="Sample", groups=(group,))


def load_file(path: Optional[str]) -> ChecklistFile:
    if not path:
        return sample_file()
    source = Path(path)
    loaded = codec.loads(source.read_text(encoding="utf-8"), default_name=source.stem)
    return replace(loaded, file_path=str(source), dirty=False)


def create_default_dispatcher(checklist_file: ChecklistFile) -> ShortcutDispatcher:
    """Build a store with ``checklist_file`` open and its first checklist active."""

    store = DocumentStore()
    store.open_file(checklist_file)
    for group, checklist in checklist_file.iter_checklists():
        store.set_active_checklist(ChecklistPath(checklist_file.id, group.id, checklist.id))
        break
    return ShortcutDispatcher(store)


class ChecklistEditorApp(App[None]):
    """Minimal Textual UI embedding the checklist engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#checklist-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, checklist_file: ChecklistFile) -> None:
        super().__init__()
        self._file = checklist_file
        self.dispatcher: ShortcutDispatcher | None = None
        self.adapter: ChecklistEditorAdapter | None = None
        self._rows_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="checklist-area"):
            self._rows_widget = Static("", id="checklist-view")
            yield self._rows_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    async def on_mount(self) -> None:
        self.dispatcher = create_default_dispatcher(self._file)
        hooks = UIHooks(
            update_rows=self._update_rows,
            update_status=self._update_status,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        self.adapter = ChecklistEditorAdapter(self.dispatcher, hooks)
        self.title = self._file.name
        self.set_interval(0.1, self._process_timeouts)

    def _process_timeouts(self) -> None:
        if self.adapter:
            self.adapter.process_timeouts()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key in {"ctrl+c", "ctrl+q"}:
            return
        self.adapter.handle_textual_key(event.key, text=event.character)
        event.stop()

    def _update_rows(self, rows: Sequence[RowView]) -> None:
        if self._rows_widget:
            self._rows_widget.update("\n".join(render_row(row) for row in rows))

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name.startswith("history"):
            self._update_status(name)

    def _log_line(self, line: str) -> None:
        telemetry.record_event(
            "ui.trace",
            level="debug",
            data={"line": line},
            logger_name="checklist_engine.adapters.textual",
        )


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the checklist editor Textual demo.")
    parser.add_argument(
        "path",
        nargs="?",
        default=os.environ.get("CHECKLIST_ENGINE_DEMO_FILE"),
        help="JSON checklist file to open (default: a built-in sample)",
    )
    parser.add_argument(
        "--preset",
        choices=("development", "production", "quiet"),
        default=None,
        help="Telemetry preset to use while the app runs",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.preset or "quiet")
    app = ChecklistEditorApp(load_file(args.path))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
