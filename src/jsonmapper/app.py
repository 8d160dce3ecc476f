"""Interactive query browser for a JSON document."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path

from rich.json import JSON
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Input, Static

from jsonmapper._value import parse_literal
from jsonmapper.errors import JsonMapError
from jsonmapper.mapper import JsonMapper

HELP_TEXT = (
    "[b]Read :[/b] find [dim]PATH[/]   query [dim][START] CONDITION[/]\n"
    "[b]Edit :[/b] add [dim]PATH VALUE[/]   remove [dim]PATH[/]\n"
    "[b]File :[/b] :w [dim]write[/]  :q [dim]quit[/]  :wq [dim]write+quit[/]"
)


@dataclass
class CommandResult:
    ok: bool
    message: str = ""
    paths: list[str] = field(default_factory=list)
    value: object = None
    changed: bool = False  # document was modified
    quit_after: bool = False


def parse_command(text: str) -> tuple[str, list[str]]:
    """Split a command line into (verb, arguments).

      find PATH                -> ("find", [PATH])
      add PATH VALUE           -> ("add", [PATH, VALUE])   VALUE may hold spaces
      remove PATH              -> ("remove", [PATH])
      query {"gt": 1}          -> ("query", ["", CONDITION])
      query a.b {"gt": 1}      -> ("query", ["a.b", CONDITION])
      :w / :q / :wq            -> ("w", []) ...
    """
    stripped = text.strip()
    if stripped.startswith(":"):
        return stripped[1:].strip(), []

    parts = stripped.split(None, 1)
    verb = parts[0] if parts else ""
    rest = parts[1].strip() if len(parts) > 1 else ""

    if verb == "add":
        return verb, rest.split(None, 1)
    if verb == "query":
        if rest.startswith("{"):
            return verb, ["", rest]
        return verb, rest.split(None, 1)
    return verb, [rest] if rest else []


class JsonMapperApp(App):
    """TUI app: the document on top, a command line below."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #document-scroll {
        height: 1fr;
        border: solid $accent;
    }
    #results {
        height: auto;
        max-height: 10;
        padding: 0 1;
    }
    #status {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    #help-bar {
        height: auto;
        max-height: 5;
        padding: 0 1;
        color: $text-muted;
        background: $surface;
        border-top: solid $accent 50%;
    }
    """

    TITLE = "jsonmapper"
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        mapper: JsonMapper,
        file_path: str = "",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.mapper = mapper
        self.file_path = file_path
        self.unsaved: bool = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with VerticalScroll(id="document-scroll"):
            yield Static(id="document")
        yield Static(id="results")
        yield Static(id="status")
        yield Input(placeholder="find a.b[0]", id="command")
        yield Static(HELP_TEXT, id="help-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = self.file_path or "[new]"
        self._refresh_document()
        self.query_one("#command", Input).focus()

    def _refresh_document(self) -> None:
        opts = self.mapper.format_options
        self.query_one("#document", Static).update(
            JSON(self.mapper.to_json(), indent=opts.indent, sort_keys=opts.sort_keys)
        )
        suffix = " [+]" if self.unsaved else ""
        self.sub_title = (self.file_path or "[new]") + suffix

    # -- Commands ----------------------------------------------------------

    def run_command(self, text: str) -> CommandResult:
        """Execute one command line against the document."""
        verb, args = parse_command(text)
        try:
            if verb == "find":
                value = self.mapper.find(args[0] if args else "")
                message = json.dumps(value, ensure_ascii=False)
                return CommandResult(True, message, value=value)
            if verb == "add":
                if len(args) != 2:
                    return CommandResult(False, "Usage: add PATH VALUE")
                self.mapper.add(args[0], parse_literal(args[1]))
                self.unsaved = True
                return CommandResult(True, f"set {args[0]}", changed=True)
            if verb == "remove":
                if not args:
                    return CommandResult(False, "Usage: remove PATH")
                removed = self.mapper.remove(args[0])
                self.unsaved = True
                return CommandResult(
                    True, f"removed {args[0]}", value=removed, changed=True
                )
            if verb == "query":
                if len(args) != 2:
                    return CommandResult(False, "Usage: query [START] CONDITION")
                try:
                    condition = json.loads(args[1])
                except json.JSONDecodeError as e:
                    return CommandResult(False, f"invalid condition: {e.msg}")
                paths = self.mapper.find_all_with_condition(
                    args[0], condition, ignore_incomparable=True
                )
                return CommandResult(True, f"{len(paths)} match(es)", paths=paths)
            if verb in ("w", "wq"):
                if not self.file_path:
                    return CommandResult(False, "no file name")
                self.mapper.write_file(self.file_path, pretty=True)
                self.unsaved = False
                return CommandResult(
                    True,
                    f"written {self.file_path}",
                    changed=True,
                    quit_after=verb == "wq",
                )
            if verb == "q":
                if self.unsaved:
                    return CommandResult(False, "unsaved changes (:q! discards)")
                return CommandResult(True, quit_after=True)
            if verb == "q!":
                return CommandResult(True, quit_after=True)
        except JsonMapError as e:
            return CommandResult(False, str(e))
        return CommandResult(False, f"unknown command: {text.strip()}")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        result = self.run_command(event.value)
        event.input.value = ""
        if result.quit_after:
            self.exit()
            return
        status = self.query_one("#status", Static)
        status.update(Text(result.message, style="" if result.ok else "bold red"))
        results = self.query_one("#results", Static)
        results.update(Text("\n".join(result.paths)))
        if result.changed:
            self._refresh_document()


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="jsonmapper-tui",
        description="Browse and edit a JSON document with path commands",
    )
    parser.add_argument("file", help="JSON file to open")
    args = parser.parse_args()

    if not Path(args.file).exists():
        print(f"jsonmapper-tui: {args.file}: No such file", file=sys.stderr)
        sys.exit(1)
    try:
        mapper = JsonMapper.from_file(args.file)
    except JsonMapError as e:
        print(f"jsonmapper-tui: {e}", file=sys.stderr)
        sys.exit(1)

    app = JsonMapperApp(mapper, file_path=args.file)
    app.run()


if __name__ == "__main__":
    main()
