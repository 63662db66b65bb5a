"""Terminal output for the ``oassdk`` command line.

Two streams, never mixed:

* **stdout** carries the data a generator or script consumes: resolved
  documents, metadata records and tables.
* **stderr** carries everything addressed to a human: status lines,
  warnings, validation problems and hints.

Rendering depends on the resolved :class:`OutputFormat`. Rich styling is
only used when stdout is an interactive terminal and colour is allowed
(``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` all turn it off).

Commands use the module-level functions, which forward to a single
:class:`OutputManager` installed by :func:`~oassdk.app.main_callback`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

_THEME = "monokai"


class OutputFormat(str, Enum):
    """How data on stdout is rendered. ``AUTO`` picks ``RICH`` or ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# Diagnostic kinds: (plain prefix, rich template, hidden by --quiet)
_DIAGNOSTICS: dict[str, tuple[str, str, bool]] = {
    "info": ("", "{message}", True),
    "success": ("", "[green]{message}[/green]", True),
    "warning": ("Warning: ", "[yellow]Warning:[/yellow] {message}", False),
    "error": ("Error: ", "[bold red]Error:[/bold red] {message}", False),
    "suggest": ("→ ", "[dim]→ {message}[/dim]", True),
}


class OutputManager:
    """Routes data to stdout and diagnostics to stderr in the chosen format.

    Args:
        format: Requested format; ``AUTO`` is resolved from the terminal.
        no_color: Disable colour and markup on both streams.
        quiet: Hide info, success and hint lines.
        verbose: Show debug lines.
        output_file: Write data here instead of stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file
        self._format = _resolve_format(format, self._no_color)

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_structured(self, data: Any) -> None:
        """Print a record (metadata, merged schema, config) as data.

        JSON mode and output files get indented JSON. Plain mode prints one
        ``key<TAB>value`` line per entry, with nested values inlined as
        compact JSON. Rich mode highlights the JSON.
        """
        if self._output_file:
            self._write_to_file(_to_json(data))
        elif self._format == OutputFormat.JSON:
            self.print_data(_to_json(data))
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        elif isinstance(data, (dict, list)):
            self._stdout.print(_highlight(_to_json(data), "json"))
        else:
            self._stdout.print(str(data))

    def print_document(self, text: str, syntax: str = "yaml") -> None:
        """Print serialised OpenAPI text, highlighted only in Rich mode."""
        if self._output_file:
            self._write_to_file(text)
        elif self._format == OutputFormat.RICH:
            self._stdout.print(_highlight(text, syntax))
        else:
            self.print_data(text.removesuffix("\n"))

    def print_data(self, text: str) -> None:
        """Write *text* and a newline to stdout, or append it to the output file."""
        if not self._output_file:
            print(text, file=sys.stdout, flush=True)
            return
        with open(self._output_file, "a", encoding="utf-8") as f:
            f.write(text if text.endswith("\n") else text + "\n")

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, a JSON array of objects, or TSV."""
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json([dict(zip(headers, row)) for row in rows]))
            return
        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        self._diagnostic("info", message)

    def success(self, message: str) -> None:
        self._diagnostic("success", message)

    def warning(self, message: str) -> None:
        self._diagnostic("warning", message)

    def error(self, message: str) -> None:
        self._diagnostic("error", message)

    def suggest(self, message: str) -> None:
        """Print a next-step hint, e.g. which flag would fix a failure."""
        self._diagnostic("suggest", message)

    def problems(self, summary: str, items: list[str]) -> None:
        """Print an error headline followed by one bullet per problem.

        Used for validation failures, where every problem found is reported
        at once. Never hidden by ``--quiet``.
        """
        self.error(summary)
        for item in items:
            if self._no_color:
                print(f"  - {item}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"  [red]-[/red] {item}", highlight=False)

    def debug(self, message: str) -> None:
        """Print a trace line; only with ``--verbose``."""
        if not self._verbose:
            return
        if self._no_color:
            print(f"[debug] {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[dim]\\[debug] {message}[/dim]")

    def _diagnostic(self, kind: str, message: str) -> None:
        prefix, template, quietable = _DIAGNOSTICS[kind]
        if quietable and self._quiet:
            return
        if self._no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(template.format(message=message))

    def _write_to_file(self, content: str) -> None:
        assert self._output_file is not None
        with open(self._output_file, "w", encoding="utf-8") as f:
            f.write(content if content.endswith("\n") else content + "\n")


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    if _is_tty() and not no_color:
        return OutputFormat.RICH
    return OutputFormat.PLAIN


def _to_json(data: Any) -> str:
    if isinstance(data, str):
        return data
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _plain_lines(data: Any) -> list[str]:
    if isinstance(data, dict):
        return [
            f"{key}\t{_inline(value)}" for key, value in data.items()
        ]
    if isinstance(data, list):
        return [
            "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
            for item in data
        ]
    return [str(data)]


def _inline(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def _highlight(text: str, syntax: str) -> Syntax:
    return Syntax(text, syntax, theme=_THEME, word_wrap=True)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests call this between cases)."""
    global _output
    _output = None


def print_structured(data: Any) -> None:
    get_output().print_structured(data)


def print_document(text: str, syntax: str = "yaml") -> None:
    get_output().print_document(text, syntax)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def problems(summary: str, items: list[str]) -> None:
    get_output().problems(summary, items)


def debug(message: str) -> None:
    get_output().debug(message)
