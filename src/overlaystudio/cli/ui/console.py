"""Rich consoles and the status-line helpers shared by every command.

Human-facing output goes through ``console`` (stdout). Commands whose stdout
is consumed by another program (``probe`` emits JSON, ``render`` emits the
result line) print their status through ``err_console`` instead.
"""

from collections.abc import Mapping

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

console = Console()
err_console = Console(stderr=True)

BRAND_COLOR = "bright_magenta"
SUCCESS_COLOR = "green"
WARNING_COLOR = "yellow"
ERROR_COLOR = "red"
MUTED_COLOR = "dim"


def _status(color: str, mark: str, message: str) -> None:
    console.print(f"[{color}]\\[{mark}][/{color}] {message}")


def print_header(title: str) -> None:
    """Print a centred panel announcing a command."""
    console.print(
        Panel(
            Text(title, style=f"bold {BRAND_COLOR}", justify="center"),
            border_style=BRAND_COLOR,
            padding=(0, 2),
        )
    )


def print_success(message: str) -> None:
    _status(SUCCESS_COLOR, "+", message)


def print_warning(message: str) -> None:
    _status(WARNING_COLOR, "!", message)


def print_error(message: str) -> None:
    _status(ERROR_COLOR, "x", message)


def print_info(message: str) -> None:
    _status(BRAND_COLOR, "*", message)


def print_muted(message: str) -> None:
    console.print(f"[{MUTED_COLOR}]{message}[/{MUTED_COLOR}]")


def format_setting(value: object) -> Text:
    """Display form of a setting value.

    Empty values (``None``, ``""``, ``[]``) show as a dim "not set", booleans
    as yes/no and lists comma-joined. Strings are shown literally, never
    parsed as Rich markup.
    """
    if value is None or value == "" or value == []:
        return Text("not set", style=MUTED_COLOR)
    if isinstance(value, bool):
        return Text("yes" if value else "no")
    if isinstance(value, list | tuple):
        return Text(", ".join(str(item) for item in value))
    return Text(str(value))


def print_key_value_table(
    title: str, data: Mapping[str, object], title_style: str = BRAND_COLOR
) -> None:
    """Print settings as a two-column table.

    Args:
        title: Table title, usually the settings section.
        data: Setting labels mapped to their values; see ``format_setting``.
        title_style: Rich style for the title.
    """
    table = Table(title=title, title_style=title_style, show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, format_setting(value))
    console.print(table)
