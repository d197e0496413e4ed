"""Text formatting for command results."""

from __future__ import annotations

from rich.text import Text

from mixer.output.console import create_console, get_output
from mixer.services.result import ServiceResult

INVENTORY_HEADING = "Programs used by Mixer commands:"


def format_inventory(result: ServiceResult, *, no_color: bool = False) -> str:
    """Render a ``check_all`` result as an aligned ok / not found table.

    Rows keep the order of ``result.data["programs"]``; names are padded to
    ``result.data["width"]`` so the markers line up.
    """
    console = create_console(no_color=no_color)
    console.print(Text(INVENTORY_HEADING, style="mixer.heading"), soft_wrap=True)

    width = result.data.get("width", 0)
    for row in result.data.get("programs", []):
        line = Text("  ")
        line.append(row["name"].ljust(width), style="mixer.program")
        line.append(" ")
        if row["found"]:
            line.append("ok", style="mixer.ok")
        else:
            line.append("not found", style="mixer.missing")
        console.print(line, soft_wrap=True)
    return get_output(console)
