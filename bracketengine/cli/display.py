"""
Rich-based terminal output.

RichRenderer is a render-tree visitor: it turns Row / Column / MatchElement
nodes into nested Rich grids and panels without knowing which format built
the tree. The remaining functions print tables for standings and option
schemas and a summary panel for a tournament.
"""

from __future__ import annotations

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from bracketengine.models import EntrantSpot, Node
from bracketengine.options import TournamentOptions
from bracketengine.render import Column, Element, MatchElement, Position, Row
from bracketengine.standings import Standings
from bracketengine.tournaments import Tournament

console = Console(legacy_windows=False)

_VERTICAL = {
    Position.START: "top",
    Position.END: "bottom",
    Position.SPACE_AROUND: "middle",
    Position.SPACE_BETWEEN: "middle",
}


class RichRenderer:
    """Draws a bracket; `source` supplies the entrants and matches behind the indices."""

    def __init__(self, source: Tournament, out: Console | None = None) -> None:
        self._source = source
        self._console = out or console
        self.renderable: RenderableType | None = None

    def render(self, root: Element) -> None:
        self.renderable = self._element(root)
        self._console.print(self.renderable)

    # ------------------------------------------------------------------ #
    # Element conversion                                                   #
    # ------------------------------------------------------------------ #

    def _element(self, element: Element) -> RenderableType:
        match element:
            case MatchElement():
                return self._match(element)
            case Row():
                grid = Table.grid(padding=(0, 2))
                for child in element.children:
                    grid.add_column(vertical=_VERTICAL.get(_position(child), "top"))
                grid.add_row(*(self._element(child) for child in element.children))
                return _labelled(grid, element.label)
            case Column():
                body = Group(*(self._element(child) for child in element.children))
                return _labelled(body, element.label)
        raise TypeError(f"Unknown render element: {element!r}")

    def _match(self, element: MatchElement) -> Panel:
        match_ = self._source.matches[element.index]
        lines = Text()
        for pos, spot in enumerate(match_):
            if pos:
                lines.append("\n")
            lines.append_text(self._slot(spot))
        return Panel(
            lines,
            title=f"[dim]#{element.index}[/]",
            title_align="left",
            border_style="yellow" if element.position is Position.END else "dim",
            width=26,
        )

    def _slot(self, spot: EntrantSpot[Node]) -> Text:
        if spot.is_tbd:
            return Text("TBD", style="dim")
        if spot.is_empty:
            return Text("BYE", style="dim italic")
        node = spot.value
        name = str(self._source.entrants[node.index])
        score = getattr(node.data, "score", None)
        text = Text(name, style="bold green" if node.data.winner else "")
        if score:
            text.append(f"  {score}", style="cyan")
        return text


def _position(element: Element) -> Position | None:
    return getattr(element, "position", None)


def _labelled(body: RenderableType, label: str | None) -> RenderableType:
    if not label:
        return body
    return Group(Text(label, style="bold bright_blue"), body)


# --------------------------------------------------------------------------- #
# Display functions                                                            #
# --------------------------------------------------------------------------- #

def display_tournament(tournament: Tournament) -> None:
    """Summary panel, the bracket itself, then standings where the format has them."""
    names = "  •  ".join(str(e) for e in tournament.entrants)
    played = sum(
        1 for m in tournament.matches
        if any(s.is_entrant and s.value.data.winner for s in m)
    )
    status = "[green]finished[/]" if tournament.is_finished() else "[yellow]in progress[/]"
    console.print()
    console.print(
        Panel(
            f"[bold]{tournament.kind.value.replace('_', ' ').title()}[/]\n\n"
            f"[dim]Entrants ({len(tournament.entrants)}):[/]\n{names}\n\n"
            f"[dim]Matches: {len(tournament.matches)}  •  played: {played}  •  [/]{status}",
            title="[bold green] Bracket [/]",
            border_style="green",
            expand=False,
        )
    )
    console.print()
    tournament.render(RichRenderer(tournament))

    standings = tournament.standings()
    if len(standings):
        display_standings(standings, tournament.entrants)


def display_standings(standings: Standings, entrants: list, title: str = "Standings") -> None:
    table = Table(title=title, show_header=True, header_style="bold", border_style="dim")
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Name", min_width=20)
    for key in standings.keys:
        table.add_column(key, justify="right")

    for rank, entry in enumerate(standings, 1):
        style = "bold yellow" if rank == 1 else ""
        table.add_row(
            str(rank),
            str(entrants[entry.index]),
            *(_format_value(v) for v in entry.values),
            style=style,
        )

    console.print()
    console.print(table)


def display_options(schema: TournamentOptions, kind: str) -> None:
    if not len(schema):
        console.print(f"[dim]{kind} takes no options.[/]")
        return

    table = Table(
        title=f"Options for {kind}",
        show_header=True,
        header_style="bold",
        border_style="dim",
    )
    table.add_column("Key", style="bold")
    table.add_column("Description")
    table.add_column("Type", style="dim")
    table.add_column("Default", justify="right")
    for key, option in schema.items():
        table.add_row(key, option.name, option.kind.value, _format_value(option.value))
    console.print(table)


def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:.1f}"
    return str(value)
