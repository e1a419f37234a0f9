"""
Display helpers for the coup-engine CLI.

Renders match state, logs and the character catalog with rich.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..rules.characters import CHARACTER_DEFINITIONS, GENERAL_ACTIONS
from ..state.schema import (
    BASE_CHARACTERS,
    EXTENSION_CHARACTERS,
    GameState,
    LogEntry,
    LogKind,
)

# Shared console instance
console = Console()

THEME = {
    "primary": "steel_blue",
    "secondary": "grey70",
    "warning": "dark_goldenrod",
    "danger": "dark_red",
    "accent": "cyan",
    "dim": "dim",
    "text": "grey85",
}

LOG_COLORS = {
    LogKind.ACTION: THEME["text"],
    LogKind.CHALLENGE: THEME["warning"],
    LogKind.BLOCK: THEME["accent"],
    LogKind.ELIMINATION: THEME["danger"],
    LogKind.SYSTEM: THEME["primary"],
    LogKind.EXCHANGE: THEME["secondary"],
}


def _card_set(character) -> str:
    if character in BASE_CHARACTERS:
        return "base"
    if character in EXTENSION_CHARACTERS:
        return "extension"
    return "promo"


def render_players(state: GameState, viewer_id: str | None = None, reveal_all: bool = False) -> Table:
    """
    Table of seats, coins and influence.

    Face-down cards are shown only to their owner, or to everyone when
    reveal_all is set (simulation output).
    """
    table = Table(
        title=f"[bold {THEME['primary']}]Turn {state.turn_number}[/bold {THEME['primary']}]"
              f" [{THEME['dim']}]{state.phase.value}[/{THEME['dim']}]",
        box=None,
    )
    table.add_column("Player", style=THEME["secondary"])
    table.add_column("Coins", justify="right")
    table.add_column("Influence")
    table.add_column("Faction", style=THEME["dim"])

    for idx, player in enumerate(state.players):
        cards = []
        for card in player.influence:
            if card.revealed:
                cards.append(f"[{THEME['danger']}][strike]{card.character.value}[/strike][/{THEME['danger']}]")
            elif reveal_all or player.id == viewer_id:
                cards.append(card.character.value)
            else:
                cards.append(f"[{THEME['dim']}]??[/{THEME['dim']}]")
        marker = ">" if idx == state.current_player_index and not state.is_over else " "
        name = f"{marker} {player.name}"
        if player.id == state.winner_id:
            name = f"[bold {THEME['accent']}]{name} (winner)[/bold {THEME['accent']}]"
        elif player.eliminated:
            name = f"[{THEME['dim']}]{name}[/{THEME['dim']}]"
        table.add_row(
            name,
            str(player.coins),
            ", ".join(cards),
            player.faction.value if player.faction else "",
        )
    return table


def show_log(entries: tuple[LogEntry, ...] | list[LogEntry], limit: int | None = None) -> None:
    """Print log entries, newest last."""
    shown = list(entries)[-limit:] if limit else list(entries)
    for entry in shown:
        color = LOG_COLORS.get(entry.kind, THEME["text"])
        console.print(
            f"[{THEME['dim']}]{entry.turn:>3}[/{THEME['dim']}] [{color}]{entry.message}[/{color}]"
        )


def show_state(state: GameState, viewer_id: str | None = None, reveal_all: bool = False) -> None:
    console.print(render_players(state, viewer_id=viewer_id, reveal_all=reveal_all))
    console.print(f"[{THEME['dim']}]Court deck: {len(state.court_deck)} cards[/{THEME['dim']}]")


def show_catalog(enabled=None) -> None:
    """Print the character catalog and the general actions."""
    table = Table(title=f"[bold {THEME['primary']}]Characters[/bold {THEME['primary']}]")
    table.add_column("Character", style=THEME["secondary"])
    table.add_column("Set", style=THEME["dim"])
    table.add_column("Action")
    table.add_column("Cost", justify="right")
    table.add_column("Blocks")

    for character, definition in CHARACTER_DEFINITIONS.items():
        if enabled is not None and character not in enabled:
            continue
        table.add_row(
            character.value,
            _card_set(character),
            f"{definition.action.value}: {definition.action_description}" if definition.action
            else definition.action_description,
            str(definition.action_cost or ""),
            ", ".join(a.value for a in definition.blocks),
        )
    console.print(table)

    general = Table(title=f"[bold {THEME['primary']}]General actions[/bold {THEME['primary']}]")
    general.add_column("Action", style=THEME["secondary"])
    general.add_column("Cost", justify="right")
    general.add_column("Description")
    for action in GENERAL_ACTIONS.values():
        general.add_row(action.type.value, str(action.cost or ""), action.description)
    console.print(general)


def show_result(state: GameState, moves: int) -> None:
    winner = next((p for p in state.players if p.id == state.winner_id), None)
    if winner is None:
        body = f"No winner after {moves} moves (turn {state.turn_number})."
        style = THEME["warning"]
    else:
        body = f"{winner.name} wins on turn {state.turn_number} after {moves} moves."
        style = THEME["accent"]
    console.print(Panel(body, border_style=style))


def show_error(message: str) -> None:
    console.print(f"[{THEME['danger']}]Error:[/{THEME['danger']}] {message}")
