"""
Console presentation module.

Renders encounter state and the combat log with rich tables, and asks the
player for the next command through prompt_toolkit.
"""

from prompt_toolkit import ANSI, PromptSession
from rich.table import Table

from essence_combat.combat.commands import Attack, Command, EndTurn, Flee, UseSkill
from essence_combat.combat.encounter import Encounter, GameState, LogEntry
from essence_combat.core.constants import ActorSide, SkillCategory
from essence_combat.core.utils import ccapture, cprint


def health_bar(current: int, maximum: int, width: int = 20) -> str:
    """Returns a colored text bar showing current over maximum health."""
    filled = 0 if maximum <= 0 else round(width * current / maximum)
    ratio = 0.0 if maximum <= 0 else current / maximum
    color = "green" if ratio > 0.5 else "yellow" if ratio > 0.25 else "red"
    return f"[{color}]{'█' * filled}[/][dim]{'░' * (width - filled)}[/] {current}/{maximum}"


def status_table(state: GameState) -> Table:
    """Builds a table with the player and every enemy of the current encounter."""
    encounter = state.encounter
    table = Table(title="Combatants", pad_edge=False)
    table.add_column("", style="bold")
    table.add_column("Name", style="bold")
    table.add_column("Health")
    table.add_column("Effects", style="magenta")

    player_effects = encounter.player.status_effects if encounter else []
    table.add_row(
        ActorSide.PLAYER.emoji,
        ActorSide.PLAYER.colorize(state.player.name),
        health_bar(state.player.health, state.player.max_health),
        ", ".join(e.colored_name for e in player_effects),
    )
    if encounter is None:
        return table
    for enemy in encounter.enemies:
        table.add_row(
            ActorSide.ENEMY.emoji,
            ActorSide.ENEMY.colorize(enemy.name),
            health_bar(enemy.current_health, enemy.max_health),
            ", ".join(e.colored_name for e in enemy.status_effects),
        )
    return table


def render_log(entries: list[LogEntry]) -> str:
    """Renders log entries as console text, one line per entry."""
    return "\n".join(ccapture(str(entry)) for entry in entries)


def print_encounter(state: GameState, since: int = 0) -> None:
    """Prints the combatants followed by the log entries from index `since` on."""
    cprint(status_table(state))
    encounter = state.encounter
    if encounter is not None and len(encounter.log) > since:
        cprint(render_log(encounter.log[since:]))


class PlayerInterface:
    """Asks the player for commands on the command line."""

    def __init__(self) -> None:
        self.session: PromptSession = PromptSession(erase_when_done=True)

    def menu(self, state: GameState) -> list[tuple[str, Command]]:
        """Lists every command the player can pick right now."""
        encounter = state.encounter
        assert encounter is not None
        entries: list[tuple[str, Command]] = []
        for enemy in encounter.living_enemies():
            entries.append((f"Attack {enemy.name}", Attack(target_id=enemy.id)))
        for skill in state.player.skills:
            targets = []
            if skill.category == SkillCategory.DEBUFF:
                targets = [enemy.id for enemy in encounter.living_enemies()]
            entries.append(
                (
                    f"{skill.name} ({skill.category.display_name}, {skill.energy_cost} energy)",
                    UseSkill(skill_id=skill.id, target_ids=targets),
                )
            )
        entries.append(("End turn", EndTurn()))
        entries.append(("Flee", Flee()))
        return entries

    def choose_command(self, state: GameState) -> Command | None:
        """Shows the menu and returns the chosen command, None when the player quits."""
        entries = self.menu(state)
        table = Table(title="Actions", pad_edge=False)
        table.add_column("#", style="cyan")
        table.add_column("Action", style="bold")
        for i, (label, _) in enumerate(entries, 1):
            table.add_row(str(i), label)
        table.add_row("q", "Quit")
        prompt = "\n" + ccapture(table) + "\nAction > "
        while True:
            answer = self.session.prompt(ANSI(prompt)).strip().lower()
            if answer == "q":
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(entries):
                return entries[int(answer) - 1][1]


def describe_encounter(encounter: Encounter) -> str:
    """One-line summary of an encounter."""
    return (
        f"{encounter.location}: turn {encounter.turn_count}, "
        f"{encounter.current_actor.display_name} to act, result {encounter.result.display_name}"
    )
