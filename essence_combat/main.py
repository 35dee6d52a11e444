"""
Main entry point of the combat engine.

Loads a player, an enemy roster and the combat configuration from a data
directory, then plays one encounter on the console, either interactively or
with the player always attacking the first living enemy.
"""

import argparse
import json
import logging
from pathlib import Path

from essence_combat.combat.commands import Attack, Command
from essence_combat.combat.encounter import GameState
from essence_combat.combat.notifications import ConsoleNotificationSink
from essence_combat.combat.session import CombatSession
from essence_combat.core.config import load_config
from essence_combat.core.constants import ActorSide, EncounterResult
from essence_combat.core.logging import setup_logging
from essence_combat.core.rng import default_source
from essence_combat.core.utils import cprint, crule
from essence_combat.entities.enemy import load_roster
from essence_combat.entities.player import PlayerRecord
from essence_combat.ui.console import PlayerInterface, describe_encounter, print_encounter

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def load_player(path: Path) -> PlayerRecord:
    with path.open("r", encoding="utf-8") as f:
        return PlayerRecord.model_validate(json.load(f))


def auto_command(state: GameState) -> Command | None:
    """Attacks the first living enemy."""
    assert state.encounter is not None
    living = state.encounter.living_enemies()
    return Attack(target_id=living[0].id) if living else None


def run(args: argparse.Namespace) -> GameState:
    data_dir: Path = args.data_dir
    player = load_player(data_dir / "player.json")
    roster = load_roster(data_dir / "enemies.json")
    config = load_config(data_dir / "combat.json")

    session = CombatSession(
        GameState(player=player),
        rng=default_source(args.seed),
        config=config,
        sink=ConsoleNotificationSink(),
    )
    interface = None if args.auto else PlayerInterface()

    crule(f"Encounter at {args.location}", style="bold green")
    session.start(roster, location=args.location, ambush=args.ambush)

    seen = 0
    while session.encounter is not None and session.encounter.active:
        print_encounter(session.state, since=seen)
        seen = len(session.encounter.log)
        if session.encounter.current_actor == ActorSide.ENEMY:
            session.enemy_turn()
            continue
        if interface is None:
            command = auto_command(session.state)
        else:
            command = interface.choose_command(session.state)
        if command is None:
            session.end_combat(EncounterResult.UNKNOWN)
            break
        session.dispatch(command)

    print_encounter(session.state, since=seen)
    encounter = session.encounter
    if encounter is not None:
        cprint(describe_encounter(encounter))
        if encounter.result == EncounterResult.VICTORY:
            session.collect_loot()

    crule("Statistics", style="bold green")
    cprint(session.state.stats.model_dump())
    cprint(f"Essence: {session.state.essence.amount}")
    return session.state


def main() -> None:
    parser = argparse.ArgumentParser(description="Play one turn-based encounter.")
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR)
    parser.add_argument("--location", default="forest")
    parser.add_argument("--ambush", action="store_true")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--auto", action="store_true", help="Always attack the first enemy.")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    run(args)


if __name__ == "__main__":
    main()
