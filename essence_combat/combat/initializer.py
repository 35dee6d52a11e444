"""
Encounter initialization module.

Builds the first state of an encounter: normalizes the enemy roster, rolls
initiative and decides who acts first.
"""

from essence_combat.core.config import CombatConfig
from essence_combat.core.constants import ActorSide, LogKind, Severity
from essence_combat.core.error_handling import (
    ActionValidationError,
    rejects_as_notification,
)
from essence_combat.core.logging import log_debug, log_info
from essence_combat.core.rng import RandomSource, roll

from .commands import EnemyTurn, StartEncounter
from .encounter import Encounter, GameState, PlayerCombatant
from .notifications import Notification
from .transition import Transition


def roll_player_initiative(dexterity: int, rng: RandomSource, config: CombatConfig) -> int:
    """Rolls uniform[1, die] and adds floor(dexterity / divisor)."""
    return (
        roll(rng, 1, config.player_initiative_die)
        + dexterity // config.initiative_dexterity_divisor
    )


def choose_first_actor(ambush: bool, player_initiative: int, enemy_initiative: int) -> ActorSide:
    """
    Decides who acts first.

    Ambushed players always wait. Otherwise the player compares initiative with
    the first enemy of the roster and wins ties.
    """
    if ambush:
        return ActorSide.ENEMY
    if player_initiative >= enemy_initiative:
        return ActorSide.PLAYER
    return ActorSide.ENEMY


@rejects_as_notification("start encounter")
def start_encounter(
    state: GameState,
    command: StartEncounter,
    rng: RandomSource,
    config: CombatConfig,
) -> Transition:
    """
    Starts a new encounter, replacing any previous one.

    Enemy initiatives are rolled in roster order before the player's roll.

    Args:
        state (GameState):
            The current state.
        command (StartEncounter):
            The roster, location and ambush flag.
        rng (RandomSource):
            Source of the initiative rolls.
        config (CombatConfig):
            Combat constants.

    Returns:
        Transition:
            The state holding the new encounter. An empty roster is rejected
            with an error notification and no encounter is created.

    """
    if not command.enemies:
        raise ActionValidationError("No enemies to fight!")

    enemies = [template.instantiate(rng, config) for template in command.enemies]
    ids = [enemy.id for enemy in enemies]
    if len(set(ids)) != len(ids):
        raise ActionValidationError(
            "Enemy ids must be unique within an encounter!",
            context={"ids": ids},
        )

    player_initiative = roll_player_initiative(
        state.player.attributes.dexterity, rng, config
    )
    first = choose_first_actor(command.ambush, player_initiative, enemies[0].initiative)
    log_debug(
        "Initiative rolled",
        {
            "player": player_initiative,
            "enemies": [enemy.initiative for enemy in enemies],
            "first": first,
        },
    )

    encounter = Encounter(
        current_actor=first,
        location=command.location,
        player=PlayerCombatant(initiative=player_initiative),
        enemies=enemies,
    )
    encounter.add_log(
        LogKind.START,
        "Combat begins! You were ambushed!" if command.ambush else "Combat begins!",
    )

    working = state.model_copy(deep=True)
    working.encounter = encounter
    log_info(
        "Encounter started",
        {"location": command.location, "enemies": len(enemies), "ambush": command.ambush},
    )

    return Transition(
        state=working,
        notifications=[
            Notification(
                message=(
                    "You've been ambushed by enemies!"
                    if command.ambush
                    else "Combat has begun!"
                ),
                severity=Severity.DANGER,
                duration=config.notification_duration,
            )
        ],
        follow_ups=[EnemyTurn()] if first == ActorSide.ENEMY else [],
    )
