"""
Outcome detection module.

Inspects health totals after every health-changing action and, when one side
is down, concludes the encounter: the result is recorded, a summary entry is
appended to the log and the aggregate statistics are updated.
"""

import time

from essence_combat.core.config import CombatConfig
from essence_combat.core.constants import EncounterResult, LogKind, Severity
from essence_combat.core.error_handling import (
    ActionValidationError,
    PreconditionError,
    rejects_as_notification,
)
from essence_combat.core.logging import log_info
from essence_combat.core.rng import RandomSource
from essence_combat.entities.player import DeathRecord

from .commands import EndCombat
from .encounter import GameState
from .notifications import Notification
from .transition import Transition

DEFEAT_MESSAGE = "You have been defeated in combat!"

# Summary log entry appended for each result.
_SUMMARY = {
    EncounterResult.VICTORY: (LogKind.VICTORY, "You are victorious!"),
    EncounterResult.DEFEAT: (LogKind.DEFEAT, DEFEAT_MESSAGE),
    EncounterResult.FLED: (LogKind.FLEE, "You successfully fled from combat!"),
    EncounterResult.UNKNOWN: (LogKind.END, "Combat has ended."),
}


def detect_outcome(state: GameState) -> EncounterResult:
    """
    Determines whether the current encounter is decided.

    Args:
        state (GameState): The state to inspect.

    Returns:
        EncounterResult:
            VICTORY when every enemy is at zero health, DEFEAT when the player
            is, NONE otherwise.

    """
    encounter = state.encounter
    if encounter is None:
        return EncounterResult.NONE
    if encounter.all_enemies_defeated():
        return EncounterResult.VICTORY
    if state.player.health == 0:
        return EncounterResult.DEFEAT
    return EncounterResult.NONE


def conclude(
    state: GameState,
    result: EncounterResult,
    config: CombatConfig,
    defeat_message: str = DEFEAT_MESSAGE,
    cause: str = "combat",
) -> list[Notification]:
    """
    Ends the encounter of a working state in place.

    Args:
        state (GameState):
            A working copy, mutated in place.
        result (EncounterResult):
            How the encounter ended, anything but NONE.
        config (CombatConfig):
            Supplies notification durations.
        defeat_message (str):
            Notification text used for a defeat.
        cause (str):
            Cause recorded on the player's death record for a defeat.

    Returns:
        list[Notification]:
            The outcome notification.

    """
    encounter = state.encounter
    if encounter is None or not encounter.active:
        raise PreconditionError("Combat is already over!")
    if result == EncounterResult.NONE:
        raise ActionValidationError("Cannot end combat without a result!")

    now = time.time()
    encounter.active = False
    encounter.result = result
    encounter.ended_at = now

    kind, message = _SUMMARY[result]
    if not encounter.has_log_entry(kind):
        encounter.add_log(kind, message, timestamp=now)

    stats = state.stats
    stats.total_combats += 1
    if result == EncounterResult.VICTORY:
        stats.combats_won += 1
        notification = Notification(
            message="Victory! You defeated all enemies.",
            severity=Severity.SUCCESS,
            duration=config.notification_duration,
        )
    elif result == EncounterResult.DEFEAT:
        stats.combats_lost += 1
        state.player.death_count += 1
        state.player.last_death = DeathRecord(
            cause=cause,
            location=encounter.location,
            timestamp=now,
        )
        notification = Notification(
            message=defeat_message,
            severity=Severity.DANGER,
            duration=config.long_notification_duration,
        )
    elif result == EncounterResult.FLED:
        stats.combats_fled += 1
        notification = Notification(
            message=message,
            severity=Severity.SUCCESS,
            duration=config.notification_duration,
        )
    else:
        notification = Notification(
            message=message,
            severity=Severity.INFO,
            duration=config.notification_duration,
        )

    log_info(
        "Encounter concluded",
        {
            "result": result,
            "turns": encounter.turn_count,
            "location": encounter.location,
        },
    )
    return [notification]


def settle(
    state: GameState,
    config: CombatConfig,
    defeat_message: str = DEFEAT_MESSAGE,
) -> list[Notification] | None:
    """
    Concludes the encounter of a working state if its outcome is decided.

    Returns:
        list[Notification] | None:
            The outcome notifications, or None if the encounter goes on.

    """
    result = detect_outcome(state)
    if result == EncounterResult.NONE:
        return None
    return conclude(state, result, config, defeat_message=defeat_message)


@rejects_as_notification("end combat")
def end_combat(
    state: GameState,
    command: EndCombat,
    rng: RandomSource,
    config: CombatConfig,
) -> Transition:
    """Concludes the active encounter with the result carried by the command."""
    if state.encounter is None or not state.encounter.active:
        raise PreconditionError("There is no active combat to end!")
    working = state.model_copy(deep=True)
    notifications = conclude(working, command.result, config)
    return Transition(state=working, notifications=notifications)
