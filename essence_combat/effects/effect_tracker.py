"""
Status effect bookkeeping.

Counts every timed effect down by one turn and prunes the ones that ran out.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from essence_combat.core.logging import log_debug

from .status_effect import StatusEffect

if TYPE_CHECKING:
    from essence_combat.combat.encounter import Encounter


def tick_effects(effects: list[StatusEffect]) -> list[StatusEffect]:
    """
    Advances a list of status effects by one turn.

    The input list and its effects are left untouched.

    Args:
        effects (list[StatusEffect]):
            The effects to advance.

    Returns:
        list[StatusEffect]:
            The surviving effects, each with its duration decreased by one.

    """
    remaining: list[StatusEffect] = []
    for effect in effects:
        ticked = effect.model_copy(
            update={"remaining_duration": max(0, effect.remaining_duration - 1)}
        )
        if ticked.is_expired():
            log_debug(f"Status effect {effect.name} expired", {"id": effect.id})
            continue
        remaining.append(ticked)
    return remaining


def tick_combatants(encounter: Encounter) -> None:
    """Advances the effects of the player and of every enemy of the given encounter."""
    encounter.player.status_effects = tick_effects(encounter.player.status_effects)
    for enemy in encounter.enemies:
        enemy.status_effects = tick_effects(enemy.status_effects)
