"""
Reward distribution module.

Turns a victory into essence, experience and items. Rewards are applied
exactly once per encounter; later requests are rejected with a warning.
"""

import time

from essence_combat.core.config import CombatConfig
from essence_combat.core.constants import EncounterResult, Severity
from essence_combat.core.error_handling import PreconditionError, rejects_as_notification
from essence_combat.core.logging import log_debug, log_info
from essence_combat.core.rng import RandomSource, chance, pick, roll
from essence_combat.items.inventory import LootItem, merge_loot

from .commands import CollectLoot
from .encounter import Encounter, GameState, RewardSummary
from .notifications import Notification
from .transition import Transition


def roll_rewards(encounter: Encounter, rng: RandomSource) -> RewardSummary:
    """
    Rolls the rewards of every enemy of an encounter, in roster order.

    For each enemy the essence is rolled first, then the experience, then the
    drop chance and, on success, the drop table entry.

    Args:
        encounter (Encounter):
            The won encounter.
        rng (RandomSource):
            Source of every reward roll.

    Returns:
        RewardSummary:
            The total essence and experience and the dropped items.

    """
    summary = RewardSummary()
    source = f"combat_{encounter.location}"
    for enemy in encounter.enemies:
        summary.essence += roll(rng, *enemy.essence_range)
        summary.experience += roll(rng, *enemy.experience_range)
        if not enemy.drop_table:
            continue
        if not chance(rng, enemy.drop_chance):
            log_debug(f"{enemy.name} dropped nothing")
            continue
        drop = pick(rng, enemy.drop_table)
        summary.items.append(
            LootItem(id=drop.id, name=drop.name, quantity=drop.quantity, source=source)
        )
    return summary


@rejects_as_notification("collect loot")
def collect_loot(
    state: GameState,
    command: CollectLoot,
    rng: RandomSource,
    config: CombatConfig,
) -> Transition:
    """
    Distributes the rewards of a won encounter.

    Grants experience and essence, merges dropped items into the inventory,
    stores the reward snapshot on the encounter and updates the statistics.

    Args:
        state (GameState):
            The current state.
        command (CollectLoot):
            The request.
        rng (RandomSource):
            Source of the reward rolls.
        config (CombatConfig):
            Combat constants.

    Returns:
        Transition:
            The rewarded state with one summary notification, or the input
            state with a warning if there is nothing to collect.

    """
    encounter = state.encounter
    if (
        encounter is None
        or encounter.active
        or encounter.result != EncounterResult.VICTORY
    ):
        raise PreconditionError("No enemies defeated to loot!")
    if encounter.loot_collected:
        raise PreconditionError("You've already collected the loot!")

    rewards = roll_rewards(encounter, rng)

    working = state.model_copy(deep=True)
    assert working.encounter is not None
    working.player.experience += rewards.experience
    working.essence.amount += rewards.essence
    working.player.inventory = merge_loot(working.player.inventory, rewards.items, time.time())
    working.encounter.loot_collected = True
    working.encounter.rewards = rewards
    working.stats.combats_won += 1
    working.stats.total_essence_from_combat += rewards.essence

    log_info(
        "Loot collected",
        {
            "essence": rewards.essence,
            "experience": rewards.experience,
            "items": len(rewards.items),
        },
    )
    return Transition(
        state=working,
        notifications=[
            Notification(
                message=rewards.describe(),
                severity=Severity.SUCCESS,
                duration=config.long_notification_duration,
            )
        ],
    )
