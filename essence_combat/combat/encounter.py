"""
Encounter state module.

Holds the records describing one combat from start to termination, plus the
GameState a session owns: the player, the essence pool, the aggregate
statistics and the current encounter.
"""

import time
from typing import Any

from pydantic import BaseModel, Field

from essence_combat.core.constants import (
    DEFAULT_LOCATION,
    ActorSide,
    EncounterResult,
    LogKind,
)
from essence_combat.effects.status_effect import StatusEffect
from essence_combat.entities.enemy import Enemy
from essence_combat.entities.player import PlayerRecord
from essence_combat.items.inventory import LootItem


class LogEntry(BaseModel):
    """One line of the combat log."""

    kind: LogKind = Field(description="What happened.")
    message: str = Field(description="Human-readable description.")
    timestamp: float = Field(
        default_factory=time.time,
        description="Epoch seconds of the event.",
    )
    damage: int | None = Field(None, description="Damage dealt, if any.")
    healing: int | None = Field(None, description="Health restored, if any.")
    critical: bool | None = Field(None, description="Whether the attack was critical.")
    target_id: str | None = Field(None, description="Enemy targeted by the player.")
    enemy_id: str | None = Field(None, description="Enemy that attacked the player.")
    skill_id: str | None = Field(None, description="Skill used by the player.")

    def __str__(self) -> str:
        return self.kind.colorize(self.message)


class PlayerCombatant(BaseModel):
    """The player's encounter-local state."""

    initiative: int = Field(description="Initiative rolled at the start of combat.")
    status_effects: list[StatusEffect] = Field(
        default_factory=list,
        description="Active status effects.",
    )


class RewardSummary(BaseModel):
    """What a victory yielded, stored on the encounter once loot is collected."""

    essence: int = Field(0, ge=0, description="Essence gained.")
    experience: int = Field(0, ge=0, description="Experience gained.")
    items: list[LootItem] = Field(default_factory=list, description="Items dropped.")

    def describe(self) -> str:
        message = f"Rewards: {self.essence} essence, {self.experience} XP"
        if self.items:
            message += ", Items: " + ", ".join(str(item) for item in self.items)
        return message


class CombatStats(BaseModel):
    """Aggregate statistics across encounters."""

    total_combats: int = Field(0, ge=0)
    combats_won: int = Field(0, ge=0)
    combats_lost: int = Field(0, ge=0)
    combats_fled: int = Field(0, ge=0)
    total_essence_from_combat: int = Field(0, ge=0)


class EssencePool(BaseModel):
    """The player's essence, the game's progression currency."""

    amount: int = Field(0, ge=0)


class Encounter(BaseModel):
    """One combat session between the player and a group of enemies."""

    active: bool = Field(
        True,
        description="Whether the encounter still accepts actions.",
    )
    turn_count: int = Field(
        0,
        ge=0,
        description="Number of resolved actions.",
    )
    current_actor: ActorSide = Field(
        description="The side whose turn it is.",
    )
    location: str = Field(
        DEFAULT_LOCATION,
        description="Where the encounter takes place.",
    )
    started_at: float = Field(
        default_factory=time.time,
        description="Epoch seconds of the start.",
    )
    ended_at: float | None = Field(
        None,
        description="Epoch seconds of the end, None while active.",
    )
    result: EncounterResult = Field(
        EncounterResult.NONE,
        description="How the encounter ended, NONE while active.",
    )
    player: PlayerCombatant = Field(
        description="The player's encounter-local state.",
    )
    enemies: list[Enemy] = Field(
        description="The enemies, in roster order.",
    )
    log: list[LogEntry] = Field(
        default_factory=list,
        description="Ordered combat log.",
    )
    loot_collected: bool = Field(
        False,
        description="Whether the rewards of a victory were distributed.",
    )
    rewards: RewardSummary | None = Field(
        None,
        description="Snapshot of the distributed rewards.",
    )

    def model_post_init(self, _: Any) -> None:
        if not self.enemies:
            raise ValueError("An encounter needs at least one enemy.")
        if self.active != (self.result == EncounterResult.NONE):
            raise ValueError("An encounter is active exactly when it has no result.")

    def get_enemy(self, enemy_id: str) -> Enemy | None:
        return next((e for e in self.enemies if e.id == enemy_id), None)

    def living_enemies(self) -> list[Enemy]:
        return [e for e in self.enemies if e.is_alive()]

    def all_enemies_defeated(self) -> bool:
        return all(e.current_health == 0 for e in self.enemies)

    def has_log_entry(self, kind: LogKind) -> bool:
        return any(entry.kind == kind for entry in self.log)

    def add_log(self, kind: LogKind, message: str, **fields: Any) -> LogEntry:
        entry = LogEntry(kind=kind, message=message, **fields)
        self.log.append(entry)
        return entry

    def advance_turn(self) -> None:
        """Hands the turn to the other side and counts the resolved action."""
        self.current_actor = self.current_actor.opponent
        self.turn_count += 1


class GameState(BaseModel):
    """Everything a combat session owns."""

    player: PlayerRecord = Field(description="The player record.")
    essence: EssencePool = Field(
        default_factory=EssencePool,
        description="The essence pool.",
    )
    stats: CombatStats = Field(
        default_factory=CombatStats,
        description="Aggregate combat statistics.",
    )
    encounter: Encounter | None = Field(
        None,
        description="The current or most recent encounter.",
    )
