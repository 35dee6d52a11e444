"""
Enemy module.

Enemies enter an encounter as loosely specified templates. The encounter
initializer normalizes each template once into a fully populated Enemy, so the
resolvers never fall back to defaults mid-turn.
"""

import json
from pathlib import Path
from typing import Any

from catchery import log_warning
from pydantic import BaseModel, Field, TypeAdapter

from essence_combat.core.config import CombatConfig
from essence_combat.core.rng import RandomSource, roll
from essence_combat.effects.status_effect import StatusEffect
from essence_combat.items.inventory import LootDrop


class EnemyTemplate(BaseModel):
    """An entry of an encounter roster, every combat value optional."""

    id: str = Field(
        description="Identifier of the enemy, unique within the encounter.",
    )
    name: str = Field(
        description="Display name of the enemy.",
    )
    max_health: int | None = Field(
        None,
        ge=1,
        description="Maximum health, the configured default when omitted.",
    )
    initiative: int | None = Field(
        None,
        description="Initiative, rolled when omitted.",
    )
    base_damage: int | None = Field(
        None,
        ge=0,
        description="Fixed damage per attack, a random range when omitted.",
    )
    essence_reward: int | None = Field(
        None,
        ge=0,
        description="Essence granted on victory, random when omitted.",
    )
    experience_reward: int | None = Field(
        None,
        ge=0,
        description="Experience granted on victory, random when omitted.",
    )
    drop_chance: float | None = Field(
        None,
        ge=0.0,
        le=1.0,
        description="Chance of dropping one item of the drop table.",
    )
    drop_table: list[LootDrop] = Field(
        default_factory=list,
        description="Items this enemy can drop.",
    )

    def instantiate(self, rng: RandomSource, config: CombatConfig) -> "Enemy":
        """
        Builds the encounter-ready enemy.

        Args:
            rng (RandomSource):
                Source for the initiative roll, used only when the template
                has no initiative.
            config (CombatConfig):
                Supplies the defaults of every omitted field.

        Returns:
            Enemy:
                The normalized enemy at full health, without status effects.

        """
        max_health = self.max_health or config.default_enemy_max_health
        initiative = self.initiative
        if initiative is None:
            initiative = roll(rng, *config.enemy_initiative_range)

        def fixed_or(value: int | None, default: tuple[int, int]) -> tuple[int, int]:
            return (value, value) if value is not None else default

        return Enemy(
            id=self.id,
            name=self.name,
            current_health=max_health,
            max_health=max_health,
            initiative=initiative,
            damage_range=fixed_or(self.base_damage, config.enemy_damage_range),
            essence_range=fixed_or(self.essence_reward, config.essence_reward_range),
            experience_range=fixed_or(
                self.experience_reward, config.experience_reward_range
            ),
            drop_chance=(
                self.drop_chance
                if self.drop_chance is not None
                else config.default_drop_chance
            ),
            drop_table=[drop.model_copy() for drop in self.drop_table],
        )


class Enemy(BaseModel):
    """An enemy taking part in an encounter."""

    id: str = Field(description="Identifier of the enemy.")
    name: str = Field(description="Display name of the enemy.")
    current_health: int = Field(ge=0, description="Current health.")
    max_health: int = Field(ge=1, description="Maximum health.")
    initiative: int = Field(description="Initiative of the enemy.")
    status_effects: list[StatusEffect] = Field(
        default_factory=list,
        description="Active status effects.",
    )
    damage_range: tuple[int, int] = Field(
        description="Inclusive range of the damage of one attack.",
    )
    essence_range: tuple[int, int] = Field(
        description="Inclusive range of the essence granted on victory.",
    )
    experience_range: tuple[int, int] = Field(
        description="Inclusive range of the experience granted on victory.",
    )
    drop_chance: float = Field(
        ge=0.0,
        le=1.0,
        description="Chance of dropping one item of the drop table.",
    )
    drop_table: list[LootDrop] = Field(
        default_factory=list,
        description="Items this enemy can drop.",
    )

    def model_post_init(self, _: Any) -> None:
        if self.current_health > self.max_health:
            raise ValueError("Enemy health cannot exceed maximum health.")

    def is_alive(self) -> bool:
        return self.current_health > 0

    def take_damage(self, amount: int) -> int:
        """Removes health, never below zero. Returns the health actually lost."""
        lost = min(self.current_health, max(0, amount))
        self.current_health -= lost
        return lost


_roster_adapter = TypeAdapter(list[EnemyTemplate])


def load_roster(path: Path) -> list[EnemyTemplate]:
    """
    Loads an enemy roster from a JSON file holding a list of templates.

    Args:
        path (Path): The JSON file to read.

    Returns:
        list[EnemyTemplate]: The templates, empty when the file is missing.

    """
    if not path.exists():
        log_warning("Enemy roster file not found", {"path": str(path)})
        return []
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    return _roster_adapter.validate_python(data)
