"""
Tunable combat constants.

All numeric rules of the engine live in a single CombatConfig so that the
resolvers never hard-code a formula constant. The defaults reproduce the
behavior of the game; `load_config` overrides them from a JSON file.
"""

import json
from pathlib import Path
from typing import Any

from catchery import log_warning
from pydantic import BaseModel, Field, model_validator

from .constants import DEFAULT_NOTIFICATION_DURATION, LONG_NOTIFICATION_DURATION


class CombatConfig(BaseModel):
    """Every constant used by the combat formulas."""

    # Player attack.
    weapon_base_damage: int = Field(
        5,
        ge=0,
        description="Base damage of the player's basic attack.",
    )
    crit_base_chance: float = Field(
        0.05,
        ge=0.0,
        description="Critical hit chance before luck.",
    )
    crit_chance_per_luck: float = Field(
        0.01,
        ge=0.0,
        description="Critical hit chance added per point of luck.",
    )
    crit_multiplier: float = Field(
        1.5,
        ge=1.0,
        description="Damage multiplier of a critical hit (result is floored).",
    )

    # Initiative.
    player_initiative_die: int = Field(
        6,
        ge=1,
        description="The player rolls uniform[1, die] for initiative.",
    )
    initiative_dexterity_divisor: int = Field(
        3,
        ge=1,
        description="floor(dexterity / divisor) is added to the player's initiative.",
    )
    enemy_initiative_range: tuple[int, int] = Field(
        (1, 5),
        description="Initiative range for enemies that do not provide one.",
    )

    # Enemy attacks.
    enemy_damage_range: tuple[int, int] = Field(
        (1, 3),
        description="Damage range for enemies without a base damage.",
    )
    constitution_divisor: int = Field(
        4,
        ge=1,
        description="floor(constitution / divisor) is subtracted from enemy damage.",
    )
    minimum_enemy_damage: int = Field(
        1,
        ge=0,
        description="Enemy damage never drops below this value after reduction.",
    )
    default_enemy_max_health: int = Field(
        10,
        ge=1,
        description="Maximum health for enemies that do not provide one.",
    )

    # Flee.
    flee_base_chance: float = Field(
        0.3,
        ge=0.0,
        description="Escape chance before dexterity.",
    )
    flee_chance_per_dexterity: float = Field(
        0.02,
        ge=0.0,
        description="Escape chance added per point of dexterity.",
    )
    flee_chance_cap: float | None = Field(
        None,
        ge=0.0,
        description="Upper bound of the escape chance, None leaves it uncapped.",
    )

    # Rewards.
    default_drop_chance: float = Field(
        0.3,
        ge=0.0,
        le=1.0,
        description="Drop chance for enemies with a drop table but no chance.",
    )
    essence_reward_range: tuple[int, int] = Field(
        (1, 5),
        description="Essence range for enemies that do not provide a reward.",
    )
    experience_reward_range: tuple[int, int] = Field(
        (5, 14),
        description="Experience range for enemies that do not provide a reward.",
    )

    # Notifications.
    notification_duration: int = Field(
        DEFAULT_NOTIFICATION_DURATION,
        ge=0,
        description="Display time of ordinary notifications, in milliseconds.",
    )
    long_notification_duration: int = Field(
        LONG_NOTIFICATION_DURATION,
        ge=0,
        description="Display time of defeat and reward notifications, in milliseconds.",
    )

    @model_validator(mode="after")
    def _check_ranges(self) -> "CombatConfig":
        for name in (
            "enemy_initiative_range",
            "enemy_damage_range",
            "essence_reward_range",
            "experience_reward_range",
        ):
            low, high = getattr(self, name)
            if low < 0 or high < low:
                raise ValueError(f"{name} must satisfy 0 <= low <= high, got {(low, high)}")
        return self

    def escape_chance(self, dexterity: int) -> float:
        """Returns the probability that a flee attempt succeeds."""
        value = self.flee_base_chance + dexterity * self.flee_chance_per_dexterity
        if self.flee_chance_cap is not None:
            value = min(value, self.flee_chance_cap)
        return value

    def crit_chance(self, luck: int) -> float:
        """Returns the probability that a basic attack is critical."""
        return self.crit_base_chance + luck * self.crit_chance_per_luck


def load_config(path: Path) -> CombatConfig:
    """
    Loads a CombatConfig from a JSON file.

    A missing file falls back to the defaults with a warning, keys that are
    absent keep their default value.

    Args:
        path (Path): The JSON file to read.

    Returns:
        CombatConfig: The loaded configuration.

    """
    if not path.exists():
        log_warning(
            "Combat configuration file not found, using defaults",
            {"path": str(path)},
        )
        return CombatConfig()
    with path.open("r", encoding="utf-8") as f:
        data: dict[str, Any] = json.load(f)
    return CombatConfig.model_validate(data)
