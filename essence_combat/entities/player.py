"""
Player record module.

The player's health, energy, experience, skills and inventory live outside of
the encounter; the engine reads them and writes them back through transitions.
"""

from typing import Any

from pydantic import BaseModel, Field

from essence_combat.core.constants import SkillCategory
from essence_combat.items.inventory import InventoryItem


class Attributes(BaseModel):
    """The player attributes that feed the combat formulas."""

    strength: int = Field(1, ge=0, description="Adds floor(strength / 2) to basic attacks.")
    dexterity: int = Field(0, ge=0, description="Improves initiative and escape chance.")
    constitution: int = Field(0, ge=0, description="Reduces enemy damage.")
    intelligence: int = Field(0, ge=0, description="Adds floor(intelligence / 2) to area skills.")
    wisdom: int = Field(0, ge=0, description="Adds floor(wisdom / 2) to healing skills.")
    luck: int = Field(0, ge=0, description="Improves critical hit chance.")


class CombatSkill(BaseModel):
    """
    A special ability the player can use during their turn.

    Only the fields of the skill's category are meaningful: area skills use
    `base_damage`, healing skills `base_healing`, buffs and debuffs describe
    the status effect they attach.
    """

    id: str = Field(
        description="Identifier of the skill.",
    )
    name: str = Field(
        description="Display name of the skill.",
    )
    category: SkillCategory = Field(
        description="What the skill does.",
    )
    energy_cost: int = Field(
        0,
        ge=0,
        description="Energy spent when the skill is used.",
    )
    base_damage: int = Field(
        0,
        ge=0,
        description="Damage dealt to each living enemy by an area skill.",
    )
    base_healing: int = Field(
        0,
        ge=0,
        description="Health restored by a healing skill.",
    )
    effect_id: str = Field(
        "",
        description="Identifier of the status effect attached by a buff or debuff.",
    )
    effect_name: str = Field(
        "",
        description="Display name of the status effect.",
    )
    duration: int = Field(
        0,
        ge=0,
        description="Duration of the status effect, in turns.",
    )
    effect_magnitude: int = Field(
        0,
        description="Magnitude of the status effect.",
    )

    def model_post_init(self, _: Any) -> None:
        if self.category in (SkillCategory.BUFF, SkillCategory.DEBUFF):
            if self.duration < 1:
                raise ValueError("Buff and debuff skills must last at least one turn.")
            if not self.effect_id:
                self.effect_id = self.id
            if not self.effect_name:
                self.effect_name = self.name


class DeathRecord(BaseModel):
    """Where and how the player last died."""

    cause: str = Field(description="What killed the player.")
    location: str = Field(description="Where the player died.")
    timestamp: float = Field(description="Epoch seconds of the death.")


class PlayerRecord(BaseModel):
    """The persistent player state touched by combat."""

    name: str = Field(
        "Player",
        description="Display name of the player.",
    )
    health: int = Field(
        ge=0,
        description="Current health.",
    )
    max_health: int = Field(
        ge=1,
        description="Maximum health.",
    )
    energy: int = Field(
        0,
        ge=0,
        description="Current energy, spent by skills.",
    )
    max_energy: int = Field(
        0,
        ge=0,
        description="Maximum energy.",
    )
    experience: int = Field(
        0,
        ge=0,
        description="Accumulated experience.",
    )
    attributes: Attributes = Field(
        default_factory=Attributes,
        description="Combat attributes.",
    )
    skills: list[CombatSkill] = Field(
        default_factory=list,
        description="Skills usable in combat.",
    )
    inventory: list[InventoryItem] = Field(
        default_factory=list,
        description="Item stacks carried by the player.",
    )
    death_count: int = Field(
        0,
        ge=0,
        description="How many times the player has been defeated.",
    )
    last_death: DeathRecord | None = Field(
        None,
        description="Details of the most recent defeat.",
    )

    def model_post_init(self, _: Any) -> None:
        if self.health > self.max_health:
            raise ValueError("Player health cannot exceed maximum health.")
        if self.energy > self.max_energy:
            raise ValueError("Player energy cannot exceed maximum energy.")

    def is_alive(self) -> bool:
        return self.health > 0

    def get_skill(self, skill_id: str) -> CombatSkill | None:
        """Returns the skill with the given id, if the player knows it."""
        return next((s for s in self.skills if s.id == skill_id), None)

    def take_damage(self, amount: int) -> int:
        """Removes health, never below zero. Returns the health actually lost."""
        lost = min(self.health, max(0, amount))
        self.health -= lost
        return lost

    def heal(self, amount: int) -> int:
        """Restores health, never above the maximum. Returns the health actually gained."""
        gained = min(self.max_health - self.health, max(0, amount))
        self.health += gained
        return gained
