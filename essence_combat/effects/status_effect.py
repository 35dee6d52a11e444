"""
Status effect model.

A status effect is a timed marker (buff or debuff) attached to a combatant.
Its magnitude is stored with the effect for whoever reads it; the engine
itself only counts the duration down.
"""

from typing import Any

from pydantic import BaseModel, Field


class StatusEffect(BaseModel):
    """A timed modifier attached to the player or to an enemy."""

    id: str = Field(
        description="Identifier of the effect.",
    )
    name: str = Field(
        description="Display name of the effect.",
    )
    remaining_duration: int = Field(
        ge=0,
        description="Turns left before the effect expires.",
    )
    magnitude: int = Field(
        0,
        description="Strength of the effect.",
    )

    @property
    def display_name(self) -> str:
        return self.name.lower().capitalize()

    @property
    def color(self) -> str:
        """Buffs are green, debuffs red."""
        return "bold green" if self.magnitude >= 0 else "bold red"

    @property
    def colored_name(self) -> str:
        return f"[{self.color}]{self.display_name}[/]"

    def is_expired(self) -> bool:
        return self.remaining_duration <= 0

    def model_post_init(self, _: Any) -> None:
        if not self.id:
            raise ValueError("Status effect id must be a non-empty string.")
