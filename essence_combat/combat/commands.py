"""
Command module.

Every request the engine accepts is one variant of the Command union, each
carrying only the fields it needs. The `kind` literal discriminates the
variants, so raw payloads can be validated with `parse_command`.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from essence_combat.core.constants import DEFAULT_LOCATION, EncounterResult
from essence_combat.entities.enemy import EnemyTemplate


class StartEncounter(BaseModel):
    """Starts a new encounter against the given roster."""

    kind: Literal["start_encounter"] = "start_encounter"
    enemies: list[EnemyTemplate] = Field(
        default_factory=list,
        description="The enemy roster.",
    )
    location: str = Field(
        DEFAULT_LOCATION,
        description="Where the encounter takes place.",
    )
    ambush: bool = Field(
        False,
        description="Whether the enemies act first regardless of initiative.",
    )


class Attack(BaseModel):
    """A basic attack against one enemy."""

    kind: Literal["attack"] = "attack"
    target_id: str = Field(description="The enemy to attack.")


class UseSkill(BaseModel):
    """Uses one of the player's skills."""

    kind: Literal["use_skill"] = "use_skill"
    skill_id: str = Field(description="The skill to use.")
    target_ids: list[str] = Field(
        default_factory=list,
        description="Enemies targeted by a debuff.",
    )


class EndTurn(BaseModel):
    """Passes the turn, counting every status effect down."""

    kind: Literal["end_turn"] = "end_turn"


class EnemyTurn(BaseModel):
    """Every living enemy attacks the player once."""

    kind: Literal["enemy_turn"] = "enemy_turn"


class Flee(BaseModel):
    """Tries to escape the encounter."""

    kind: Literal["flee"] = "flee"


class EndCombat(BaseModel):
    """Concludes the encounter with an externally decided result."""

    kind: Literal["end_combat"] = "end_combat"
    result: EncounterResult = Field(
        EncounterResult.UNKNOWN,
        description="The result to record.",
    )


class CollectLoot(BaseModel):
    """Distributes the rewards of a victory."""

    kind: Literal["collect_loot"] = "collect_loot"


Command = Annotated[
    Union[
        StartEncounter,
        Attack,
        UseSkill,
        EndTurn,
        EnemyTurn,
        Flee,
        EndCombat,
        CollectLoot,
    ],
    Field(discriminator="kind"),
]

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(data: dict[str, Any]) -> Command:
    """
    Validates a raw payload into a command.

    Args:
        data (dict[str, Any]): The payload, with a `kind` key naming the variant.

    Returns:
        Command: The validated command.

    Raises:
        pydantic.ValidationError: If the payload matches no variant.

    """
    return _command_adapter.validate_python(data)
