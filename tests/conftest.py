"""
Shared fixtures for the combat engine tests.
"""

import pytest

from essence_combat.combat.encounter import Encounter, GameState, PlayerCombatant
from essence_combat.core.config import CombatConfig
from essence_combat.core.constants import ActorSide, SkillCategory
from essence_combat.entities.enemy import EnemyTemplate
from essence_combat.entities.player import Attributes, CombatSkill, PlayerRecord


class ScriptedRandom:
    """A random source that replays predetermined draws, in order."""

    def __init__(self, floats: list[float] | None = None, ints: list[int] | None = None):
        self.floats = list(floats or [])
        self.ints = list(ints or [])

    def random(self) -> float:
        assert self.floats, "Unexpected random() draw"
        return self.floats.pop(0)

    def randint(self, a: int, b: int) -> int:
        assert self.ints, f"Unexpected randint({a}, {b}) draw"
        value = self.ints.pop(0)
        assert a <= value <= b, f"Scripted draw {value} outside [{a}, {b}]"
        return value

    def exhausted(self) -> bool:
        return not self.floats and not self.ints


@pytest.fixture
def config():
    return CombatConfig()


@pytest.fixture
def skills():
    return [
        CombatSkill(
            id="fireball",
            name="Fireball",
            category=SkillCategory.AREA,
            energy_cost=8,
            base_damage=4,
        ),
        CombatSkill(
            id="mend",
            name="Mend",
            category=SkillCategory.HEALING,
            energy_cost=5,
            base_healing=6,
        ),
        CombatSkill(
            id="stone_skin",
            name="Stone Skin",
            category=SkillCategory.BUFF,
            energy_cost=4,
            effect_id="stone_skin",
            effect_name="Stone skin",
            duration=3,
            effect_magnitude=2,
        ),
        CombatSkill(
            id="hex",
            name="Hex",
            category=SkillCategory.DEBUFF,
            energy_cost=3,
            effect_id="hexed",
            effect_name="Hexed",
            duration=2,
            effect_magnitude=-2,
        ),
    ]


@pytest.fixture
def player(skills):
    return PlayerRecord(
        name="Wanderer",
        health=30,
        max_health=30,
        energy=20,
        max_energy=20,
        attributes=Attributes(
            strength=10,
            dexterity=0,
            constitution=0,
            intelligence=4,
            wisdom=6,
            luck=0,
        ),
        skills=skills,
    )


@pytest.fixture
def wolf():
    return EnemyTemplate(id="wolf", name="Wolf", max_health=12, initiative=3, base_damage=3)


@pytest.fixture
def goblin():
    return EnemyTemplate(id="goblin", name="Goblin", max_health=10, initiative=2, base_damage=2)


def build_state(
    player: PlayerRecord,
    templates: list[EnemyTemplate],
    actor: ActorSide = ActorSide.PLAYER,
    config: CombatConfig | None = None,
    location: str = "forest",
) -> GameState:
    """Builds a state holding an active encounter, without any random draw."""
    config = config or CombatConfig()
    rng = ScriptedRandom()
    enemies = [template.instantiate(rng, config) for template in templates]
    encounter = Encounter(
        current_actor=actor,
        location=location,
        player=PlayerCombatant(initiative=3),
        enemies=enemies,
    )
    return GameState(player=player, encounter=encounter)
