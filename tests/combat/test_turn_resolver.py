"""
Tests for the turn resolver: attacks, skills, enemy turns, flee attempts and
passing the turn.
"""

import pytest
from conftest import ScriptedRandom, build_state

from essence_combat.combat.commands import Attack, EndTurn, EnemyTurn, Flee, UseSkill
from essence_combat.combat.encounter import GameState
from essence_combat.combat.turn_resolver import (
    end_turn,
    enemy_damage,
    enemy_turn,
    flee,
    player_attack,
    use_skill,
)
from essence_combat.core.config import CombatConfig
from essence_combat.core.constants import (
    ActorSide,
    EncounterResult,
    LogKind,
    Severity,
    SkillCategory,
)
from essence_combat.effects.status_effect import StatusEffect
from essence_combat.entities.enemy import EnemyTemplate
from essence_combat.entities.player import CombatSkill

# Draw that never triggers a critical hit at the default chance.
NO_CRIT = 0.99


# ==============================================================================
# BASIC ATTACK
# ==============================================================================


def test_attack_kills_the_only_enemy_and_wins(player, config):
    slime = EnemyTemplate(id="slime", name="Slime", max_health=10, initiative=3)
    state = build_state(player, [slime])

    transition = player_attack(state, Attack(target_id="slime"), ScriptedRandom(floats=[NO_CRIT]), config)

    encounter = transition.state.encounter
    assert encounter.enemies[0].current_health == 0
    assert encounter.result == EncounterResult.VICTORY
    assert encounter.active is False
    assert encounter.ended_at is not None
    attack_entry = encounter.log[-2]
    assert attack_entry.kind == LogKind.PLAYER_ATTACK
    assert attack_entry.damage == 10
    assert attack_entry.critical is False
    assert "is defeated!" in attack_entry.message
    assert encounter.log[-1].kind == LogKind.VICTORY
    assert transition.state.stats.total_combats == 1
    assert transition.state.stats.combats_won == 1
    assert transition.follow_ups == []
    assert transition.notifications[0].severity == Severity.SUCCESS


def test_attack_hands_the_turn_to_the_enemies(player, wolf, config):
    state = build_state(player, [wolf])

    transition = player_attack(state, Attack(target_id="wolf"), ScriptedRandom(floats=[NO_CRIT]), config)

    encounter = transition.state.encounter
    assert encounter.enemies[0].current_health == 2
    assert encounter.active is True
    assert encounter.current_actor == ActorSide.ENEMY
    assert encounter.turn_count == 1
    assert transition.follow_ups == [EnemyTurn()]
    # The input state is left untouched.
    assert state.encounter.enemies[0].current_health == 12
    assert state.encounter.turn_count == 0


def test_critical_hit_is_floored(player, config):
    player.attributes.strength = 1
    target = EnemyTemplate(id="ogre", name="Ogre", max_health=20, initiative=1)
    state = build_state(player, [target])

    transition = player_attack(state, Attack(target_id="ogre"), ScriptedRandom(floats=[0.0]), config)

    entry = transition.state.encounter.log[-1]
    assert entry.critical is True
    assert entry.damage == 7
    assert "critical hit" in entry.message
    assert transition.state.encounter.enemies[0].current_health == 13


def test_luck_raises_the_critical_chance(player, wolf, config):
    player.attributes.strength = 1
    player.attributes.luck = 10
    state = build_state(player, [wolf])
    # 0.1 < 0.05 + 10 * 0.01
    transition = player_attack(state, Attack(target_id="wolf"), ScriptedRandom(floats=[0.1]), config)
    assert transition.state.encounter.log[-1].critical is True


def test_attack_on_unknown_target_is_rejected(player, wolf, config):
    state = build_state(player, [wolf])
    transition = player_attack(state, Attack(target_id="dragon"), ScriptedRandom(), config)
    assert transition.rejected
    assert transition.state is state
    assert transition.notifications[0].message == "Invalid target!"
    assert transition.notifications[0].severity == Severity.ERROR


def test_attack_on_defeated_enemy_still_passes_the_turn(player, wolf, goblin, config):
    state = build_state(player, [wolf, goblin])
    state.encounter.enemies[1].current_health = 0

    transition = player_attack(
        state, Attack(target_id="goblin"), ScriptedRandom(floats=[NO_CRIT]), config
    )

    encounter = transition.state.encounter
    assert not transition.rejected
    assert encounter.enemies[1].current_health == 0
    assert encounter.enemies[0].current_health == 12
    assert encounter.active is True
    assert encounter.turn_count == 1
    assert encounter.current_actor == ActorSide.ENEMY
    assert encounter.log[-1].kind == LogKind.PLAYER_ATTACK
    assert transition.follow_ups == [EnemyTurn()]


def test_attack_without_encounter_is_rejected(player, config):
    state = GameState(player=player)
    transition = player_attack(state, Attack(target_id="wolf"), ScriptedRandom(), config)
    assert transition.rejected
    assert transition.notifications[0].message == "There is no active combat!"


def test_attack_on_concluded_encounter_is_rejected(player, wolf, config):
    state = build_state(player, [wolf])
    state.encounter.active = False
    state.encounter.result = EncounterResult.FLED
    transition = player_attack(state, Attack(target_id="wolf"), ScriptedRandom(), config)
    assert transition.rejected
    assert transition.state is state


def test_attack_on_enemy_turn_resolves_the_enemies(player, goblin, config):
    state = build_state(player, [goblin], actor=ActorSide.ENEMY)
    transition = player_attack(state, Attack(target_id="goblin"), ScriptedRandom(), config)
    assert transition.state.player.health == 28
    assert transition.state.encounter.current_actor == ActorSide.PLAYER
    assert transition.state.encounter.enemies[0].current_health == 10


def test_victory_requires_every_enemy_down(player, goblin, config):
    slime = EnemyTemplate(id="slime", name="Slime", max_health=5, initiative=1)
    state = build_state(player, [slime, goblin])
    transition = player_attack(state, Attack(target_id="slime"), ScriptedRandom(floats=[NO_CRIT]), config)
    encounter = transition.state.encounter
    assert encounter.enemies[0].current_health == 0
    assert encounter.active is True
    assert encounter.current_actor == ActorSide.ENEMY


# ==============================================================================
# SKILLS
# ==============================================================================


def test_skill_out_of_turn_is_rejected(player, wolf, config):
    state = build_state(player, [wolf], actor=ActorSide.ENEMY)
    transition = use_skill(state, UseSkill(skill_id="mend"), ScriptedRandom(), config)
    assert transition.rejected
    assert transition.notifications[0].message == "It's not your turn!"
    assert transition.notifications[0].severity == Severity.WARNING
    assert transition.state.player.energy == 20


def test_unknown_skill_is_rejected(player, wolf, config):
    state = build_state(player, [wolf])
    transition = use_skill(state, UseSkill(skill_id="meteor"), ScriptedRandom(), config)
    assert transition.rejected
    assert transition.notifications[0].message == "You don't have that skill!"
    assert transition.notifications[0].severity == Severity.ERROR


def test_skill_without_energy_is_rejected(player, wolf, config):
    player.energy = 2
    state = build_state(player, [wolf])
    transition = use_skill(state, UseSkill(skill_id="fireball"), ScriptedRandom(), config)
    assert transition.rejected
    assert transition.notifications[0].message == "Not enough energy to use this skill!"
    assert transition.state.player.energy == 2


def test_area_skill_hits_every_living_enemy(player, wolf, goblin, config):
    state = build_state(player, [wolf, goblin])
    transition = use_skill(state, UseSkill(skill_id="fireball"), ScriptedRandom(), config)

    after = transition.state
    # 4 base damage + floor(4 / 2) intelligence.
    assert [e.current_health for e in after.encounter.enemies] == [6, 4]
    assert after.player.energy == 12
    assert after.encounter.current_actor == ActorSide.ENEMY
    assert after.encounter.turn_count == 1
    assert after.encounter.log[-1].kind == LogKind.SKILL
    assert after.encounter.log[-1].damage == 6


def test_area_skill_can_win_the_encounter(player, config):
    rats = [
        EnemyTemplate(id=f"rat_{i}", name="Rat", max_health=5, initiative=1)
        for i in range(3)
    ]
    state = build_state(player, rats)
    transition = use_skill(state, UseSkill(skill_id="fireball"), ScriptedRandom(), config)
    encounter = transition.state.encounter
    assert encounter.result == EncounterResult.VICTORY
    assert encounter.active is False
    assert encounter.turn_count == 0
    assert transition.state.player.energy == 12


def test_healing_skill_restores_health(player, wolf, config):
    player.health = 20
    state = build_state(player, [wolf])
    transition = use_skill(state, UseSkill(skill_id="mend"), ScriptedRandom(), config)
    # 6 base healing + floor(6 / 2) wisdom.
    assert transition.state.player.health == 29
    assert transition.state.player.energy == 15
    assert transition.state.encounter.log[-1].healing == 9


def test_healing_never_exceeds_maximum(player, wolf, config):
    player.health = 25
    state = build_state(player, [wolf])
    transition = use_skill(state, UseSkill(skill_id="mend"), ScriptedRandom(), config)
    assert transition.state.player.health == 30


def test_buff_attaches_an_effect_to_the_player(player, wolf, config):
    state = build_state(player, [wolf])
    transition = use_skill(state, UseSkill(skill_id="stone_skin"), ScriptedRandom(), config)
    effects = transition.state.encounter.player.status_effects
    assert effects == [
        StatusEffect(id="stone_skin", name="Stone skin", remaining_duration=3, magnitude=2)
    ]
    assert transition.state.encounter.current_actor == ActorSide.ENEMY


def test_debuff_attaches_an_effect_to_the_targets(player, wolf, goblin, config):
    state = build_state(player, [wolf, goblin])
    transition = use_skill(
        state, UseSkill(skill_id="hex", target_ids=["goblin"]), ScriptedRandom(), config
    )
    wolf_after, goblin_after = transition.state.encounter.enemies
    assert wolf_after.status_effects == []
    assert [e.id for e in goblin_after.status_effects] == ["hexed"]
    assert goblin_after.status_effects[0].magnitude == -2
    assert transition.state.player.energy == 17


@pytest.mark.parametrize("target_ids", [[], ["dragon"]])
def test_debuff_without_valid_targets_still_costs_the_turn(player, wolf, config, target_ids):
    state = build_state(player, [wolf])

    transition = use_skill(
        state, UseSkill(skill_id="hex", target_ids=target_ids), ScriptedRandom(), config
    )

    after = transition.state
    assert not transition.rejected
    assert after.player.energy == 17
    assert after.encounter.turn_count == 1
    assert after.encounter.current_actor == ActorSide.ENEMY
    assert after.encounter.enemies[0].status_effects == []
    assert transition.follow_ups == [EnemyTurn()]


def test_debuff_skips_unknown_targets(player, wolf, config):
    state = build_state(player, [wolf])
    transition = use_skill(
        state, UseSkill(skill_id="hex", target_ids=["dragon", "wolf"]), ScriptedRandom(), config
    )
    assert [e.id for e in transition.state.encounter.enemies[0].status_effects] == ["hexed"]


def test_one_turn_buff_lasts_until_the_next_tick(player, wolf, config):
    player.skills.append(
        CombatSkill(
            id="blink",
            name="Blink",
            category=SkillCategory.BUFF,
            energy_cost=1,
            duration=1,
        )
    )
    state = build_state(player, [wolf])

    state = use_skill(state, UseSkill(skill_id="blink"), ScriptedRandom(), config).state
    assert [(e.id, e.remaining_duration) for e in state.encounter.player.status_effects] == [
        ("blink", 1)
    ]

    state = end_turn(state, EndTurn(), ScriptedRandom(), config).state
    assert state.encounter.player.status_effects == []


@pytest.mark.parametrize("category", [SkillCategory.BUFF, SkillCategory.DEBUFF])
def test_status_skills_without_duration_cannot_be_learned(category):
    with pytest.raises(ValueError):
        CombatSkill(id="blink", name="Blink", category=category, energy_cost=1)


# ==============================================================================
# ENEMY TURN
# ==============================================================================


def test_enemy_damage_formula(config):
    assert enemy_damage(3, 0, config) == 3
    assert enemy_damage(3, 4, config) == 2
    assert enemy_damage(3, 7, config) == 2
    assert enemy_damage(1, 8, config) == 1


def test_every_living_enemy_attacks_once(player, wolf, goblin, config):
    player.attributes.constitution = 4
    state = build_state(player, [wolf, goblin], actor=ActorSide.ENEMY)

    transition = enemy_turn(state, EnemyTurn(), ScriptedRandom(), config)

    after = transition.state
    # (3 - 1) + (2 - 1)
    assert after.player.health == 27
    attacks = [e for e in after.encounter.log if e.kind == LogKind.ENEMY_ATTACK]
    assert [(e.enemy_id, e.damage) for e in attacks] == [("wolf", 2), ("goblin", 1)]
    assert after.encounter.current_actor == ActorSide.PLAYER
    assert after.encounter.turn_count == 1
    assert transition.follow_ups == []


def test_defeated_enemies_do_not_attack(player, wolf, goblin, config):
    state = build_state(player, [wolf, goblin], actor=ActorSide.ENEMY)
    state.encounter.enemies[0].current_health = 0
    transition = enemy_turn(state, EnemyTurn(), ScriptedRandom(), config)
    assert transition.state.player.health == 28


def test_enemy_without_base_damage_rolls_its_damage(player, config):
    slime = EnemyTemplate(id="slime", name="Slime", initiative=1)
    state = build_state(player, [slime], actor=ActorSide.ENEMY)
    rng = ScriptedRandom(ints=[3])
    transition = enemy_turn(state, EnemyTurn(), rng, config)
    assert transition.state.player.health == 27
    assert rng.exhausted()


def test_enemy_turn_can_defeat_the_player(player, config):
    player.health = 2
    brute = EnemyTemplate(id="brute", name="Brute", initiative=1, base_damage=5)
    state = build_state(player, [brute], actor=ActorSide.ENEMY, location="cave")

    transition = enemy_turn(state, EnemyTurn(), ScriptedRandom(), config)

    after = transition.state
    assert after.player.health == 0
    assert after.encounter.result == EncounterResult.DEFEAT
    assert after.encounter.active is False
    assert after.encounter.log[-1].kind == LogKind.DEFEAT
    assert after.player.death_count == 1
    assert after.player.last_death.cause == "combat"
    assert after.player.last_death.location == "cave"
    assert after.stats.combats_lost == 1
    assert after.stats.total_combats == 1
    assert transition.notifications[0].severity == Severity.DANGER


def test_enemy_turn_out_of_turn_is_rejected(player, wolf, config):
    state = build_state(player, [wolf])
    transition = enemy_turn(state, EnemyTurn(), ScriptedRandom(), config)
    assert transition.rejected
    assert transition.state is state


# ==============================================================================
# FLEE
# ==============================================================================


def test_flee_succeeds_below_the_escape_chance(player, wolf, config):
    player.attributes.dexterity = 10
    state = build_state(player, [wolf])

    transition = flee(state, Flee(), ScriptedRandom(floats=[0.4]), config)

    after = transition.state
    assert after.encounter.result == EncounterResult.FLED
    assert after.encounter.active is False
    assert after.encounter.log[-1].kind == LogKind.FLEE
    assert after.stats.combats_fled == 1
    assert after.stats.total_combats == 1
    assert after.player.health == 30
    assert transition.notifications[0].severity == Severity.SUCCESS


def test_failed_flee_gives_enemies_a_free_attack(player, wolf, goblin, config):
    player.attributes.dexterity = 10
    state = build_state(player, [wolf, goblin])

    transition = flee(state, Flee(), ScriptedRandom(floats=[0.6]), config)

    after = transition.state
    assert after.encounter.active is True
    assert after.encounter.result == EncounterResult.NONE
    assert after.encounter.turn_count == 1
    assert after.encounter.current_actor == ActorSide.PLAYER
    assert after.player.health == 25
    kinds = [e.kind for e in after.encounter.log]
    assert kinds[-3:] == [LogKind.FLEE_ATTEMPT, LogKind.ENEMY_ATTACK, LogKind.ENEMY_ATTACK]
    assert transition.notifications[0].message == "Failed to escape!"
    assert transition.notifications[0].severity == Severity.WARNING
    assert transition.follow_ups == []


def test_failed_flee_can_defeat_the_player(player, wolf, config):
    player.health = 1
    state = build_state(player, [wolf])
    transition = flee(state, Flee(), ScriptedRandom(floats=[0.99]), config)
    after = transition.state
    assert after.encounter.result == EncounterResult.DEFEAT
    assert after.encounter.active is False
    assert after.player.death_count == 1
    assert "attempting to flee" in transition.notifications[0].message


def test_escape_chance_is_uncapped_by_default(player, wolf, config):
    player.attributes.dexterity = 40
    state = build_state(player, [wolf])
    transition = flee(state, Flee(), ScriptedRandom(floats=[0.999]), config)
    assert transition.state.encounter.result == EncounterResult.FLED


def test_escape_chance_cap(player, wolf):
    config = CombatConfig(flee_chance_cap=0.5)
    player.attributes.dexterity = 40
    state = build_state(player, [wolf], config=config)
    transition = flee(state, Flee(), ScriptedRandom(floats=[0.7]), config)
    assert transition.state.encounter.active is True


def test_flee_without_encounter_is_rejected(player, config):
    transition = flee(GameState(player=player), Flee(), ScriptedRandom(), config)
    assert transition.rejected


# ==============================================================================
# END TURN
# ==============================================================================


def test_end_turn_ticks_every_effect(player, wolf, goblin, config):
    state = build_state(player, [wolf, goblin])
    state.encounter.player.status_effects = [
        StatusEffect(id="stone_skin", name="Stone skin", remaining_duration=2, magnitude=2),
    ]
    state.encounter.enemies[0].status_effects = [
        StatusEffect(id="hexed", name="Hexed", remaining_duration=1, magnitude=-2),
    ]
    state.encounter.enemies[1].status_effects = [
        StatusEffect(id="hexed", name="Hexed", remaining_duration=3, magnitude=-2),
    ]

    transition = end_turn(state, EndTurn(), ScriptedRandom(), config)

    encounter = transition.state.encounter
    assert [e.remaining_duration for e in encounter.player.status_effects] == [1]
    assert encounter.enemies[0].status_effects == []
    assert [e.remaining_duration for e in encounter.enemies[1].status_effects] == [2]
    assert encounter.current_actor == ActorSide.ENEMY
    assert encounter.turn_count == 1
    assert transition.follow_ups == [EnemyTurn()]
    # No damage is dealt.
    assert transition.state.player.health == 30
    assert [e.current_health for e in encounter.enemies] == [12, 10]


def test_end_turn_on_enemy_turn_returns_the_turn(player, wolf, config):
    state = build_state(player, [wolf], actor=ActorSide.ENEMY)
    transition = end_turn(state, EndTurn(), ScriptedRandom(), config)
    assert transition.state.encounter.current_actor == ActorSide.PLAYER
    assert transition.follow_ups == []


def test_end_turn_without_encounter_is_rejected(player, config):
    transition = end_turn(GameState(player=player), EndTurn(), ScriptedRandom(), config)
    assert transition.rejected


@pytest.mark.parametrize("actor", [ActorSide.PLAYER, ActorSide.ENEMY])
def test_turns_alternate(player, wolf, config, actor):
    state = build_state(player, [wolf], actor=actor)
    for step in range(1, 5):
        state = end_turn(state, EndTurn(), ScriptedRandom(), config).state
        assert state.encounter.turn_count == step
        expected = actor if step % 2 == 0 else actor.opponent
        assert state.encounter.current_actor == expected
