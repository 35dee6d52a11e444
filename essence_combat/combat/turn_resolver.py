"""
Turn resolution module.

Applies one actor's action to the current encounter: the player's basic
attack, skill use and flee attempt, the enemies' automatic turn, and passing
the turn. Each resolver works on a deep copy of the state and hands back a
Transition; rejected actions leave the state untouched and produce a single
notification.
"""

from essence_combat.core.config import CombatConfig
from essence_combat.core.constants import (
    ActorSide,
    EncounterResult,
    LogKind,
    Severity,
    SkillCategory,
)
from essence_combat.core.error_handling import (
    ActionValidationError,
    PreconditionError,
    rejects_as_notification,
)
from essence_combat.core.logging import log_debug
from essence_combat.core.rng import RandomSource, chance, roll
from essence_combat.core.utils import floor_int
from essence_combat.effects.effect_tracker import tick_combatants
from essence_combat.effects.status_effect import StatusEffect
from essence_combat.entities.player import CombatSkill

from .commands import Attack, Command, EndTurn, EnemyTurn, Flee, UseSkill
from .encounter import Encounter, GameState
from .notifications import Notification
from .outcome import conclude, settle
from .transition import Transition


def _require_active(state: GameState) -> Encounter:
    if state.encounter is None or not state.encounter.active:
        raise ActionValidationError("There is no active combat!")
    return state.encounter


def _next_steps(state: GameState) -> list[Command]:
    """Schedules the enemies' turn when the encounter goes on with them to act."""
    encounter = state.encounter
    if encounter is not None and encounter.active and encounter.current_actor == ActorSide.ENEMY:
        return [EnemyTurn()]
    return []


def _finish(state: GameState, notifications: list[Notification] | None = None) -> Transition:
    return Transition(
        state=state,
        notifications=notifications or [],
        follow_ups=_next_steps(state),
    )


def enemy_damage(raw: int, constitution: int, config: CombatConfig) -> int:
    """Reduces a raw enemy hit by floor(constitution / divisor), never below the minimum."""
    reduction = constitution // config.constitution_divisor
    return max(config.minimum_enemy_damage, raw - reduction)


def _enemy_strikes(state: GameState, rng: RandomSource, config: CombatConfig) -> None:
    """Every living enemy hits the player once, in roster order."""
    encounter = state.encounter
    assert encounter is not None
    constitution = state.player.attributes.constitution
    for enemy in encounter.living_enemies():
        raw = roll(rng, *enemy.damage_range)
        damage = enemy_damage(raw, constitution, config)
        state.player.take_damage(damage)
        log_debug(
            f"{enemy.name} hits the player",
            {"raw": raw, "damage": damage, "health": state.player.health},
        )
        encounter.add_log(
            LogKind.ENEMY_ATTACK,
            f"{enemy.name} attacks you for {damage} damage.",
            damage=damage,
            enemy_id=enemy.id,
        )


@rejects_as_notification("attack")
def player_attack(
    state: GameState,
    command: Attack,
    rng: RandomSource,
    config: CombatConfig,
) -> Transition:
    """
    Resolves a basic attack.

    Damage is the weapon base damage plus floor(strength / 2). A critical hit,
    with chance base + luck * per-luck, multiplies it and floors the result.
    On the enemies' turn the command resolves their attacks instead.

    Args:
        state (GameState):
            The current state.
        command (Attack):
            Names the targeted enemy.
        rng (RandomSource):
            Source of the critical roll.
        config (CombatConfig):
            Combat constants.

    Returns:
        Transition:
            The resolved state, concluded with a victory when the last enemy
            falls.

    """
    encounter = _require_active(state)
    if encounter.current_actor == ActorSide.ENEMY:
        return enemy_turn(state, EnemyTurn(), rng, config)

    target = encounter.get_enemy(command.target_id)
    if target is None:
        raise ActionValidationError(
            "Invalid target!", context={"target_id": command.target_id}
        )

    attributes = state.player.attributes
    damage = config.weapon_base_damage + attributes.strength // 2
    critical = chance(rng, config.crit_chance(attributes.luck))
    if critical:
        damage = floor_int(damage * config.crit_multiplier)

    working = state.model_copy(deep=True)
    encounter = working.encounter
    assert encounter is not None
    target = encounter.get_enemy(command.target_id)
    assert target is not None
    target.take_damage(damage)

    if critical:
        message = f"You land a critical hit on {target.name} for {damage} damage!"
    else:
        message = f"You attack {target.name} for {damage} damage."
    if not target.is_alive():
        message += f" {target.name} is defeated!"
    encounter.add_log(
        LogKind.PLAYER_ATTACK,
        message,
        damage=damage,
        critical=critical,
        target_id=target.id,
    )

    outcome = settle(working, config)
    if outcome is not None:
        return Transition(state=working, notifications=outcome)

    encounter.advance_turn()
    return _finish(working)


def _check_skill(state: GameState, command: UseSkill) -> CombatSkill:
    encounter = _require_active(state)
    if encounter.current_actor != ActorSide.PLAYER:
        raise ActionValidationError("It's not your turn!", severity=Severity.WARNING)
    skill = state.player.get_skill(command.skill_id)
    if skill is None:
        raise ActionValidationError(
            "You don't have that skill!", context={"skill_id": command.skill_id}
        )
    if state.player.energy < skill.energy_cost:
        raise ActionValidationError(
            "Not enough energy to use this skill!",
            severity=Severity.WARNING,
            context={"energy": state.player.energy, "cost": skill.energy_cost},
        )
    return skill


def _skill_effect(skill: CombatSkill) -> StatusEffect:
    return StatusEffect(
        id=skill.effect_id,
        name=skill.effect_name,
        remaining_duration=skill.duration,
        magnitude=skill.effect_magnitude,
    )


@rejects_as_notification("use skill")
def use_skill(
    state: GameState,
    command: UseSkill,
    rng: RandomSource,
    config: CombatConfig,
) -> Transition:
    """
    Resolves a skill.

    The energy cost is paid as soon as the skill is accepted. Area skills hit
    every living enemy for base damage + floor(intelligence / 2), healing
    skills restore base healing + floor(wisdom / 2) up to the maximum, buffs
    attach a status effect to the player and debuffs to every targeted enemy.
    """
    skill = _check_skill(state, command)

    working = state.model_copy(deep=True)
    encounter = working.encounter
    assert encounter is not None
    player = working.player
    player.energy -= skill.energy_cost
    attributes = player.attributes
    message = f"You use {skill.name}!"

    if skill.category == SkillCategory.AREA:
        damage = skill.base_damage + attributes.intelligence // 2
        for enemy in encounter.living_enemies():
            enemy.take_damage(damage)
        encounter.add_log(
            LogKind.SKILL,
            f"{message} Deals {damage} damage to all enemies!",
            damage=damage,
            skill_id=skill.id,
        )
        outcome = settle(working, config)
        if outcome is not None:
            return Transition(state=working, notifications=outcome)

    elif skill.category == SkillCategory.HEALING:
        amount = skill.base_healing + attributes.wisdom // 2
        gained = player.heal(amount)
        encounter.add_log(
            LogKind.SKILL,
            f"{message} Restores {gained} health!",
            healing=gained,
            skill_id=skill.id,
        )

    elif skill.category == SkillCategory.BUFF:
        encounter.player.status_effects.append(_skill_effect(skill))
        encounter.add_log(
            LogKind.SKILL,
            f"{message} You gain {skill.effect_name}.",
            skill_id=skill.id,
        )

    elif skill.category == SkillCategory.DEBUFF:
        names = []
        for enemy in encounter.enemies:
            if enemy.id in command.target_ids:
                enemy.status_effects.append(_skill_effect(skill))
                names.append(enemy.name)
        affected = ", ".join(names) or "No enemy"
        encounter.add_log(
            LogKind.SKILL,
            f"{message} {affected} suffer {skill.effect_name}.",
            skill_id=skill.id,
        )

    encounter.advance_turn()
    return _finish(working)


@rejects_as_notification("enemy turn")
def enemy_turn(
    state: GameState,
    command: EnemyTurn,
    rng: RandomSource,
    config: CombatConfig,
) -> Transition:
    """
    Resolves the enemies' turn: every living enemy attacks the player once.

    Each hit is the enemy's damage roll reduced by floor(constitution / 4),
    never below the minimum damage.
    """
    encounter = _require_active(state)
    if encounter.current_actor != ActorSide.ENEMY:
        raise PreconditionError("It's not the enemies' turn!")

    working = state.model_copy(deep=True)
    _enemy_strikes(working, rng, config)

    outcome = settle(working, config)
    if outcome is not None:
        return Transition(state=working, notifications=outcome)

    assert working.encounter is not None
    working.encounter.advance_turn()
    return _finish(working)


@rejects_as_notification("flee")
def flee(
    state: GameState,
    command: Flee,
    rng: RandomSource,
    config: CombatConfig,
) -> Transition:
    """
    Resolves an escape attempt.

    On failure every living enemy gets a free attack and the attempt counts
    as a resolved action, but the turn does not change hands.
    """
    _require_active(state)
    escape_chance = config.escape_chance(state.player.attributes.dexterity)
    escaped = chance(rng, escape_chance)
    log_debug("Flee attempt", {"chance": escape_chance, "escaped": escaped})

    working = state.model_copy(deep=True)
    encounter = working.encounter
    assert encounter is not None

    if escaped:
        return Transition(
            state=working,
            notifications=conclude(working, EncounterResult.FLED, config),
        )

    encounter.add_log(LogKind.FLEE_ATTEMPT, "You tried to flee but failed!")
    _enemy_strikes(working, rng, config)

    if working.player.health == 0:
        return Transition(
            state=working,
            notifications=conclude(
                working,
                EncounterResult.DEFEAT,
                config,
                defeat_message="You have been defeated while attempting to flee!",
            ),
        )

    encounter.turn_count += 1
    return _finish(
        working,
        [
            Notification(
                message="Failed to escape!",
                severity=Severity.WARNING,
                duration=config.notification_duration,
            )
        ],
    )


@rejects_as_notification("end turn")
def end_turn(
    state: GameState,
    command: EndTurn,
    rng: RandomSource,
    config: CombatConfig,
) -> Transition:
    """Counts every status effect down by one turn and passes the turn."""
    _require_active(state)

    working = state.model_copy(deep=True)
    encounter = working.encounter
    assert encounter is not None
    tick_combatants(encounter)
    passing = encounter.current_actor
    encounter.add_log(
        LogKind.END_TURN,
        "You pass the turn." if passing == ActorSide.PLAYER else "The enemies hold.",
    )
    encounter.advance_turn()
    return _finish(working)

