"""
Combat session module.

A CombatSession is the single owner of a GameState. Commands are resolved one
at a time from a FIFO queue: each resolver reads the state left by the
previous one, and the follow-up commands it schedules (such as the enemies'
automatic turn) are queued behind it instead of being resolved recursively.
"""

from collections import deque
from typing import Callable, Protocol

from essence_combat.core.config import CombatConfig
from essence_combat.core.constants import DEFAULT_LOCATION, EncounterResult, Severity
from essence_combat.core.logging import log_debug
from essence_combat.core.rng import RandomSource, default_source
from essence_combat.entities.enemy import EnemyTemplate

from .commands import (
    Attack,
    CollectLoot,
    Command,
    EndCombat,
    EndTurn,
    EnemyTurn,
    Flee,
    StartEncounter,
    UseSkill,
)
from .encounter import Encounter, GameState
from .initializer import start_encounter
from .notifications import Notification, NotificationLog, NotificationSink
from .outcome import end_combat
from .rewards import collect_loot
from .transition import Transition
from .turn_resolver import end_turn, enemy_turn, flee, player_attack, use_skill

Resolver = Callable[[GameState, Command, RandomSource, CombatConfig], Transition]

_RESOLVERS: dict[type, Resolver] = {
    StartEncounter: start_encounter,
    Attack: player_attack,
    UseSkill: use_skill,
    EndTurn: end_turn,
    EnemyTurn: enemy_turn,
    Flee: flee,
    EndCombat: end_combat,
    CollectLoot: collect_loot,
}


def resolve(
    state: GameState,
    command: Command,
    rng: RandomSource,
    config: CombatConfig,
) -> Transition:
    """
    Resolves a single command against a state, without running follow-ups.

    Raises:
        TypeError: If the command is not a known variant.

    """
    resolver = _RESOLVERS.get(type(command))
    if resolver is None:
        raise TypeError(f"Unknown combat command: {type(command).__name__}")
    return resolver(state, command, rng, config)


class PlayerStore(Protocol):
    """Receives the player, essence and statistics after every dispatch."""

    def publish(self, state: GameState) -> None: ...


class InMemoryPlayerStore:
    """Keeps the most recently published state."""

    def __init__(self) -> None:
        self.state: GameState | None = None
        self.publications = 0

    def publish(self, state: GameState) -> None:
        self.state = state
        self.publications += 1


class CombatSession:
    """Owns one game state and resolves commands against it."""

    def __init__(
        self,
        state: GameState,
        rng: RandomSource | None = None,
        config: CombatConfig | None = None,
        sink: NotificationSink | None = None,
        store: PlayerStore | None = None,
        auto_enemy_turn: bool = True,
    ) -> None:
        """
        Initialize the session.

        Args:
            state (GameState):
                The initial state, owned by the session from now on.
            rng (RandomSource | None):
                Source of every random draw, a fresh `random.Random` if None.
            config (CombatConfig | None):
                Combat constants, the defaults if None.
            sink (NotificationSink | None):
                Receives notifications, an in-memory log if None.
            store (PlayerStore | None):
                Receives the state after every dispatch.
            auto_enemy_turn (bool):
                Whether the enemies act on their own when their turn comes.

        """
        self.state: GameState = state
        self.rng: RandomSource = rng if rng is not None else default_source()
        self.config: CombatConfig = config or CombatConfig()
        self.sink: NotificationSink = sink if sink is not None else NotificationLog()
        self.store = store
        self.auto_enemy_turn = auto_enemy_turn
        self._queue: deque[Command] = deque()

    @property
    def encounter(self) -> Encounter | None:
        return self.state.encounter

    def dispatch(self, command: Command) -> list[Notification]:
        """
        Resolves a command and every follow-up it schedules.

        Args:
            command (Command): The command to resolve.

        Returns:
            list[Notification]: Every notification emitted, in order.

        """
        emitted: list[Notification] = []
        self._queue.append(command)
        while self._queue:
            current = self._queue.popleft()
            transition = resolve(self.state, current, self.rng, self.config)
            self.state = transition.state
            for notification in transition.notifications:
                self.sink.notify(notification)
                emitted.append(notification)
            for follow_up in transition.follow_ups:
                if isinstance(follow_up, EnemyTurn) and not self.auto_enemy_turn:
                    continue
                self._queue.append(follow_up)
            log_debug(
                "Command resolved",
                {
                    "command": current.kind,
                    "rejected": transition.rejected,
                    "queued": len(self._queue),
                },
            )
        if self.store is not None:
            self.store.publish(self.state)
        return emitted

    # ===========================================================================
    # COMMAND SURFACE
    # ===========================================================================

    def start(
        self,
        enemies: list[EnemyTemplate],
        location: str = DEFAULT_LOCATION,
        ambush: bool = False,
    ) -> list[Notification]:
        return self.dispatch(StartEncounter(enemies=enemies, location=location, ambush=ambush))

    def attack(self, target_id: str) -> list[Notification]:
        return self.dispatch(Attack(target_id=target_id))

    def use_skill(self, skill_id: str, target_ids: list[str] | None = None) -> list[Notification]:
        return self.dispatch(UseSkill(skill_id=skill_id, target_ids=target_ids or []))

    def end_turn(self) -> list[Notification]:
        return self.dispatch(EndTurn())

    def enemy_turn(self) -> list[Notification]:
        return self.dispatch(EnemyTurn())

    def flee(self) -> list[Notification]:
        return self.dispatch(Flee())

    def end_combat(self, result: EncounterResult = EncounterResult.UNKNOWN) -> list[Notification]:
        return self.dispatch(EndCombat(result=result))

    def collect_loot(self) -> list[Notification]:
        return self.dispatch(CollectLoot())

    def leave(self) -> list[Notification]:
        """Discards a concluded encounter. An active one must be fled or ended first."""
        if self.state.encounter is not None and self.state.encounter.active:
            notification = Notification(
                message="You can't leave during combat!",
                severity=Severity.WARNING,
                duration=self.config.notification_duration,
            )
            self.sink.notify(notification)
            return [notification]
        self.state = self.state.model_copy(update={"encounter": None})
        if self.store is not None:
            self.store.publish(self.state)
        return []
