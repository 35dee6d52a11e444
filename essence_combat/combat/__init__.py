"""
Combat module of the engine.

Contains the encounter state, the command union, the resolvers for every
command and the session that owns a game state and dispatches commands.
"""

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
    parse_command,
)
from .encounter import (
    CombatStats,
    Encounter,
    EssencePool,
    GameState,
    LogEntry,
    PlayerCombatant,
    RewardSummary,
)
from .initializer import choose_first_actor, roll_player_initiative, start_encounter
from .notifications import (
    ConsoleNotificationSink,
    Notification,
    NotificationLog,
    NotificationSink,
)
from .outcome import conclude, detect_outcome, end_combat, settle
from .rewards import collect_loot, roll_rewards
from .session import CombatSession, InMemoryPlayerStore, PlayerStore, resolve
from .transition import Transition
from .turn_resolver import (
    end_turn,
    enemy_damage,
    enemy_turn,
    flee,
    player_attack,
    use_skill,
)
