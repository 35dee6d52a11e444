"""
Core module of the combat engine.

Contains the enumerations, configuration, error handling, logging, random
source and console helpers shared by every other component.
"""

from .config import CombatConfig, load_config
from .constants import (
    ActorSide,
    EncounterResult,
    LogKind,
    Severity,
    SkillCategory,
)
from .error_handling import (
    ActionValidationError,
    CombatError,
    PreconditionError,
    rejects_as_notification,
)
from .rng import RandomSource, chance, default_source, pick, roll
from .utils import ccapture, cprint, crule, floor_int
