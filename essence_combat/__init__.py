"""
Essence Combat, the turn-based combat engine of an incremental RPG.

This package resolves encounters between the player and a group of enemies:
initiative, attacks, skills, status effects, flee attempts and the rewards of
a victory.
"""

from .combat import CombatSession, GameState
from .core import CombatConfig
from .entities import EnemyTemplate, PlayerRecord

__version__ = "0.1.0"
