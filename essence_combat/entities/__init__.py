"""
Combatants and the persistent player record.
"""

from .enemy import Enemy, EnemyTemplate, load_roster
from .player import Attributes, CombatSkill, DeathRecord, PlayerRecord
