"""
Status effects carried by combatants during an encounter.
"""

from .effect_tracker import tick_combatants, tick_effects
from .status_effect import StatusEffect
