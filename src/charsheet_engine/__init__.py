"""
charsheet-engine - D&D 5e character sheet validation and derived values.
"""

from .derived import DerivedStats, ability_modifier, derive_stats, proficiency_bonus
from .models import *
from .multiclass import validate_multiclass_prerequisites
from .point_buy import AbilityBuildState, AbilityMethod, SetScore, SwitchMethod, propose_change, transition
from .rules import RuleTableError, get_rule_tables
from .spellcasting import derive_spellcasting
from .validation import validate_character, validate_character_json, validate_user

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("charsheet-engine")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable
__all__ = [
    "AbilityBuildState",
    "AbilityMethod",
    "DerivedStats",
    "RuleTableError",
    "SetScore",
    "SwitchMethod",
    "ability_modifier",
    "derive_spellcasting",
    "derive_stats",
    "get_rule_tables",
    "proficiency_bonus",
    "propose_change",
    "transition",
    "validate_character",
    "validate_character_json",
    "validate_multiclass_prerequisites",
    "validate_user",
]
