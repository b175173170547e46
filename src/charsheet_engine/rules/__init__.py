"""
Rule tables for charsheet-engine.

This package provides:
- Built-in D&D 5e lookup tables (multiclass prerequisites, caster profiles,
  spell slots, point buy costs, hit dice, saving throws, skill choices)
- Loading of JSON/YAML overlays that extend those tables
- RuleTables, the merged, immutable view every engine component reads
"""

from .loader import (
    AbilityName,
    CasterProfile,
    RuleOverlay,
    RuleTableError,
    RuleTables,
    SkillChoice,
    get_rule_tables,
    load_rule_tables,
    normalize_index,
    reset_rule_tables,
)
from .tables import (
    ABILITY_NAMES,
    ABILITY_SCORE_MAX,
    ABILITY_SCORE_MIN,
    ALIGNMENT_MAX_LENGTH,
    ARMOR_CLASS_RANGE,
    DESCRIPTION_MAX_LENGTH,
    HIT_DICE_SIZES,
    INITIATIVE_RANGE,
    MAX_CLASS_LEVEL,
    MAX_CLASSES,
    MAX_TOTAL_LEVEL,
    NAME_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    PASSIVE_PERCEPTION_RANGE,
    SPEED_RANGE,
    SPELL_SLOT_LABELS,
)

__all__ = [
    # Tables
    "ABILITY_NAMES",
    "SPELL_SLOT_LABELS",
    # Sheet limits
    "ABILITY_SCORE_MAX",
    "ABILITY_SCORE_MIN",
    "ALIGNMENT_MAX_LENGTH",
    "ARMOR_CLASS_RANGE",
    "DESCRIPTION_MAX_LENGTH",
    "HIT_DICE_SIZES",
    "INITIATIVE_RANGE",
    "MAX_CLASS_LEVEL",
    "MAX_CLASSES",
    "MAX_TOTAL_LEVEL",
    "NAME_MAX_LENGTH",
    "NOTES_MAX_LENGTH",
    "PASSIVE_PERCEPTION_RANGE",
    "SPEED_RANGE",
    # Models
    "AbilityName",
    "CasterProfile",
    "RuleTables",
    "SkillChoice",
    # Loading
    "RuleOverlay",
    "RuleTableError",
    "get_rule_tables",
    "load_rule_tables",
    "normalize_index",
    "reset_rule_tables",
]
