"""
Built-in D&D 5e rule tables.

Plain data only. Lookup and overlay logic lives in ``loader.py``; every
consumer reads these through ``get_rule_tables()`` so a rules overlay file
can extend them without touching validator code.

Class and background keys use the rulebook index format (lowercase,
hyphenated), e.g. ``"half-elf"``, ``"folk-hero"``.
"""

# Ability score names in canonical sheet order
ABILITY_NAMES: tuple[str, ...] = (
    "strength",
    "dexterity",
    "constitution",
    "intelligence",
    "wisdom",
    "charisma",
)


# =============================================================================
# Sheet limits
# =============================================================================

ABILITY_SCORE_MIN = 1
ABILITY_SCORE_MAX = 30
MAX_CLASSES = 12
MAX_CLASS_LEVEL = 20
MAX_TOTAL_LEVEL = 20
HIT_DICE_SIZES: tuple[int, ...] = (6, 8, 10, 12)

NAME_MAX_LENGTH = 100
ALIGNMENT_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 1000
NOTES_MAX_LENGTH = 2000

# Inclusive (minimum, maximum) for the optional combat numbers
ARMOR_CLASS_RANGE = (1, 30)
SPEED_RANGE = (0, 200)
INITIATIVE_RANGE = (-10, 30)
PASSIVE_PERCEPTION_RANGE = (1, 40)


# =============================================================================
# Multiclassing
# =============================================================================

MULTICLASS_REQUIREMENTS: dict[str, dict[str, int]] = {
    "barbarian": {"strength": 13},
    "bard": {"charisma": 13},
    "cleric": {"wisdom": 13},
    "druid": {"wisdom": 13},
    "fighter": {"strength": 13},
    "monk": {"dexterity": 13, "wisdom": 13},
    "paladin": {"strength": 13, "charisma": 13},
    "ranger": {"dexterity": 13, "wisdom": 13},
    "rogue": {"dexterity": 13},
    "sorcerer": {"charisma": 13},
    "warlock": {"charisma": 13},
    "wizard": {"intelligence": 13},
}


# =============================================================================
# Class basics
# =============================================================================

CLASS_HIT_DICE: dict[str, int] = {
    "artificer": 8,
    "barbarian": 12,
    "bard": 8,
    "cleric": 8,
    "druid": 8,
    "fighter": 10,
    "monk": 8,
    "paladin": 10,
    "ranger": 10,
    "rogue": 8,
    "sorcerer": 6,
    "warlock": 8,
    "wizard": 6,
}

CLASS_SAVING_THROWS: dict[str, list[str]] = {
    "artificer": ["constitution", "intelligence"],
    "barbarian": ["strength", "constitution"],
    "bard": ["dexterity", "charisma"],
    "cleric": ["wisdom", "charisma"],
    "druid": ["intelligence", "wisdom"],
    "fighter": ["strength", "constitution"],
    "monk": ["strength", "dexterity"],
    "paladin": ["wisdom", "charisma"],
    "ranger": ["strength", "dexterity"],
    "rogue": ["dexterity", "intelligence"],
    "sorcerer": ["constitution", "charisma"],
    "warlock": ["wisdom", "charisma"],
    "wizard": ["intelligence", "wisdom"],
}


# =============================================================================
# Skills
# =============================================================================

SKILL_ABILITIES: dict[str, str] = {
    "Acrobatics": "dexterity",
    "Animal Handling": "wisdom",
    "Arcana": "intelligence",
    "Athletics": "strength",
    "Deception": "charisma",
    "History": "intelligence",
    "Insight": "wisdom",
    "Intimidation": "charisma",
    "Investigation": "intelligence",
    "Medicine": "wisdom",
    "Nature": "intelligence",
    "Perception": "wisdom",
    "Performance": "charisma",
    "Persuasion": "charisma",
    "Religion": "intelligence",
    "Sleight of Hand": "dexterity",
    "Stealth": "dexterity",
    "Survival": "wisdom",
}

CLASS_SKILL_CHOICES: dict[str, dict] = {
    "artificer": {
        "available": ["Arcana", "History", "Investigation", "Medicine", "Nature", "Perception", "Sleight of Hand"],
        "count": 2,
    },
    "barbarian": {
        "available": ["Animal Handling", "Athletics", "Intimidation", "Nature", "Perception", "Survival"],
        "count": 2,
    },
    # Bards pick from every skill
    "bard": {"available": list(SKILL_ABILITIES), "count": 3},
    "cleric": {
        "available": ["History", "Insight", "Medicine", "Persuasion", "Religion"],
        "count": 2,
    },
    "druid": {
        "available": ["Arcana", "Animal Handling", "Insight", "Medicine", "Nature", "Perception", "Religion", "Survival"],
        "count": 2,
    },
    "fighter": {
        "available": ["Acrobatics", "Animal Handling", "Athletics", "History", "Insight", "Intimidation", "Perception", "Survival"],
        "count": 2,
    },
    "monk": {
        "available": ["Acrobatics", "Athletics", "History", "Insight", "Religion", "Stealth"],
        "count": 2,
    },
    "paladin": {
        "available": ["Athletics", "Insight", "Intimidation", "Medicine", "Persuasion", "Religion"],
        "count": 2,
    },
    "ranger": {
        "available": ["Animal Handling", "Athletics", "Insight", "Investigation", "Nature", "Perception", "Stealth", "Survival"],
        "count": 3,
    },
    "rogue": {
        "available": [
            "Acrobatics", "Athletics", "Deception", "Insight", "Intimidation", "Investigation",
            "Perception", "Performance", "Persuasion", "Sleight of Hand", "Stealth",
        ],
        "count": 4,
    },
    "sorcerer": {
        "available": ["Arcana", "Deception", "Insight", "Intimidation", "Persuasion", "Religion"],
        "count": 2,
    },
    "warlock": {
        "available": ["Arcana", "Deception", "History", "Intimidation", "Investigation", "Nature", "Religion"],
        "count": 2,
    },
    "wizard": {
        "available": ["Arcana", "History", "Insight", "Investigation", "Medicine", "Religion"],
        "count": 2,
    },
}

BACKGROUND_SKILLS: dict[str, list[str]] = {
    "acolyte": ["Insight", "Religion"],
    "charlatan": ["Deception", "Sleight of Hand"],
    "criminal": ["Deception", "Stealth"],
    "entertainer": ["Acrobatics", "Performance"],
    "folk-hero": ["Animal Handling", "Survival"],
    "guild-artisan": ["Insight", "Persuasion"],
    "hermit": ["Medicine", "Religion"],
    "noble": ["History", "Persuasion"],
    "outlander": ["Athletics", "Survival"],
    "sage": ["Arcana", "History"],
    "sailor": ["Athletics", "Perception"],
    "soldier": ["Athletics", "Intimidation"],
}


# =============================================================================
# Spellcasting
# =============================================================================

CASTER_PROFILES: dict[str, dict[str, str]] = {
    "artificer": {
        "primary_ability": "intelligence",
        "repertoire": "prepared",
        "description": "Prepare INT modifier + half level spells",
    },
    "bard": {
        "primary_ability": "charisma",
        "repertoire": "known",
        "description": "Learn spells from the bard spell list",
    },
    "cleric": {
        "primary_ability": "wisdom",
        "repertoire": "prepared",
        "description": "Prepare WIS modifier + level spells",
    },
    "druid": {
        "primary_ability": "wisdom",
        "repertoire": "prepared",
        "description": "Prepare WIS modifier + level spells",
    },
    "paladin": {
        "primary_ability": "charisma",
        "repertoire": "prepared",
        "description": "Prepare CHA modifier + half level spells (min 1)",
    },
    "ranger": {
        "primary_ability": "wisdom",
        "repertoire": "known",
        "description": "Learn spells from the ranger spell list",
    },
    "sorcerer": {
        "primary_ability": "charisma",
        "repertoire": "known",
        "description": "Learn spells from the sorcerer spell list",
    },
    "warlock": {
        "primary_ability": "charisma",
        "repertoire": "known",
        "description": "Learn spells; regain on short rest",
    },
    "wizard": {
        "primary_ability": "intelligence",
        "repertoire": "prepared",
        "description": "Prepare INT modifier + level spells from spellbook",
    },
}

HALF_CASTER_CLASSES: list[str] = ["paladin", "ranger"]

SPELL_SLOT_LABELS: tuple[str, ...] = (
    "1st", "2nd", "3rd", "4th", "5th", "6th", "7th", "8th", "9th",
)

# Full caster progression, keyed by effective caster level
FULL_CASTER_SPELL_SLOTS: dict[int, dict[str, int]] = {
    1: {"1st": 2},
    2: {"1st": 3},
    3: {"1st": 4, "2nd": 2},
    4: {"1st": 4, "2nd": 3},
    5: {"1st": 4, "2nd": 3, "3rd": 2},
    6: {"1st": 4, "2nd": 3, "3rd": 3},
    7: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 1},
    8: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 2},
    9: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 1},
    10: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 2},
    11: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 2, "6th": 1},
    12: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 2, "6th": 1},
    13: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 2, "6th": 1, "7th": 1},
    14: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 2, "6th": 1, "7th": 1},
    15: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 2, "6th": 1, "7th": 1, "8th": 1},
    16: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 2, "6th": 1, "7th": 1, "8th": 1},
    17: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 2, "6th": 1, "7th": 1, "8th": 1, "9th": 1},
    18: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 3, "6th": 1, "7th": 1, "8th": 1, "9th": 1},
    19: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 3, "6th": 2, "7th": 1, "8th": 1, "9th": 1},
    20: {"1st": 4, "2nd": 3, "3rd": 3, "4th": 3, "5th": 3, "6th": 2, "7th": 2, "8th": 1, "9th": 1},
}


# =============================================================================
# Ability score generation
# =============================================================================

# Standard Array values per PHB
STANDARD_ARRAY: list[int] = [15, 14, 13, 12, 10, 8]

# Point Buy costs per PHB
POINT_BUY_COSTS: dict[int, int] = {8: 0, 9: 1, 10: 2, 11: 3, 12: 4, 13: 5, 14: 7, 15: 9}
POINT_BUY_BUDGET = 27
