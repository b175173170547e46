"""
Pytest configuration and fixtures for charsheet-engine tests.
"""

import copy
import sys
from pathlib import Path

import pytest

# Add src directory to Python path to allow importing charsheet_engine
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from charsheet_engine.config import get_settings  # noqa: E402
from charsheet_engine.rules import reset_rule_tables  # noqa: E402


# A complete, valid level 3 wizard in wire (camelCase) shape.
WIZARD_SHEET = {
    "userId": "user_123",
    "name": "Elara Moonwhisper",
    "race": "Elf",
    "subrace": "High Elf",
    "background": "Sage",
    "alignment": "Neutral Good",
    "experiencePoints": 900,
    "classes": [
        {
            "className": "Wizard",
            "level": 3,
            "subclass": "School of Evocation",
            "hitDiceSize": 6,
            "hitDiceUsed": 1,
        }
    ],
    "abilities": {
        "strength": 8,
        "dexterity": 14,
        "constitution": 13,
        "intelligence": 16,
        "wisdom": 12,
        "charisma": 10,
    },
    "hitPoints": {"maximum": 17, "current": 15, "temporary": 0},
    "armorClass": 12,
    "speed": 30,
    "initiative": 2,
    "passivePerception": 11,
    "skillProficiencies": ["Arcana", "History", "Investigation", "Insight"],
    "savingThrowProficiencies": ["intelligence", "wisdom"],
    "spellcasting": {
        "ability": "intelligence",
        "spellAttackBonus": 5,
        "spellSaveDC": 13,
        "spellSlots": {
            "1st": {"total": 4, "used": 1},
            "2nd": {"total": 2, "used": 0},
        },
        "spellsKnown": ["Magic Missile", "Shield", "Misty Step"],
        "spellsPrepared": ["Magic Missile", "Shield"],
    },
    "equipment": [
        {"name": "Quarterstaff", "quantity": 1, "weight": 4, "equipped": True, "category": "weapon"},
        {"name": "Spellbook", "quantity": 1, "weight": 3},
    ],
    "features": [
        {
            "name": "Arcane Recovery",
            "source": "Wizard 1",
            "description": "Recover expended spell slots during a short rest.",
            "level": 1,
        }
    ],
    "notes": "Studied at Candlekeep.",
}


@pytest.fixture(autouse=True)
def clean_engine_state(monkeypatch):
    """Run every test against the built-in rule tables and default settings."""
    monkeypatch.delenv("CHARSHEET_RULES_PATH", raising=False)
    monkeypatch.delenv("CHARSHEET_LOG_LEVEL", raising=False)
    get_settings.cache_clear()
    reset_rule_tables()
    yield
    get_settings.cache_clear()
    reset_rule_tables()


@pytest.fixture
def wizard_data() -> dict:
    """A fresh, mutable copy of the sample wizard sheet."""
    return copy.deepcopy(WIZARD_SHEET)


@pytest.fixture
def wizard(wizard_data):
    """The sample wizard as a validated Character."""
    from charsheet_engine.validation import validate_character

    result = validate_character(wizard_data)
    assert result.is_valid, result.errors
    return result.sanitized_data
