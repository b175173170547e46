"""Derived stats: numbers computed from validated raw character data.

Pure functions with no validation of their own: callers pass scores and
levels that already passed the structural validator.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from .rules import ABILITY_NAMES, get_rule_tables

if TYPE_CHECKING:
    from .models import Character, ClassEntry


def ability_modifier(score: int) -> int:
    """Ability modifier for a raw score: floor((score - 10) / 2)."""
    return (score - 10) // 2


def proficiency_bonus(total_level: int) -> int:
    """Proficiency bonus for a total character level: ceil(level / 4) + 1."""
    return math.ceil(total_level / 4) + 1


def ability_modifiers(abilities: Mapping[str, int] | Any) -> dict[str, int]:
    """Modifiers for all six abilities, from a mapping or an AbilityScores model."""
    if not isinstance(abilities, Mapping):
        abilities = abilities.model_dump()
    return {name: ability_modifier(abilities[name]) for name in ABILITY_NAMES}


def total_level(classes: Iterable[ClassEntry]) -> int:
    """Total character level across all classes."""
    return sum(c.level for c in classes)


def initiative(dexterity: int, bonus: int = 0) -> int:
    """Initiative modifier (Dex modifier + misc bonuses)."""
    return ability_modifier(dexterity) + bonus


def armor_class(dexterity: int, base: int = 10) -> int:
    """Unarmored armor class: base + Dex modifier."""
    return base + ability_modifier(dexterity)


def passive_perception(wisdom: int, proficiency: int = 0) -> int:
    """Passive Perception: 10 + Wis modifier + proficiency (when proficient)."""
    return 10 + ability_modifier(wisdom) + proficiency


def max_hit_points(classes: Iterable[ClassEntry], constitution: int) -> int:
    """Calculate max HP across all classes.

    First level of the first class = max die + CON; every other level =
    average (die/2 + 1) + CON. Minimum 1 HP per level.
    """
    con_mod = ability_modifier(constitution)
    hp = 0
    first_level = True
    for entry in classes:
        avg_roll = entry.hit_dice_size // 2 + 1
        for _ in range(entry.level):
            if first_level:
                hp += max(entry.hit_dice_size + con_mod, 1)
                first_level = False
            else:
                hp += max(avg_roll + con_mod, 1)
    return hp


def saving_throw_bonuses(character: Character) -> dict[str, int]:
    """Saving throw bonus for each ability.

    Proficient saves come from the first class only (multiclassing does not
    grant the new class's saves) plus any listed on the sheet.
    """
    rules = get_rule_tables()
    proficient = set(rules.class_saving_throws(character.classes[0].class_name))
    proficient.update(character.saving_throw_proficiencies)

    mods = ability_modifiers(character.abilities)
    bonus = character.proficiency_bonus
    return {
        ability: mods[ability] + (bonus if ability in proficient else 0)
        for ability in ABILITY_NAMES
    }


def skill_bonuses(character: Character) -> dict[str, int]:
    """Skill check bonus for every skill in the rule tables."""
    rules = get_rule_tables()
    proficient = set(character.skill_proficiencies)
    mods = ability_modifiers(character.abilities)
    bonus = character.proficiency_bonus
    return {
        skill: mods[ability] + (bonus if skill in proficient else 0)
        for skill, ability in rules.skill_abilities.items()
    }


class DerivedStats(BaseModel):
    """Every derived number on a character sheet."""

    total_level: int
    proficiency_bonus: int
    ability_modifiers: dict[str, int]
    armor_class: int
    initiative: int
    passive_perception: int
    max_hit_points: int
    saving_throws: dict[str, int]
    skills: dict[str, int]


def derive_stats(character: Character) -> DerivedStats:
    """Compute the full set of derived stats for a validated character."""
    abilities = character.abilities
    prof = character.proficiency_bonus
    perception_prof = prof if "Perception" in character.skill_proficiencies else 0

    return DerivedStats(
        total_level=character.total_level,
        proficiency_bonus=prof,
        ability_modifiers=ability_modifiers(abilities),
        armor_class=armor_class(abilities.dexterity),
        initiative=initiative(abilities.dexterity),
        passive_perception=passive_perception(abilities.wisdom, perception_prof),
        max_hit_points=max_hit_points(character.classes, abilities.constitution),
        saving_throws=saving_throw_bonuses(character),
        skills=skill_bonuses(character),
    )


__all__ = [
    "DerivedStats",
    "ability_modifier",
    "ability_modifiers",
    "armor_class",
    "derive_stats",
    "initiative",
    "max_hit_points",
    "passive_perception",
    "proficiency_bonus",
    "saving_throw_bonuses",
    "skill_bonuses",
    "total_level",
]
