"""
Skill and saving throw proficiency rules.

A character's skills come from two places: the background grants a fixed
pair, and the primary class lets the player choose a number of skills from
its list. ``validate_skill_selection`` checks a finished sheet against both.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import RuleCheckResult
from .rules import SkillChoice, get_rule_tables

if TYPE_CHECKING:
    from .models import Character

logger = logging.getLogger("charsheet-engine")


def class_saving_throws(class_name: str) -> list[str]:
    """Saving throws a class is proficient in when taken at first level."""
    return get_rule_tables().class_saving_throws(class_name)


def class_skill_choices(class_name: str) -> SkillChoice | None:
    """Skill list and pick count for a class, or None if the class is unknown."""
    return get_rule_tables().skill_choice(class_name)


def background_skills(background: str) -> list[str]:
    """Skills granted by a background (empty for unknown backgrounds)."""
    return get_rule_tables().skills_for_background(background)


def validate_skill_selection(character: Character) -> RuleCheckResult:
    """Check skill proficiencies against the primary class and background.

    Background skills are free. Every other skill must be on the primary
    class's list, and there may be no more of them than the class allows.
    """
    rules = get_rule_tables()
    primary = character.classes[0].class_name
    granted = set(background_skills(character.background))
    choice = class_skill_choices(primary)

    errors: list[str] = []
    chosen: list[str] = []
    for name in character.skill_proficiencies:
        skill = rules.canonical_skill(name)
        if skill is None:
            errors.append(f"Unknown skill: {name}")
            continue
        if skill in granted or skill in chosen:
            continue
        chosen.append(skill)

    if choice is not None:
        for skill in chosen:
            if skill not in choice.available:
                errors.append(f"{skill} is not a {primary} skill choice")
        if len(chosen) > choice.count:
            errors.append(
                f"{primary} can choose {choice.count} skills "
                f"(got {len(chosen)} besides background skills)"
            )

    if errors:
        logger.debug(f"Skill selection for '{character.name}' has {len(errors)} errors")
    return RuleCheckResult(is_valid=not errors, errors=errors)


__all__ = [
    "background_skills",
    "class_saving_throws",
    "class_skill_choices",
    "validate_skill_selection",
]
