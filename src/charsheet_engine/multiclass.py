"""
Multiclass prerequisite checks.

Every class a multiclass character holds, the first one included, must meet
its own ability score prerequisite. The same floor gates joining a class and
leaving it, so each violated class reports both phrasings. Single-class
characters are never checked.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .models import RuleCheckResult
from .rules import get_rule_tables

logger = logging.getLogger("charsheet-engine")


def get_multiclass_prerequisites(class_name: str) -> dict[str, int]:
    """Ability minimums for multiclassing into a class (empty if none)."""
    return get_rule_tables().multiclass_requirement(class_name)


def has_ability_prerequisites(abilities: Mapping[str, int], prerequisites: Mapping[str, int]) -> bool:
    """True if every required ability meets its minimum. Missing abilities count as 0."""
    return all(abilities.get(ability, 0) >= minimum for ability, minimum in prerequisites.items())


def can_multiclass_into(class_name: str, abilities: Mapping[str, int] | Any) -> bool:
    """Whether the given scores allow multiclassing into a class.

    Classes without a prerequisite entry are always allowed.
    """
    prerequisites = get_multiclass_prerequisites(class_name)
    if not prerequisites:
        return True
    return has_ability_prerequisites(_ability_map(abilities), prerequisites)


def format_prerequisites(prerequisites: Mapping[str, int]) -> str:
    """Render prerequisites for messages.

    Examples:
        {"strength": 13} -> "Strength 13 or higher"
        {"strength": 13, "charisma": 13} -> "Strength 13 and Charisma 13 or higher"
    """
    parts = [f"{ability.capitalize()} {score}" for ability, score in prerequisites.items()]
    if len(parts) == 1:
        text = parts[0]
    elif len(parts) == 2:
        text = " and ".join(parts)
    else:
        text = ", ".join(parts[:-1]) + f", and {parts[-1]}"
    return f"{text} or higher"


def prerequisite_description(class_name: str) -> str:
    prerequisites = get_multiclass_prerequisites(class_name)
    if not prerequisites:
        return "No multiclassing prerequisites"
    return f"Requires {format_prerequisites(prerequisites)}"


def invalid_current_classes(classes: Iterable[Any], abilities: Mapping[str, int] | Any) -> list[str]:
    """Names of the given classes whose prerequisites the scores do not meet."""
    scores = _ability_map(abilities)
    invalid = []
    for name in _class_names(classes):
        prerequisites = get_multiclass_prerequisites(name)
        if prerequisites and not has_ability_prerequisites(scores, prerequisites):
            invalid.append(name)
    return invalid


def available_multiclass_options(abilities: Mapping[str, int] | Any) -> list[str]:
    """Display names of every class in the prerequisite table the scores qualify for."""
    return [
        _display_name(index)
        for index in get_rule_tables().multiclass_requirements
        if can_multiclass_into(index, abilities)
    ]


def validate_multiclass_prerequisites(character: Mapping[str, Any] | Any) -> RuleCheckResult:
    """Check a character's class list against the prerequisite table.

    Accepts a Character or a mapping with ``abilities`` and ``classes``.
    """
    classes = _class_names(_get(character, "classes") or [])
    if len(classes) <= 1:
        return RuleCheckResult(is_valid=True)

    scores = _ability_map(_get(character, "abilities") or {})
    errors: list[str] = []
    for name in invalid_current_classes(classes, scores):
        requirement = format_prerequisites(get_multiclass_prerequisites(name))
        errors.append(f"{name} multiclassing requires {requirement}")
        errors.append(f"{name} multiclassing requires {requirement} to leave the class")

    # Same class listed twice yields the same messages
    unique = list(dict.fromkeys(errors))
    if unique:
        logger.debug(f"Multiclass check failed for {classes}: {len(unique)} errors")
    return RuleCheckResult(is_valid=not unique, errors=unique)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------

def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def _ability_map(abilities: Mapping[str, int] | Any) -> Mapping[str, int]:
    if isinstance(abilities, Mapping):
        return abilities
    return abilities.model_dump()


def _class_names(classes: Iterable[Any]) -> list[str]:
    """Class names from ClassEntry models, mappings, or plain strings."""
    names = []
    for entry in classes:
        if isinstance(entry, str):
            names.append(entry)
        elif isinstance(entry, Mapping):
            names.append(entry.get("className") or entry.get("class_name") or "")
        else:
            names.append(entry.class_name)
    return names


def _display_name(index: str) -> str:
    return " ".join(part.capitalize() for part in index.split("-"))


__all__ = [
    "available_multiclass_options",
    "can_multiclass_into",
    "format_prerequisites",
    "get_multiclass_prerequisites",
    "has_ability_prerequisites",
    "invalid_current_classes",
    "prerequisite_description",
    "validate_multiclass_prerequisites",
]
