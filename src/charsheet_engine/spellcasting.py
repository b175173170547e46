"""Spellcasting deriver: caster profiles, spell slots, attack bonus and save DC.

The deriver is the single source of truth for ``spell_attack_bonus`` and
``spell_save_dc``. Callers re-invoke ``derive_spellcasting`` whenever the
spellcasting ability, the ability scores, or the class levels change; the
stored values are always replaced, never trusted.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from .derived import ability_modifier, proficiency_bonus
from .models import SpellSlot, Spellcasting
from .rules import SPELL_SLOT_LABELS, CasterProfile, get_rule_tables

if TYPE_CHECKING:
    from .models import Character, ClassEntry


def get_caster_profile(class_name: str) -> CasterProfile | None:
    """Caster profile for a class, or None for non-casters."""
    return get_rule_tables().caster_profile(class_name)


def is_spellcaster(class_name: str) -> bool:
    return get_caster_profile(class_name) is not None


def is_half_caster(class_name: str) -> bool:
    return get_rule_tables().is_half_caster(class_name)


def effective_caster_level(class_name: str, class_level: int) -> int:
    """Level used for the spell slot table.

    Full casters use their class level, half casters half of it (rounded
    down), non-casters 0.
    """
    if not is_spellcaster(class_name):
        return 0
    if is_half_caster(class_name):
        return class_level // 2
    return class_level


def spell_slots_for_level(effective_level: int) -> dict[str, int]:
    """Slot counts per spell level for an effective caster level (empty below 1)."""
    return dict(get_rule_tables().spell_slots.get(effective_level, {}))


def spell_slots_for_classes(classes: Sequence[ClassEntry]) -> dict[str, int]:
    """Slot counts for a character, driven by the primary (first) class."""
    if not classes:
        return {}
    primary = classes[0]
    return spell_slots_for_level(effective_caster_level(primary.class_name, primary.level))


def spell_attack_bonus(ability_score: int, total_level: int) -> int:
    """Spellcasting ability modifier + proficiency bonus."""
    return ability_modifier(ability_score) + proficiency_bonus(total_level)


def spell_save_dc(ability_score: int, total_level: int) -> int:
    """8 + spellcasting ability modifier + proficiency bonus."""
    return 8 + spell_attack_bonus(ability_score, total_level)


def _default_spellcasting(profile: CasterProfile, classes: Sequence[ClassEntry]) -> dict[str, Any]:
    slots = spell_slots_for_classes(classes)
    return {
        "ability": profile.primary_ability,
        "spell_slots": {
            label: SpellSlot(total=slots[label])
            for label in SPELL_SLOT_LABELS
            if label in slots
        },
    }


def derive_spellcasting(
    character: Character,
    spellcasting: Spellcasting | None = None,
) -> Spellcasting | None:
    """Return the character's spellcasting block with derived values recomputed.

    Uses ``spellcasting`` if given, else the character's own block. When the
    character has none, a default block is built from the primary class's
    caster profile (primary ability, slot totals from the table).

    Returns None, the explicit "no spellcasting" state, when the character has
    no block and the primary class is not a caster. That is a normal outcome,
    not an error.
    """
    current = spellcasting if spellcasting is not None else character.spellcasting

    if current is None:
        profile = get_caster_profile(character.classes[0].class_name)
        if profile is None:
            return None
        fields = _default_spellcasting(profile, character.classes)
    else:
        fields = current.model_dump()

    score = character.abilities.score(fields["ability"])
    level = sum(c.level for c in character.classes)
    fields["spell_attack_bonus"] = spell_attack_bonus(score, level)
    fields["spell_save_dc"] = spell_save_dc(score, level)
    return Spellcasting.model_validate(fields)


__all__ = [
    "derive_spellcasting",
    "effective_caster_level",
    "get_caster_profile",
    "is_half_caster",
    "is_spellcaster",
    "spell_attack_bonus",
    "spell_save_dc",
    "spell_slots_for_classes",
    "spell_slots_for_level",
]
