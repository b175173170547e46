"""Tests for the spellcasting deriver."""

import pytest

from charsheet_engine.models import AbilityScores, Character, ClassEntry, Spellcasting, SpellSlot
from charsheet_engine.spellcasting import (
    derive_spellcasting,
    effective_caster_level,
    get_caster_profile,
    is_half_caster,
    is_spellcaster,
    spell_attack_bonus,
    spell_save_dc,
    spell_slots_for_classes,
    spell_slots_for_level,
)

CASTERS = ["Artificer", "Bard", "Cleric", "Druid", "Paladin", "Ranger", "Sorcerer", "Warlock", "Wizard"]


def make_character(*classes: tuple[str, int, int], spellcasting=None, **abilities) -> Character:
    scores = {"strength": 10, "dexterity": 10, "constitution": 10,
              "intelligence": 10, "wisdom": 10, "charisma": 10} | abilities
    return Character(
        name="Test",
        race="Human",
        background="Sage",
        alignment="Neutral",
        classes=[ClassEntry(class_name=n, level=lvl, hit_dice_size=hd) for n, lvl, hd in classes],
        abilities=AbilityScores(**scores),
        spellcasting=spellcasting,
    )


# =============================================================================
# Caster profiles
# =============================================================================


class TestCasterProfiles:

    @pytest.mark.parametrize("class_name", CASTERS)
    def test_nine_casters(self, class_name):
        assert is_spellcaster(class_name) is True

    @pytest.mark.parametrize("class_name", ["Barbarian", "Fighter", "Monk", "Rogue", "Commoner"])
    def test_non_casters(self, class_name):
        assert is_spellcaster(class_name) is False
        assert get_caster_profile(class_name) is None

    def test_profile_contents(self):
        wizard = get_caster_profile("wizard")
        assert wizard.primary_ability == "intelligence"
        assert wizard.repertoire == "prepared"
        assert get_caster_profile("Sorcerer").repertoire == "known"

    def test_half_casters(self):
        assert is_half_caster("Paladin") is True
        assert is_half_caster("Ranger") is True
        assert is_half_caster("Wizard") is False


# =============================================================================
# Spell slots
# =============================================================================


class TestSpellSlots:

    def test_effective_level(self):
        assert effective_caster_level("Wizard", 5) == 5
        assert effective_caster_level("Paladin", 5) == 2
        assert effective_caster_level("Ranger", 20) == 10
        assert effective_caster_level("Fighter", 10) == 0

    def test_first_level_half_caster_has_no_slots(self):
        assert effective_caster_level("Paladin", 1) == 0
        assert spell_slots_for_level(0) == {}

    def test_table_lookups(self):
        assert spell_slots_for_level(1) == {"1st": 2}
        assert spell_slots_for_level(3) == {"1st": 4, "2nd": 2}
        assert spell_slots_for_level(20)["9th"] == 1
        assert spell_slots_for_level(20)["7th"] == 2

    def test_every_level_has_an_entry(self):
        for level in range(1, 21):
            assert spell_slots_for_level(level)["1st"] >= 2

    def test_half_caster_slots(self):
        classes = [ClassEntry(class_name="Paladin", level=5, hit_dice_size=10)]
        assert spell_slots_for_classes(classes) == {"1st": 3}

    def test_primary_class_drives_slots(self):
        classes = [
            ClassEntry(class_name="Fighter", level=5, hit_dice_size=10),
            ClassEntry(class_name="Wizard", level=3, hit_dice_size=6),
        ]
        assert spell_slots_for_classes(classes) == {}


# =============================================================================
# Attack bonus & save DC
# =============================================================================


class TestSpellMath:

    def test_intelligence_sixteen_at_proficiency_two(self):
        assert spell_attack_bonus(16, 1) == 5
        assert spell_save_dc(16, 1) == 13

    def test_proficiency_scales_with_level(self):
        assert spell_attack_bonus(16, 5) == 6
        assert spell_save_dc(20, 17) == 19

    def test_low_ability_can_go_below_eight(self):
        assert spell_save_dc(1, 1) == 5


class TestDeriveSpellcasting:

    def test_non_caster_has_no_spellcasting(self):
        fighter = make_character(("Fighter", 5, 10))
        assert derive_spellcasting(fighter) is None

    def test_default_block_for_caster(self):
        wizard = make_character(("Wizard", 3, 6), intelligence=16)
        spellcasting = derive_spellcasting(wizard)
        assert spellcasting.ability == "intelligence"
        assert spellcasting.spell_attack_bonus == 5
        assert spellcasting.spell_save_dc == 13
        assert spellcasting.spell_slots == {
            "1st": SpellSlot(total=4),
            "2nd": SpellSlot(total=2),
        }

    def test_stored_values_are_replaced(self):
        cleric = make_character(("Cleric", 1, 8), wisdom=12)
        supplied = Spellcasting(ability="wisdom", spell_attack_bonus=99, spell_save_dc=99)
        derived = derive_spellcasting(cleric, supplied)
        assert derived.spell_attack_bonus == 3
        assert derived.spell_save_dc == 11

    def test_chosen_ability_wins_over_profile(self):
        wizard = make_character(("Wizard", 1, 6), intelligence=10, charisma=18)
        derived = derive_spellcasting(wizard, Spellcasting(ability="charisma"))
        assert derived.ability == "charisma"
        assert derived.spell_attack_bonus == 6

    def test_slots_and_spells_are_preserved(self, wizard):
        derived = derive_spellcasting(wizard)
        assert derived == wizard.spellcasting
        assert derived.spell_slots["1st"].used == 1
        assert derived.spells_known == ["Magic Missile", "Shield", "Misty Step"]

    def test_recomputes_after_ability_change(self, wizard):
        boosted = wizard.model_copy(update={
            "abilities": wizard.abilities.model_copy(update={"intelligence": 18}),
        })
        derived = derive_spellcasting(boosted)
        assert derived.spell_attack_bonus == 6
        assert derived.spell_save_dc == 14

    def test_recomputes_after_level_change(self, wizard):
        leveled = wizard.model_copy(update={
            "classes": [wizard.classes[0].model_copy(update={"level": 5})],
        })
        derived = derive_spellcasting(leveled)
        assert derived.spell_attack_bonus == 6
        assert derived.spell_save_dc == 14

    def test_derivation_is_deterministic(self, wizard):
        assert derive_spellcasting(wizard) == derive_spellcasting(wizard)
