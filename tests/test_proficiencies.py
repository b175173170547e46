"""Tests for class/background skill selection rules."""

from charsheet_engine.models import AbilityScores, Character, ClassEntry
from charsheet_engine.proficiencies import (
    background_skills,
    class_saving_throws,
    class_skill_choices,
    validate_skill_selection,
)


def with_skills(character: Character, *skills: str) -> Character:
    return character.model_copy(update={"skill_proficiencies": list(skills)})


class TestTables:

    def test_class_saving_throws(self):
        assert class_saving_throws("Wizard") == ["intelligence", "wisdom"]
        assert class_saving_throws("Homebrew") == []

    def test_class_skill_choices(self):
        rogue = class_skill_choices("Rogue")
        assert rogue.count == 4
        assert "Sleight of Hand" in rogue.available
        assert class_skill_choices("bard").count == 3
        assert len(class_skill_choices("Bard").available) == 18
        assert class_skill_choices("Homebrew") is None

    def test_background_skills(self):
        assert background_skills("Sage") == ["Arcana", "History"]
        assert background_skills("guild artisan") == ["Insight", "Persuasion"]
        assert background_skills("Pirate") == []


class TestValidateSkillSelection:

    def test_sample_wizard_is_valid(self, wizard):
        result = validate_skill_selection(wizard)
        assert result.is_valid is True
        assert result.errors == []

    def test_background_skills_do_not_count(self, wizard):
        result = validate_skill_selection(with_skills(wizard, "Arcana", "History", "Medicine", "Religion"))
        assert result.is_valid is True

    def test_too_many_class_skills(self, wizard):
        character = with_skills(wizard, "Arcana", "History", "Investigation", "Insight", "Medicine")
        result = validate_skill_selection(character)
        assert result.errors == ["Wizard can choose 2 skills (got 3 besides background skills)"]

    def test_skill_not_on_class_list(self, wizard):
        result = validate_skill_selection(with_skills(wizard, "Arcana", "History", "Stealth"))
        assert result.errors == ["Stealth is not a Wizard skill choice"]

    def test_unknown_skill(self, wizard):
        result = validate_skill_selection(with_skills(wizard, "Basket Weaving"))
        assert result.errors == ["Unknown skill: Basket Weaving"]

    def test_primary_class_list_is_used(self, wizard):
        multiclass = wizard.model_copy(update={
            "classes": [
                ClassEntry(class_name="Rogue", level=1, hit_dice_size=8),
                ClassEntry(class_name="Wizard", level=3, hit_dice_size=6),
            ],
        })
        result = validate_skill_selection(with_skills(multiclass, "Stealth", "Deception", "Acrobatics", "Perception"))
        assert result.is_valid is True

    def test_unknown_class_only_checks_skill_names(self):
        character = Character(
            name="Vex",
            race="Human",
            background="Criminal",
            alignment="Chaotic Neutral",
            classes=[ClassEntry(class_name="Blood Hunter", level=2, hit_dice_size=10)],
            abilities=AbilityScores(strength=14, dexterity=14, constitution=14,
                                    intelligence=10, wisdom=13, charisma=8),
            skill_proficiencies=["Athletics", "Medicine", "Nature", "Religion", "Survival"],
        )
        assert validate_skill_selection(character).is_valid is True
