"""
Data models for charsheet-engine.

Models use snake_case attributes with camelCase aliases, so they read and
write the wire shape (``className``, ``hitDiceSize``, ``spellSaveDC``...)
while staying idiomatic in Python. All models are frozen: the engine never
mutates a character in place.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .derived import ability_modifier, proficiency_bonus
from .rules import (
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
    AbilityName,
)


class SheetModel(BaseModel):
    """Base for every character sheet model."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class AbilityScores(SheetModel):
    """The six D&D ability scores. No partial states: all six are required."""
    strength: int = Field(ge=ABILITY_SCORE_MIN, le=ABILITY_SCORE_MAX)
    dexterity: int = Field(ge=ABILITY_SCORE_MIN, le=ABILITY_SCORE_MAX)
    constitution: int = Field(ge=ABILITY_SCORE_MIN, le=ABILITY_SCORE_MAX)
    intelligence: int = Field(ge=ABILITY_SCORE_MIN, le=ABILITY_SCORE_MAX)
    wisdom: int = Field(ge=ABILITY_SCORE_MIN, le=ABILITY_SCORE_MAX)
    charisma: int = Field(ge=ABILITY_SCORE_MIN, le=ABILITY_SCORE_MAX)

    def score(self, ability: str) -> int:
        """Look up a score by ability name."""
        return getattr(self, ability)


class AbilityModifiers(SheetModel):
    """Modifiers derived from AbilityScores."""
    strength: int
    dexterity: int
    constitution: int
    intelligence: int
    wisdom: int
    charisma: int


class ClassEntry(SheetModel):
    """One class the character has levels in."""
    class_name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    level: int = Field(ge=1, le=MAX_CLASS_LEVEL)
    subclass: str | None = None
    hit_dice_size: int
    hit_dice_used: int = Field(default=0, ge=0)

    @field_validator("hit_dice_size")
    @classmethod
    def _check_hit_dice_size(cls, value: int) -> int:
        if value not in HIT_DICE_SIZES:
            raise ValueError("Hit dice size must be one of 6, 8, 10, or 12")
        return value

    @model_validator(mode="after")
    def _check_hit_dice_used(self) -> "ClassEntry":
        if self.hit_dice_used > self.level:
            raise ValueError("Hit dice used cannot exceed class level")
        return self


class HitPoints(SheetModel):
    """Maximum, current and temporary hit points."""
    maximum: int = Field(ge=1)
    current: int = Field(ge=0)
    temporary: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_current(self) -> "HitPoints":
        if self.current > self.maximum + self.temporary:
            raise ValueError("Current hit points cannot exceed maximum plus temporary hit points")
        return self


class SpellSlot(SheetModel):
    """Slots of one spell level."""
    total: int = Field(ge=0)
    used: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_used(self) -> "SpellSlot":
        if self.used > self.total:
            raise ValueError("Spell slots used cannot exceed total")
        return self


class Spellcasting(SheetModel):
    """Spellcasting block of a character sheet.

    ``spell_attack_bonus`` and ``spell_save_dc`` are derived values; the
    spellcasting deriver recomputes them from the owning character.
    """
    ability: AbilityName
    spell_attack_bonus: int = 0
    spell_save_dc: int = Field(default=8, alias="spellSaveDC")
    spell_slots: dict[str, SpellSlot] = Field(default_factory=dict)
    spells_known: list[str] = Field(default_factory=list)
    spells_prepared: list[str] = Field(default_factory=list)

    @field_validator("spell_slots")
    @classmethod
    def _check_slot_labels(cls, value: dict[str, SpellSlot]) -> dict[str, SpellSlot]:
        for label in value:
            if label not in SPELL_SLOT_LABELS:
                raise ValueError(f"Unknown spell slot level: {label}")
        return value


class EquipmentItem(SheetModel):
    """An inventory entry."""
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    quantity: int = Field(default=1, ge=0)
    weight: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    equipped: bool = False
    category: str | None = None  # weapon, armor, gear, ...


class Feature(SheetModel):
    """Class, race or background feature."""
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    source: str | None = None  # e.g., "Fighter 2", "Hill Dwarf"
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    level: int | None = Field(default=None, ge=1, le=MAX_CLASS_LEVEL)


class Character(SheetModel):
    """Complete, self-consistent character sheet."""
    # Identity
    user_id: str | None = None
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    race: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    subrace: str | None = None
    background: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    alignment: str = Field(min_length=1, max_length=ALIGNMENT_MAX_LENGTH)
    experience_points: int = Field(default=0, ge=0)

    # Classes & Core Stats
    classes: list[ClassEntry] = Field(min_length=1, max_length=MAX_CLASSES)
    abilities: AbilityScores

    # Combat Stats
    hit_points: HitPoints | None = None
    armor_class: int | None = Field(default=None, ge=ARMOR_CLASS_RANGE[0], le=ARMOR_CLASS_RANGE[1])
    speed: int | None = Field(default=None, ge=SPEED_RANGE[0], le=SPEED_RANGE[1])
    initiative: int | None = Field(default=None, ge=INITIATIVE_RANGE[0], le=INITIATIVE_RANGE[1])
    passive_perception: int | None = Field(
        default=None, ge=PASSIVE_PERCEPTION_RANGE[0], le=PASSIVE_PERCEPTION_RANGE[1]
    )

    # Skills & Proficiencies
    skill_proficiencies: list[str] = Field(default_factory=list)
    saving_throw_proficiencies: list[AbilityName] = Field(default_factory=list)

    # Spellcasting
    spellcasting: Spellcasting | None = None

    # Equipment & Features
    equipment: list[EquipmentItem] = Field(default_factory=list)
    features: list[Feature] = Field(default_factory=list)

    # Misc
    notes: str = Field(default="", max_length=NOTES_MAX_LENGTH)

    @computed_field(alias="totalLevel")
    @property
    def total_level(self) -> int:
        """Total character level across all classes."""
        return sum(c.level for c in self.classes)

    @computed_field(alias="abilityModifiers")
    @property
    def ability_modifiers(self) -> AbilityModifiers:
        return AbilityModifiers(**{
            name: ability_modifier(score)
            for name, score in self.abilities.model_dump().items()
        })

    @computed_field(alias="proficiencyBonus")
    @property
    def proficiency_bonus(self) -> int:
        return proficiency_bonus(self.total_level)

    def class_string(self) -> str:
        """Human-readable class string, e.g. 'Fighter 5 / Wizard 3'."""
        return " / ".join(f"{c.class_name} {c.level}" for c in self.classes)

    @model_validator(mode="after")
    def _check_consistency(self) -> "Character":
        """Cross-field invariants that no single field can check."""
        if self.total_level > MAX_TOTAL_LEVEL:
            raise ValueError(f"Total character level cannot exceed {MAX_TOTAL_LEVEL}")

        if self.spellcasting is not None:
            modifier = ability_modifier(self.abilities.score(self.spellcasting.ability))
            expected_attack = modifier + self.proficiency_bonus
            if self.spellcasting.spell_attack_bonus != expected_attack:
                raise ValueError(
                    f"Spell attack bonus must be {expected_attack} "
                    f"(got {self.spellcasting.spell_attack_bonus})"
                )
            if self.spellcasting.spell_save_dc != 8 + expected_attack:
                raise ValueError(
                    f"Spell save DC must be {8 + expected_attack} "
                    f"(got {self.spellcasting.spell_save_dc})"
                )
            if self.spellcasting.spell_save_dc < 8:
                raise ValueError("Spell save DC must be at least 8")
        return self


class UserProfile(SheetModel):
    """Account identity fields owned by the sibling user entity."""
    email: str = Field(min_length=3, max_length=254)
    username: str = Field(min_length=3, max_length=30, pattern=r"^[a-zA-Z0-9_-]+$")
    display_name: str | None = Field(default=None, min_length=1, max_length=100)


DataT = TypeVar("DataT", bound=BaseModel)


class RuleCheckResult(SheetModel):
    """Outcome of a rule check: valid, or a list of human-readable errors."""
    is_valid: bool
    errors: list[str] = Field(default_factory=list)


class ValidationResult(RuleCheckResult, Generic[DataT]):
    """Outcome of validating a whole document.

    Either valid with sanitized data and no errors, or invalid with errors and
    no data. No partial success is representable.
    """
    sanitized_data: DataT | None = None

    @model_validator(mode="after")
    def _check_outcome(self) -> "ValidationResult":
        if self.is_valid and (self.errors or self.sanitized_data is None):
            raise ValueError("A valid result must carry sanitized data and no errors")
        if not self.is_valid and (not self.errors or self.sanitized_data is not None):
            raise ValueError("An invalid result must carry errors and no sanitized data")
        return self


__all__ = [
    "AbilityModifiers",
    "AbilityScores",
    "Character",
    "ClassEntry",
    "EquipmentItem",
    "Feature",
    "HitPoints",
    "RuleCheckResult",
    "SheetModel",
    "SpellSlot",
    "Spellcasting",
    "UserProfile",
    "ValidationResult",
]
