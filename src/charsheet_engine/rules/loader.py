"""
Rule table loading.

Built-in tables come from ``tables.py``. A local JSON or YAML overlay file can
add or replace entries (homebrew classes, house-ruled point buy, ...). The
merged result is exposed as an immutable ``RuleTables`` object with
case-insensitive lookups.

Expected overlay structure:

```yaml
$schema: charsheet-engine/rules-v1
name: My Homebrew
tables:
  multiclass_requirements:
    blood-hunter: {strength: 13, wisdom: 13}
  caster_profiles:
    blood-hunter: {primary_ability: wisdom, repertoire: known}
  hit_dice:
    blood-hunter: 10
```

Mapping tables are merged key by key; list and scalar tables are replaced.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..config import get_settings
from . import tables

logger = logging.getLogger("charsheet-engine")

AbilityName = Literal["strength", "dexterity", "constitution", "intelligence", "wisdom", "charisma"]


class RuleTableError(Exception):
    """Error loading or parsing a rules overlay."""


def normalize_index(name: str) -> str:
    """Convert user-facing name to rulebook index format (lowercase, hyphenated)."""
    return name.strip().lower().replace(" ", "-").replace("_", "-")


class CasterProfile(BaseModel):
    """Spellcasting metadata for one class."""
    model_config = ConfigDict(frozen=True)

    primary_ability: AbilityName
    repertoire: Literal["known", "prepared"]
    description: str = ""


class SkillChoice(BaseModel):
    """Skills a class may choose from at first level, and how many."""
    model_config = ConfigDict(frozen=True)

    available: list[str]
    count: int = Field(ge=0)


class RuleTables(BaseModel):
    """All rule tables the engine consults."""
    model_config = ConfigDict(frozen=True)

    multiclass_requirements: dict[str, dict[AbilityName, int]]
    hit_dice: dict[str, Literal[6, 8, 10, 12]]
    saving_throws: dict[str, list[AbilityName]]
    skill_abilities: dict[str, AbilityName]
    skill_choices: dict[str, SkillChoice]
    background_skills: dict[str, list[str]]
    caster_profiles: dict[str, CasterProfile]
    half_casters: list[str]
    spell_slots: dict[int, dict[str, int]]
    standard_array: list[int] = Field(min_length=6, max_length=6)
    point_buy_costs: dict[int, int]
    point_buy_budget: int = Field(ge=0)

    @field_validator(
        "multiclass_requirements",
        "hit_dice",
        "saving_throws",
        "skill_choices",
        "background_skills",
        "caster_profiles",
        mode="before",
    )
    @classmethod
    def _normalize_keys(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {normalize_index(str(k)): v for k, v in value.items()}
        return value

    @field_validator("half_casters", mode="before")
    @classmethod
    def _normalize_half_casters(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [normalize_index(str(v)) for v in value]
        return value

    @field_validator("spell_slots")
    @classmethod
    def _check_slot_labels(cls, value: dict[int, dict[str, int]]) -> dict[int, dict[str, int]]:
        for level, slots in value.items():
            unknown = set(slots) - set(tables.SPELL_SLOT_LABELS)
            if unknown:
                raise ValueError(f"Unknown spell slot labels at level {level}: {sorted(unknown)}")
        return value

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def multiclass_requirement(self, class_name: str) -> dict[str, int]:
        return dict(self.multiclass_requirements.get(normalize_index(class_name), {}))

    def hit_die(self, class_name: str) -> int | None:
        return self.hit_dice.get(normalize_index(class_name))

    def class_saving_throws(self, class_name: str) -> list[str]:
        return list(self.saving_throws.get(normalize_index(class_name), []))

    def skill_choice(self, class_name: str) -> SkillChoice | None:
        return self.skill_choices.get(normalize_index(class_name))

    def skills_for_background(self, background: str) -> list[str]:
        return list(self.background_skills.get(normalize_index(background), []))

    def caster_profile(self, class_name: str) -> CasterProfile | None:
        return self.caster_profiles.get(normalize_index(class_name))

    def is_half_caster(self, class_name: str) -> bool:
        return normalize_index(class_name) in self.half_casters

    def canonical_skill(self, name: str) -> str | None:
        """Return the table spelling of a skill name, matched case-insensitively."""
        wanted = name.strip().lower()
        for skill in self.skill_abilities:
            if skill.lower() == wanted:
                return skill
        return None


def builtin_tables_data() -> dict[str, Any]:
    """Return the built-in tables as plain data, ready for RuleTables."""
    return {
        "multiclass_requirements": tables.MULTICLASS_REQUIREMENTS,
        "hit_dice": tables.CLASS_HIT_DICE,
        "saving_throws": tables.CLASS_SAVING_THROWS,
        "skill_abilities": tables.SKILL_ABILITIES,
        "skill_choices": tables.CLASS_SKILL_CHOICES,
        "background_skills": tables.BACKGROUND_SKILLS,
        "caster_profiles": tables.CASTER_PROFILES,
        "half_casters": tables.HALF_CASTER_CLASSES,
        "spell_slots": tables.FULL_CASTER_SPELL_SLOTS,
        "standard_array": tables.STANDARD_ARRAY,
        "point_buy_costs": tables.POINT_BUY_COSTS,
        "point_buy_budget": tables.POINT_BUY_BUDGET,
    }


# Tables keyed by class or background name
_INDEX_KEYED_TABLES = {
    "multiclass_requirements",
    "hit_dice",
    "saving_throws",
    "skill_choices",
    "background_skills",
    "caster_profiles",
}


def merge_tables(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Merge overlay tables over base tables.

    Mapping tables merge per key (overlay keys are normalized first), other
    tables are replaced outright. Unknown table names are ignored with a warning.
    """
    merged = dict(base)
    for name, value in overlay.items():
        if name not in base:
            logger.warning(f"Ignoring unknown rule table '{name}' in overlay")
            continue
        current = base[name]
        if isinstance(current, dict) and isinstance(value, dict):
            key_of = normalize_index if name in _INDEX_KEYED_TABLES else str
            combined = {key_of(str(k)): v for k, v in current.items()}
            for key, entry in value.items():
                combined[key_of(str(key))] = entry
            merged[name] = combined
        else:
            merged[name] = value
    return merged


class RuleOverlay:
    """A rules overlay file on disk (JSON or YAML)."""

    SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}
    CURRENT_SCHEMA = "charsheet-engine/rules-v1"

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.name: str | None = None

    def read(self) -> dict[str, Any]:
        """Read and parse the overlay, returning its ``tables`` mapping."""
        if not self.path.exists():
            raise RuleTableError(f"Rules overlay not found: {self.path}")

        suffix = self.path.suffix.lower()
        if suffix not in self.SUPPORTED_EXTENSIONS:
            raise RuleTableError(
                f"Unsupported file format: {suffix}. "
                f"Supported: {', '.join(sorted(self.SUPPORTED_EXTENSIONS))}"
            )

        try:
            raw_content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise RuleTableError(f"Failed to read file: {e}") from e

        try:
            if suffix == ".json":
                data = json.loads(raw_content)
            else:
                data = yaml.safe_load(raw_content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise RuleTableError(f"Failed to parse {suffix} file: {e}") from e

        if not isinstance(data, dict):
            raise RuleTableError("Rules overlay must be a JSON/YAML object at the top level")

        schema = data.get("$schema")
        if schema and schema != self.CURRENT_SCHEMA:
            logger.warning(
                f"Rules overlay schema '{schema}' differs from current '{self.CURRENT_SCHEMA}'. "
                "Some tables may not load correctly."
            )

        self.name = data.get("name") or self.path.stem
        overlay_tables = data.get("tables", {})
        if not isinstance(overlay_tables, dict):
            raise RuleTableError("'tables' must be an object mapping table names to data")
        return overlay_tables


def load_rule_tables(overlay_path: Path | str | None = None) -> RuleTables:
    """Build RuleTables from the built-ins plus an optional overlay file.

    Raises:
        RuleTableError: If the overlay cannot be read or produces invalid tables.
    """
    data = builtin_tables_data()
    source = "built-in"
    if overlay_path is not None:
        overlay = RuleOverlay(overlay_path)
        data = merge_tables(data, overlay.read())
        source = f"overlay '{overlay.name}'"

    try:
        rule_tables = RuleTables.model_validate(data)
    except ValidationError as e:
        raise RuleTableError(f"Invalid rule tables from {source}: {e}") from e

    logger.debug(
        f"✅ Rule tables loaded from {source} "
        f"({len(rule_tables.multiclass_requirements)} multiclass entries, "
        f"{len(rule_tables.caster_profiles)} caster profiles)"
    )
    return rule_tables


@lru_cache(maxsize=1)
def get_rule_tables() -> RuleTables:
    """Return the process-wide rule tables, loading them on first use."""
    return load_rule_tables(get_settings().rules_path)


def reset_rule_tables() -> None:
    """Drop the cached tables so the next lookup reloads them."""
    get_rule_tables.cache_clear()


__all__ = [
    "AbilityName",
    "CasterProfile",
    "RuleOverlay",
    "RuleTableError",
    "RuleTables",
    "SkillChoice",
    "builtin_tables_data",
    "get_rule_tables",
    "load_rule_tables",
    "merge_tables",
    "normalize_index",
    "reset_rule_tables",
]
