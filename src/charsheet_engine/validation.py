"""
Character sheet validation.

``validate_character`` is the single entry point for untrusted sheet data.
It runs in two stages:

1. Structural checks. Every field has a checker that returns ``Ok(value)``
   with the sanitized value or ``Err(messages)``. An ``ErrorCollector``
   gathers all failures in field order, so one pass reports every problem.
2. Rule checks, only after the structure is sound. The sanitized data is
   built into a ``Character`` (which attaches the derived fields) with the
   spellcasting block re-derived, and multiclass prerequisites are checked
   on the sanitized fields. Both run on every pass, so a failed build does
   not hide multiclass errors.

Nothing in this module raises for bad input; every outcome is a
``ValidationResult``.
"""

import json
import logging
import math
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from .models import Character, Spellcasting, UserProfile, ValidationResult
from .multiclass import validate_multiclass_prerequisites
from .rules import (
    ABILITY_NAMES,
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
    get_rule_tables,
    normalize_index,
)
from .spellcasting import derive_spellcasting

logger = logging.getLogger("charsheet-engine")

T = TypeVar("T")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


# =============================================================================
# Check results
# =============================================================================

@dataclass(frozen=True)
class Ok(Generic[T]):
    """A field passed its checks; ``value`` is the sanitized value."""
    value: T


@dataclass(frozen=True)
class Err:
    """A field failed; ``messages`` are human-readable errors."""
    messages: tuple[str, ...]

    @classmethod
    def of(cls, *messages: str) -> "Err":
        return cls(tuple(messages))


CheckResult = Ok[Any] | Err


class ErrorCollector:
    """Accumulates errors from many checks, keeping first-seen order.

    Identical messages are recorded once.
    """

    def __init__(self) -> None:
        self.errors: list[str] = []

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def add(self, message: str) -> None:
        if message not in self.errors:
            self.errors.append(message)

    def extend(self, messages: Iterable[str]) -> None:
        for message in messages:
            self.add(message)

    def collect(self, result: CheckResult) -> Any:
        """Record an Err's messages and return None, or unwrap an Ok."""
        if isinstance(result, Err):
            self.extend(result.messages)
            return None
        return result.value

    def result(self, value: T) -> "Ok[T] | Err":
        """Ok(value) if nothing was collected, else Err with everything collected."""
        if self.errors:
            return Err(tuple(self.errors))
        return Ok(value)


# =============================================================================
# Primitive checkers
# =============================================================================

def _pick(raw: Mapping[str, Any], key: str) -> Any:
    """Read a camelCase key, falling back to its snake_case spelling."""
    if key in raw:
        return raw[key]
    return raw.get(to_snake(key))


def _as_int(value: Any) -> int | None:
    """The value as an int if it is a whole number (bools are not)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _range_message(label: str, minimum: int | None, maximum: int | None) -> str:
    if maximum is None:
        if minimum == 0:
            return f"{label} cannot be negative"
        return f"{label} must be at least {minimum}"
    if minimum is None:
        return f"{label} cannot exceed {maximum}"
    return f"{label} must be between {minimum} and {maximum}"


def _choices(options: Iterable[Any]) -> str:
    """'a, b, or c' for messages."""
    words = [str(option) for option in options]
    return ", ".join(words[:-1]) + f", or {words[-1]}"


def check_integer(
    value: Any,
    label: str,
    minimum: int | None = None,
    maximum: int | None = None,
    *,
    integer_message: str | None = None,
    range_message: str | None = None,
) -> CheckResult:
    """Check a whole number within optional inclusive bounds."""
    number = _as_int(value)
    if number is None:
        return Err.of(integer_message or f"{label} must be an integer")
    if (minimum is not None and number < minimum) or (maximum is not None and number > maximum):
        return Err.of(range_message or _range_message(label, minimum, maximum))
    return Ok(number)


def check_required_integer(value: Any, label: str, minimum: int | None = None, maximum: int | None = None) -> CheckResult:
    if value is None:
        return Err.of(f"{label} is required")
    return check_integer(value, label, minimum, maximum)


def check_optional_integer(
    value: Any,
    label: str,
    minimum: int | None = None,
    maximum: int | None = None,
    default: int | None = None,
) -> CheckResult:
    if value is None:
        return Ok(default)
    return check_integer(value, label, minimum, maximum)


def check_string(value: Any, label: str, *, required: bool = True, max_length: int | None = None) -> CheckResult:
    """Check and trim a string. Blank optional strings become None."""
    if value is None:
        return Err.of(f"{label} is required") if required else Ok(None)
    if not isinstance(value, str):
        return Err.of(f"{label} must be a string")
    text = value.strip()
    if not text:
        return Err.of(f"{label} is required") if required else Ok(None)
    if max_length is not None and len(text) > max_length:
        return Err.of(f"{label} cannot exceed {max_length} characters")
    return Ok(text)


def check_text(value: Any, label: str, max_length: int) -> CheckResult:
    """Check free text. Kept verbatim; absent means empty."""
    if value is None:
        return Ok("")
    if not isinstance(value, str):
        return Err.of(f"{label} must be a string")
    if len(value) > max_length:
        return Err.of(f"{label} cannot exceed {max_length} characters")
    return Ok(value)


def check_list(value: Any, label: str, item_check: Callable[[Any], CheckResult]) -> CheckResult:
    """Check every item of an optional list (absent means empty)."""
    if value is None:
        return Ok([])
    if not isinstance(value, (list, tuple)):
        return Err.of(f"{label} must be a list")
    errors = ErrorCollector()
    items = [errors.collect(item_check(item)) for item in value]
    return errors.result(items)


# =============================================================================
# Field checkers
# =============================================================================

def check_hit_dice_size(value: Any) -> CheckResult:
    if value is None:
        return Err.of("Hit dice size is required")
    size = _as_int(value)
    if size not in HIT_DICE_SIZES:
        return Err.of(f"Hit dice size must be one of {_choices(HIT_DICE_SIZES)}")
    return Ok(size)


def check_class_entry(raw: Any) -> tuple[CheckResult, int | None]:
    """Check one class entry.

    Returns the result plus the level to count toward the total level, which
    is None when the entry has no usable name or level.
    """
    if not isinstance(raw, Mapping):
        return Err.of("Class entries must be objects"), None

    errors = ErrorCollector()
    class_name = errors.collect(check_string(_pick(raw, "className"), "Class name", max_length=NAME_MAX_LENGTH))
    level = errors.collect(check_required_integer(_pick(raw, "level"), "Class level", 1, MAX_CLASS_LEVEL))
    subclass = errors.collect(check_string(_pick(raw, "subclass"), "Subclass", required=False, max_length=NAME_MAX_LENGTH))

    size = _pick(raw, "hitDiceSize")
    if size is None and class_name is not None:
        size = get_rule_tables().hit_die(class_name)
    hit_dice_size = errors.collect(check_hit_dice_size(size))

    hit_dice_used = errors.collect(check_optional_integer(_pick(raw, "hitDiceUsed"), "Hit dice used", 0, default=0))
    # Compared against the raw level too, so an out-of-range level still bounds it
    level_bound = _as_int(_pick(raw, "level"))
    if hit_dice_used is not None and level_bound is not None and hit_dice_used > level_bound:
        errors.add("Hit dice used cannot exceed class level")

    counted = level if class_name is not None and level is not None else None
    entry = {
        "class_name": class_name,
        "level": level,
        "subclass": subclass,
        "hit_dice_size": hit_dice_size,
        "hit_dice_used": hit_dice_used,
    }
    return errors.result(entry), counted


def check_classes(value: Any) -> tuple[CheckResult, int | None]:
    """Check the class list.

    Returns the result plus the sum of class levels, or None if any entry was
    left out of the sum because of a fatal error.
    """
    if value is None or (isinstance(value, (list, tuple)) and not value):
        return Err.of("At least one class is required"), None
    if not isinstance(value, (list, tuple)):
        return Err.of("Classes must be a list"), None

    errors = ErrorCollector()
    if len(value) > MAX_CLASSES:
        errors.add(f"A character may not have more than {MAX_CLASSES} classes")

    entries = []
    seen: set[str] = set()
    level_sum = 0
    excluded = False
    for raw_entry in value:
        result, counted = check_class_entry(raw_entry)
        if counted is None:
            excluded = True
        else:
            level_sum += counted

        entry = errors.collect(result)
        if entry is None:
            continue
        key = normalize_index(entry["class_name"])
        if key in seen:
            errors.add("Duplicate class entries are not allowed")
        seen.add(key)
        entries.append(entry)

    if level_sum > MAX_TOTAL_LEVEL:
        errors.add(f"Total character level cannot exceed {MAX_TOTAL_LEVEL}")
    return errors.result(entries), None if excluded else level_sum


def check_abilities(value: Any) -> CheckResult:
    if value is None:
        return Err.of("Ability scores are required")
    if not isinstance(value, Mapping):
        return Err.of("Ability scores must be an object")

    errors = ErrorCollector()
    scores = {}
    for ability in ABILITY_NAMES:
        score = value.get(ability)
        if score is None:
            errors.add(f"{ability.capitalize()} score is required")
            continue
        scores[ability] = errors.collect(check_integer(
            score,
            ability.capitalize(),
            ABILITY_SCORE_MIN,
            ABILITY_SCORE_MAX,
            integer_message="Ability scores must be integers",
            range_message=_range_message("Ability scores", ABILITY_SCORE_MIN, ABILITY_SCORE_MAX),
        ))
    return errors.result(scores)


def check_hit_points(value: Any) -> CheckResult:
    if value is None:
        return Ok(None)
    if not isinstance(value, Mapping):
        return Err.of("Hit points must be an object")

    errors = ErrorCollector()
    maximum = errors.collect(check_required_integer(_pick(value, "maximum"), "Maximum hit points", 1))
    current = errors.collect(check_required_integer(_pick(value, "current"), "Current hit points", 0))
    temporary = errors.collect(
        check_optional_integer(_pick(value, "temporary"), "Temporary hit points", 0, default=0)
    )
    if None not in (maximum, current, temporary) and current > maximum + temporary:
        errors.add("Current hit points cannot exceed maximum plus temporary hit points")
    return errors.result({"maximum": maximum, "current": current, "temporary": temporary})


def check_skill_proficiencies(value: Any) -> CheckResult:
    """Skills must exist in the rule tables; names are normalized to their table spelling."""
    def check_skill(name: Any) -> CheckResult:
        skill = get_rule_tables().canonical_skill(name) if isinstance(name, str) else None
        if skill is None:
            return Err.of(f"Unknown skill: {name}")
        return Ok(skill)

    result = check_list(value, "Skill proficiencies", check_skill)
    if isinstance(result, Ok):
        return Ok(list(dict.fromkeys(result.value)))
    return result


def check_saving_throw_proficiencies(value: Any) -> CheckResult:
    def check_ability(name: Any) -> CheckResult:
        ability = name.strip().lower() if isinstance(name, str) else None
        if ability not in ABILITY_NAMES:
            return Err.of(f"Invalid saving throw ability: {name}")
        return Ok(ability)

    result = check_list(value, "Saving throw proficiencies", check_ability)
    if isinstance(result, Ok):
        return Ok(list(dict.fromkeys(result.value)))
    return result


def check_spell_slots(value: Any) -> CheckResult:
    if value is None:
        return Ok({})
    if not isinstance(value, Mapping):
        return Err.of("Spell slots must be an object")

    errors = ErrorCollector()
    slots = {}
    for label, slot in value.items():
        if label not in SPELL_SLOT_LABELS:
            errors.add(f"Unknown spell slot level: {label}")
            continue
        if not isinstance(slot, Mapping):
            errors.add("Spell slots must be objects with total and used")
            continue
        total = errors.collect(check_required_integer(_pick(slot, "total"), "Spell slot total", 0))
        used = errors.collect(check_optional_integer(_pick(slot, "used"), "Spell slots used", 0, default=0))
        if total is not None and used is not None and used > total:
            errors.add("Spell slots used cannot exceed total")
        slots[label] = {"total": total, "used": used}

    ordered = {label: slots[label] for label in SPELL_SLOT_LABELS if label in slots}
    return errors.result(ordered)


def _check_spell_name(value: Any) -> CheckResult:
    if not isinstance(value, str) or not value.strip():
        return Err.of("Spell names cannot be empty")
    return Ok(value.strip())


def check_spellcasting(value: Any) -> CheckResult:
    if value is None:
        return Ok(None)
    if not isinstance(value, Mapping):
        return Err.of("Spellcasting must be an object")

    errors = ErrorCollector()
    ability = _pick(value, "ability")
    if ability is None or ability == "":
        errors.add("Spellcasting ability is required")
    elif not isinstance(ability, str) or ability.strip().lower() not in ABILITY_NAMES:
        errors.add(f"Spellcasting ability must be one of {_choices(ABILITY_NAMES)}")
    else:
        ability = ability.strip().lower()

    attack = errors.collect(check_optional_integer(_pick(value, "spellAttackBonus"), "Spell attack bonus", default=0))
    save_dc = errors.collect(check_optional_integer(_pick(value, "spellSaveDC"), "Spell save DC", 8, default=8))
    slots = errors.collect(check_spell_slots(_pick(value, "spellSlots")))
    known = errors.collect(check_list(_pick(value, "spellsKnown"), "Spells known", _check_spell_name))
    prepared = errors.collect(check_list(_pick(value, "spellsPrepared"), "Spells prepared", _check_spell_name))

    return errors.result({
        "ability": ability,
        "spell_attack_bonus": attack,
        "spell_save_dc": save_dc,
        "spell_slots": slots,
        "spells_known": known,
        "spells_prepared": prepared,
    })


def check_equipment_item(raw: Any) -> CheckResult:
    if not isinstance(raw, Mapping):
        return Err.of("Equipment items must be objects")

    errors = ErrorCollector()
    name = errors.collect(check_string(_pick(raw, "name"), "Equipment name", max_length=NAME_MAX_LENGTH))
    quantity = errors.collect(check_optional_integer(_pick(raw, "quantity"), "Equipment quantity", 0, default=1))

    weight = _pick(raw, "weight")
    if weight is not None:
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or not math.isfinite(weight):
            errors.add("Equipment weight must be a number")
            weight = None
        elif weight < 0:
            errors.add("Equipment weight cannot be negative")

    equipped = _pick(raw, "equipped")
    if equipped is None:
        equipped = False
    elif not isinstance(equipped, bool):
        errors.add("Equipment equipped flag must be true or false")

    category = errors.collect(check_string(_pick(raw, "category"), "Equipment category", required=False, max_length=50))
    return errors.result({
        "name": name,
        "quantity": quantity,
        "weight": weight,
        "equipped": equipped,
        "category": category,
    })


def check_feature(raw: Any) -> CheckResult:
    if not isinstance(raw, Mapping):
        return Err.of("Features must be objects")

    errors = ErrorCollector()
    name = errors.collect(check_string(_pick(raw, "name"), "Feature name", max_length=NAME_MAX_LENGTH))
    source = errors.collect(check_string(_pick(raw, "source"), "Feature source", required=False, max_length=NAME_MAX_LENGTH))
    description = errors.collect(
        check_text(_pick(raw, "description"), "Feature description", DESCRIPTION_MAX_LENGTH)
    )
    level = errors.collect(check_optional_integer(_pick(raw, "level"), "Feature level", 1, MAX_CLASS_LEVEL))
    return errors.result({
        "name": name,
        "source": source,
        "description": description,
        "level": level,
    })


# =============================================================================
# Character pipeline
# =============================================================================

def _pydantic_messages(error: ValidationError) -> list[str]:
    """Turn a pydantic ValidationError into plain messages."""
    messages = []
    for detail in error.errors():
        message = detail["msg"]
        if detail["type"] == "value_error":
            message = message.removeprefix("Value error, ")
        else:
            location = ".".join(str(part) for part in detail["loc"])
            message = f"{location}: {message}" if location else message
        messages.append(message)
    return messages


def _invalid_character(errors: list[str]) -> ValidationResult[Character]:
    logger.debug(f"❌ Character validation failed with {len(errors)} errors")
    return ValidationResult[Character](is_valid=False, errors=errors)


def check_character_fields(raw: Mapping[str, Any], errors: ErrorCollector) -> dict[str, Any]:
    """Run every field checker in declaration order.

    Returns the sanitized snake_case fields; ``errors`` receives every failure.
    """
    fields: dict[str, Any] = {}

    # Identity
    fields["user_id"] = errors.collect(check_string(_pick(raw, "userId"), "User ID", required=False))
    fields["name"] = errors.collect(check_string(_pick(raw, "name"), "Name", max_length=NAME_MAX_LENGTH))
    fields["race"] = errors.collect(check_string(_pick(raw, "race"), "Race", max_length=NAME_MAX_LENGTH))
    fields["subrace"] = errors.collect(
        check_string(_pick(raw, "subrace"), "Subrace", required=False, max_length=NAME_MAX_LENGTH)
    )
    fields["background"] = errors.collect(
        check_string(_pick(raw, "background"), "Background", max_length=NAME_MAX_LENGTH)
    )
    fields["alignment"] = errors.collect(
        check_string(_pick(raw, "alignment"), "Alignment", max_length=ALIGNMENT_MAX_LENGTH)
    )
    fields["experience_points"] = errors.collect(
        check_optional_integer(_pick(raw, "experiencePoints"), "Experience points", 0, default=0)
    )

    # Classes & level
    classes_result, level_sum = check_classes(_pick(raw, "classes"))
    fields["classes"] = errors.collect(classes_result)

    supplied_total = _pick(raw, "totalLevel")
    if supplied_total is not None:
        total = errors.collect(check_integer(supplied_total, "Total level", 1, MAX_TOTAL_LEVEL))
        # Skipped when an entry was left out of the sum
        if total is not None and level_sum is not None and total != level_sum:
            errors.add(f"Total level ({total}) must equal the sum of class levels ({level_sum})")

    fields["abilities"] = errors.collect(check_abilities(_pick(raw, "abilities")))

    # Combat stats
    fields["hit_points"] = errors.collect(check_hit_points(_pick(raw, "hitPoints")))
    fields["armor_class"] = errors.collect(
        check_optional_integer(_pick(raw, "armorClass"), "Armor class", *ARMOR_CLASS_RANGE)
    )
    fields["speed"] = errors.collect(check_optional_integer(_pick(raw, "speed"), "Speed", *SPEED_RANGE))
    fields["initiative"] = errors.collect(
        check_optional_integer(_pick(raw, "initiative"), "Initiative", *INITIATIVE_RANGE)
    )
    fields["passive_perception"] = errors.collect(
        check_optional_integer(_pick(raw, "passivePerception"), "Passive perception", *PASSIVE_PERCEPTION_RANGE)
    )

    # Proficiencies
    fields["skill_proficiencies"] = errors.collect(check_skill_proficiencies(_pick(raw, "skillProficiencies")))
    fields["saving_throw_proficiencies"] = errors.collect(
        check_saving_throw_proficiencies(_pick(raw, "savingThrowProficiencies"))
    )

    fields["spellcasting"] = errors.collect(check_spellcasting(_pick(raw, "spellcasting")))

    # Equipment, features, notes
    fields["equipment"] = errors.collect(check_list(_pick(raw, "equipment"), "Equipment", check_equipment_item))
    fields["features"] = errors.collect(check_list(_pick(raw, "features"), "Features", check_feature))
    fields["notes"] = errors.collect(check_text(_pick(raw, "notes"), "Notes", NOTES_MAX_LENGTH))

    return fields


def _build_character(fields: dict[str, Any], errors: ErrorCollector) -> Character | None:
    """Build the sanitized Character with a freshly derived spellcasting block."""
    base = {key: value for key, value in fields.items() if key != "spellcasting"}
    try:
        character = Character.model_validate(base)
        if fields["spellcasting"] is None:
            return character

        supplied = Spellcasting.model_validate(fields["spellcasting"])
        spellcasting = derive_spellcasting(character, supplied)
        if spellcasting.spell_save_dc < 8:
            errors.add("Spell save DC must be at least 8")
            return None
        return Character.model_validate({**base, "spellcasting": spellcasting})
    except ValidationError as e:
        errors.extend(_pydantic_messages(e))
        return None


def validate_character(raw: Any) -> ValidationResult[Character]:
    """Validate and sanitize a character document.

    Args:
        raw: Anything. Usually a dict parsed from JSON with camelCase keys
            (snake_case keys are accepted too), or a Character to re-check.

    Returns:
        A valid result carrying the sanitized Character, or an invalid one
        carrying every error found. Never raises for bad input.
    """
    if isinstance(raw, Character):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        return _invalid_character(["Character data must be an object"])

    errors = ErrorCollector()
    fields = check_character_fields(raw, errors)
    if errors.has_errors:
        return _invalid_character(errors.errors)

    character = _build_character(fields, errors)
    errors.extend(validate_multiclass_prerequisites(fields).errors)
    if character is None or errors.has_errors:
        return _invalid_character(errors.errors)

    logger.debug(f"✅ Character '{character.name}' validated ({character.class_string()})")
    return ValidationResult[Character](is_valid=True, sanitized_data=character)


def validate_character_json(text: str | bytes) -> ValidationResult[Character]:
    """Parse a JSON document and validate it as a character."""
    try:
        data = json.loads(text)
    except (ValueError, TypeError):
        return _invalid_character(["Character data must be valid JSON"])
    return validate_character(data)


# =============================================================================
# User profile
# =============================================================================

def check_email(value: Any) -> CheckResult:
    if value is None or (isinstance(value, str) and not value.strip()):
        return Err.of("Email is required")
    if not isinstance(value, str):
        return Err.of("Email must be a string")
    email = value.strip().lower()
    if len(email) > 254:
        return Err.of("Email address is too long")
    if not EMAIL_PATTERN.match(email):
        return Err.of("Please enter a valid email address")
    return Ok(email)


def check_username(value: Any) -> CheckResult:
    result = check_string(value, "Username")
    if isinstance(result, Err):
        return result
    username = result.value
    if len(username) < 3:
        return Err.of("Username must be at least 3 characters long")
    if len(username) > 30:
        return Err.of("Username cannot exceed 30 characters")
    if not USERNAME_PATTERN.match(username):
        return Err.of("Username can only contain letters, numbers, underscores, and hyphens")
    return Ok(username)


def validate_user(raw: Any) -> ValidationResult[UserProfile]:
    """Validate the account fields of a user (email, username, display name)."""
    if not isinstance(raw, Mapping):
        return ValidationResult[UserProfile](is_valid=False, errors=["User data must be an object"])

    errors = ErrorCollector()
    fields = {
        "email": errors.collect(check_email(_pick(raw, "email"))),
        "username": errors.collect(check_username(_pick(raw, "username"))),
        "display_name": errors.collect(
            check_string(_pick(raw, "displayName"), "Display name", required=False, max_length=100)
        ),
    }
    if not errors.has_errors:
        try:
            return ValidationResult[UserProfile](is_valid=True, sanitized_data=UserProfile.model_validate(fields))
        except ValidationError as e:
            errors.extend(_pydantic_messages(e))
    return ValidationResult[UserProfile](is_valid=False, errors=errors.errors)


__all__ = [
    "CheckResult",
    "Err",
    "ErrorCollector",
    "Ok",
    "check_abilities",
    "check_class_entry",
    "check_classes",
    "check_email",
    "check_equipment_item",
    "check_feature",
    "check_hit_points",
    "check_integer",
    "check_list",
    "check_spellcasting",
    "check_string",
    "check_username",
    "validate_character",
    "validate_character_json",
    "validate_user",
]
