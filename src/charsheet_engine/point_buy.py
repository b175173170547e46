"""
Ability score build methods: point buy, standard array and manual entry.

The method is an interactive, build-time mode and never part of a saved
character. ``transition`` is the only way to move between modes or change a
score; it returns a new state and never mutates the old one.

Point buy and manual entry use separate range policies (8-15 and 1-30).
"Used" and "remaining" points are always computed from the scores.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from .rules import ABILITY_NAMES, get_rule_tables

logger = logging.getLogger("charsheet-engine")


@dataclass(frozen=True)
class RangePolicy:
    """Inclusive bounds for ability scores under one build method."""
    name: str
    minimum: int
    maximum: int

    def clamp(self, value: int) -> int:
        return max(self.minimum, min(self.maximum, value))

    def contains(self, value: int) -> bool:
        return self.minimum <= value <= self.maximum


POINT_BUY_RANGE = RangePolicy("point_buy", 8, 15)
MANUAL_RANGE = RangePolicy("manual", 1, 30)


# =============================================================================
# Point Buy
# =============================================================================

def point_buy_cost(score: int) -> int | None:
    """Point cost of a single score, or None outside the point buy range."""
    return get_rule_tables().point_buy_costs.get(score)


def points_used(scores: Mapping[str, int]) -> int | None:
    """Total cost of a score set, or None if any score has no point buy cost."""
    total = 0
    for ability in ABILITY_NAMES:
        cost = point_buy_cost(scores[ability])
        if cost is None:
            return None
        total += cost
    return total


def points_remaining(scores: Mapping[str, int]) -> int | None:
    used = points_used(scores)
    if used is None:
        return None
    return get_rule_tables().point_buy_budget - used


def propose_change(scores: Mapping[str, int], ability: str, value: int) -> tuple[bool, dict[str, int]]:
    """Try to set one ability under point buy.

    The value is clamped into the point buy range first. The change is
    accepted if the resulting set stays within budget; otherwise the
    original scores come back unchanged. Rejection is not an error.

    Returns:
        (accepted, scores) where scores is a new dict either way.
    """
    _check_ability(ability)
    candidate = dict(scores)
    candidate[ability] = POINT_BUY_RANGE.clamp(value)

    used = points_used(candidate)
    budget = get_rule_tables().point_buy_budget
    if used is None or used > budget:
        logger.debug(f"Point buy rejected {ability}={value}: {used}/{budget} points")
        return False, dict(scores)
    return True, candidate


# =============================================================================
# Build method state machine
# =============================================================================

class AbilityMethod(Enum):
    """How ability scores are being generated."""
    POINT_BUY = "point_buy"
    STANDARD_ARRAY = "standard_array"
    MANUAL = "manual"


def _baseline_scores() -> dict[str, int]:
    return {ability: POINT_BUY_RANGE.minimum for ability in ABILITY_NAMES}


def _standard_array_scores() -> dict[str, int]:
    return dict(zip(ABILITY_NAMES, get_rule_tables().standard_array))


@dataclass(frozen=True)
class AbilityBuildState:
    """Current build method and the six scores it produced."""
    method: AbilityMethod = AbilityMethod.POINT_BUY
    scores: dict[str, int] = field(default_factory=_baseline_scores)

    @property
    def points_used(self) -> int | None:
        return points_used(self.scores)

    @property
    def points_remaining(self) -> int | None:
        return points_remaining(self.scores)


@dataclass(frozen=True)
class SwitchMethod:
    method: AbilityMethod


@dataclass(frozen=True)
class SetScore:
    ability: str
    value: int


BuildEvent = SwitchMethod | SetScore


def initial_state() -> AbilityBuildState:
    """Point buy with every score at 8."""
    return AbilityBuildState()


def transition(state: AbilityBuildState, event: BuildEvent) -> AbilityBuildState:
    """Apply one event and return the next state.

    Switching into point buy resets every score to 8, switching into the
    standard array assigns it in canonical ability order, and switching into
    manual keeps the scores. Switching to the current method changes nothing.
    """
    if isinstance(event, SwitchMethod):
        return _switch(state, event.method)
    if isinstance(event, SetScore):
        _check_ability(event.ability)
        return _set_score(state, event.ability, event.value)
    raise TypeError(f"Unknown ability build event: {event!r}")


def _switch(state: AbilityBuildState, method: AbilityMethod) -> AbilityBuildState:
    if method == state.method:
        return state
    if method == AbilityMethod.POINT_BUY:
        scores = _baseline_scores()
    elif method == AbilityMethod.STANDARD_ARRAY:
        scores = _standard_array_scores()
    else:
        scores = dict(state.scores)
    logger.debug(f"Ability method {state.method.value} -> {method.value}")
    return AbilityBuildState(method=method, scores=scores)


def _set_score(state: AbilityBuildState, ability: str, value: int) -> AbilityBuildState:
    if state.method == AbilityMethod.POINT_BUY:
        accepted, scores = propose_change(state.scores, ability, value)
        if not accepted:
            return state

    elif state.method == AbilityMethod.STANDARD_ARRAY:
        # Only array values are allowed; the ability currently holding the
        # value takes over the old one
        if value not in get_rule_tables().standard_array:
            return state
        scores = dict(state.scores)
        previous = scores[ability]
        for other, score in state.scores.items():
            if score == value and other != ability:
                scores[other] = previous
                break
        scores[ability] = value

    else:
        scores = dict(state.scores)
        scores[ability] = MANUAL_RANGE.clamp(value)

    return AbilityBuildState(method=state.method, scores=scores)


def _check_ability(ability: str) -> None:
    if ability not in ABILITY_NAMES:
        raise ValueError(f"Unknown ability: '{ability}'. Use one of {', '.join(ABILITY_NAMES)}.")


__all__ = [
    "MANUAL_RANGE",
    "POINT_BUY_RANGE",
    "AbilityBuildState",
    "AbilityMethod",
    "BuildEvent",
    "RangePolicy",
    "SetScore",
    "SwitchMethod",
    "initial_state",
    "point_buy_cost",
    "points_remaining",
    "points_used",
    "propose_change",
    "transition",
]
