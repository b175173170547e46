"""Tests for point buy budgeting and the ability build method state machine."""

import pytest

from charsheet_engine.point_buy import (
    MANUAL_RANGE,
    POINT_BUY_RANGE,
    AbilityBuildState,
    AbilityMethod,
    SetScore,
    SwitchMethod,
    initial_state,
    point_buy_cost,
    points_remaining,
    points_used,
    propose_change,
    transition,
)

ABILITIES = ["strength", "dexterity", "constitution", "intelligence", "wisdom", "charisma"]


def all_eights() -> dict[str, int]:
    return {ability: 8 for ability in ABILITIES}


# =============================================================================
# Costs & budget
# =============================================================================


class TestPointBuyCost:

    @pytest.mark.parametrize("score,cost", [
        (8, 0), (9, 1), (10, 2), (11, 3), (12, 4), (13, 5), (14, 7), (15, 9),
    ])
    def test_cost_table(self, score, cost):
        assert point_buy_cost(score) == cost

    @pytest.mark.parametrize("score", [1, 7, 16, 20])
    def test_no_cost_outside_range(self, score):
        assert point_buy_cost(score) is None

    def test_baseline_costs_nothing(self):
        assert points_used(all_eights()) == 0
        assert points_remaining(all_eights()) == 27

    def test_used_points_are_derived_from_scores(self):
        scores = all_eights() | {"strength": 15, "dexterity": 14, "constitution": 13}
        assert points_used(scores) == 21
        assert points_remaining(scores) == 6

    def test_out_of_range_scores_have_no_total(self):
        scores = all_eights() | {"strength": 18}
        assert points_used(scores) is None
        assert points_remaining(scores) is None


class TestProposeChange:

    def test_three_fifteens_spend_the_whole_budget(self):
        scores = all_eights()
        for ability in ("strength", "dexterity", "constitution"):
            accepted, scores = propose_change(scores, ability, 15)
            assert accepted is True
        assert points_used(scores) == 27
        assert points_remaining(scores) == 0

    def test_increase_beyond_budget_is_rejected(self):
        scores = all_eights() | {"strength": 15, "dexterity": 15, "constitution": 15}
        accepted, result = propose_change(scores, "intelligence", 9)
        assert accepted is False
        assert result["intelligence"] == 8
        assert result == scores

    def test_input_scores_are_not_mutated(self):
        scores = all_eights()
        accepted, result = propose_change(scores, "wisdom", 12)
        assert accepted is True
        assert result["wisdom"] == 12
        assert scores["wisdom"] == 8

    def test_value_is_clamped_into_point_buy_range(self):
        accepted, scores = propose_change(all_eights(), "charisma", 20)
        assert accepted is True
        assert scores["charisma"] == 15

        accepted, scores = propose_change(scores, "charisma", 3)
        assert accepted is True
        assert scores["charisma"] == 8

    def test_decrease_frees_points(self):
        scores = all_eights() | {"strength": 15, "dexterity": 15, "constitution": 15}
        accepted, scores = propose_change(scores, "strength", 13)
        assert accepted is True
        assert points_remaining(scores) == 4

    def test_unknown_ability_raises(self):
        with pytest.raises(ValueError, match="Unknown ability"):
            propose_change(all_eights(), "luck", 10)


class TestRangePolicies:
    """Point buy and manual entry keep separate bounds."""

    def test_bounds(self):
        assert (POINT_BUY_RANGE.minimum, POINT_BUY_RANGE.maximum) == (8, 15)
        assert (MANUAL_RANGE.minimum, MANUAL_RANGE.maximum) == (1, 30)

    def test_same_value_differs_by_policy(self):
        assert POINT_BUY_RANGE.contains(16) is False
        assert MANUAL_RANGE.contains(16) is True
        assert POINT_BUY_RANGE.clamp(3) == 8
        assert MANUAL_RANGE.clamp(3) == 3


# =============================================================================
# State machine
# =============================================================================


class TestInitialState:

    def test_starts_in_point_buy_at_eights(self):
        state = initial_state()
        assert state.method == AbilityMethod.POINT_BUY
        assert state.scores == all_eights()
        assert state.points_used == 0
        assert state.points_remaining == 27


class TestSwitchMethod:

    def test_standard_array_assigned_in_canonical_order(self):
        state = transition(initial_state(), SwitchMethod(AbilityMethod.STANDARD_ARRAY))
        assert state.method == AbilityMethod.STANDARD_ARRAY
        assert [state.scores[a] for a in ABILITIES] == [15, 14, 13, 12, 10, 8]

    def test_switching_into_point_buy_resets_scores(self):
        state = AbilityBuildState(method=AbilityMethod.MANUAL, scores=all_eights() | {"strength": 18})
        state = transition(state, SwitchMethod(AbilityMethod.POINT_BUY))
        assert state.method == AbilityMethod.POINT_BUY
        assert state.scores == all_eights()

    def test_switching_into_manual_keeps_scores(self):
        state = transition(initial_state(), SwitchMethod(AbilityMethod.STANDARD_ARRAY))
        manual = transition(state, SwitchMethod(AbilityMethod.MANUAL))
        assert manual.method == AbilityMethod.MANUAL
        assert manual.scores == state.scores

    def test_array_then_point_buy_is_a_full_reset(self):
        state = initial_state()
        for method in (AbilityMethod.STANDARD_ARRAY, AbilityMethod.MANUAL, AbilityMethod.POINT_BUY):
            state = transition(state, SwitchMethod(method))
        assert state.scores == all_eights()

    def test_switching_to_current_method_is_a_no_op(self):
        state = transition(initial_state(), SetScore("strength", 12))
        assert transition(state, SwitchMethod(AbilityMethod.POINT_BUY)) is state

    def test_old_state_is_untouched(self):
        start = initial_state()
        transition(start, SwitchMethod(AbilityMethod.STANDARD_ARRAY))
        assert start.method == AbilityMethod.POINT_BUY
        assert start.scores == all_eights()


class TestSetScore:

    def test_point_buy_accepts_within_budget(self):
        state = transition(initial_state(), SetScore("intelligence", 15))
        assert state.scores["intelligence"] == 15
        assert state.points_remaining == 18

    def test_point_buy_rejection_keeps_state(self):
        state = initial_state()
        for ability in ("strength", "dexterity", "constitution"):
            state = transition(state, SetScore(ability, 15))
        rejected = transition(state, SetScore("wisdom", 9))
        assert rejected is state
        assert rejected.scores["wisdom"] == 8

    def test_standard_array_swaps_values(self):
        state = transition(initial_state(), SwitchMethod(AbilityMethod.STANDARD_ARRAY))
        state = transition(state, SetScore("strength", 8))
        assert state.scores["strength"] == 8
        assert state.scores["charisma"] == 15
        assert sorted(state.scores.values()) == [8, 10, 12, 13, 14, 15]

    def test_standard_array_rejects_values_outside_array(self):
        state = transition(initial_state(), SwitchMethod(AbilityMethod.STANDARD_ARRAY))
        assert transition(state, SetScore("strength", 11)) is state

    def test_manual_clamps_to_general_range(self):
        state = transition(initial_state(), SwitchMethod(AbilityMethod.MANUAL))
        state = transition(state, SetScore("strength", 35))
        assert state.scores["strength"] == 30
        state = transition(state, SetScore("dexterity", 0))
        assert state.scores["dexterity"] == 1

    def test_manual_allows_scores_point_buy_cannot_price(self):
        state = transition(initial_state(), SwitchMethod(AbilityMethod.MANUAL))
        state = transition(state, SetScore("strength", 18))
        assert state.scores["strength"] == 18
        assert state.points_used is None

    def test_unknown_ability_raises(self):
        with pytest.raises(ValueError):
            transition(initial_state(), SetScore("luck", 10))
