"""
Unit Tests for the Action Recommender and Action Accumulator
"""
import pytest

from health_rules.models import Status
from health_rules.core.rules import (
    ActionCode,
    ActionSet,
    EvaluationResult,
    SUPPRESSES,
    build_actions,
    evaluate,
    recommend,
)
from health_rules.core.rules.accumulator import is_suppressed

A = ActionCode
ACTIVE = {"exercise": {"minutes": 45}}


def _recommend(record, thresholds, conditions):
    return recommend(record, evaluate(record, thresholds, conditions), conditions, thresholds)


class TestActionSet:
    """Tests for the ordered, suppressing accumulator."""

    def test_duplicates_collapse(self):
        actions = ActionSet()
        actions.add(A.CONTACT_PROVIDER, A.TAKE_MEDS)
        actions.add(A.CONTACT_PROVIDER)
        assert actions.ordered() == [A.CONTACT_PROVIDER, A.TAKE_MEDS]
        assert len(actions) == 2

    def test_weaker_action_is_ignored_after_stronger(self):
        actions = ActionSet()
        actions.add(A.REDUCE_SALT_IMMEDIATELY)
        actions.add(A.REDUCE_SALT)
        actions.add(A.WATCH_SALT)
        assert actions.ordered() == [A.REDUCE_SALT_IMMEDIATELY]

    def test_stronger_action_replaces_weaker(self):
        actions = ActionSet()
        actions.add(A.WATCH_SALT, A.LIGHT_WALK)
        actions.add(A.REDUCE_SALT)
        assert A.WATCH_SALT not in actions
        assert actions.ordered() == [A.LIGHT_WALK, A.REDUCE_SALT]

    def test_freeze(self):
        actions = ActionSet()
        actions.add(A.KEEP_ROUTINE)
        assert actions.freeze() == frozenset({A.KEEP_ROUTINE})

    @pytest.mark.parametrize("stronger", list(SUPPRESSES))
    def test_suppression_table(self, stronger):
        for weaker in SUPPRESSES[stronger]:
            assert is_suppressed(weaker, [stronger])
            assert not is_suppressed(stronger, [weaker])


class TestRedCascade:
    """Tests for the mutually exclusive red-status cascade."""

    def test_bp_crisis(self, make_record, thresholds, no_conditions):
        record = make_record(bloodPressure={"systolic": 190, "diastolic": 130}, **ACTIVE)
        actions = _recommend(record, thresholds, no_conditions)
        assert {A.SEEK_IMMEDIATE_CARE, A.BP_CRISIS} <= actions
        assert A.CONTACT_PROVIDER not in actions

    def test_single_axis_very_high_bp(self, make_record, thresholds, no_conditions):
        record = make_record(bloodPressure={"systolic": 150, "diastolic": 125}, **ACTIVE)
        assert {A.SEEK_IMMEDIATE_CARE, A.BP_CRISIS} <= _recommend(record, thresholds, no_conditions)

    def test_bp_wins_over_glucose(self, make_record, thresholds, diabetic):
        record = make_record(
            bloodPressure={"systolic": 190, "diastolic": 130},
            glucose={"value": 15.0},
            **ACTIVE,
        )
        actions = _recommend(record, thresholds, diabetic)
        assert A.BP_CRISIS in actions
        assert A.GLUCOSE_VERY_HIGH not in actions

    def test_glucose_very_high(self, make_record, thresholds, no_conditions):
        record = make_record(glucose={"value": 14.0, "context": "fasting"}, **ACTIVE)
        actions = _recommend(record, thresholds, no_conditions)
        assert actions == frozenset({A.CONTACT_PROVIDER, A.GLUCOSE_VERY_HIGH})

    def test_glucose_very_high_diabetic_checks_ketones(self, make_record, thresholds, diabetic):
        record = make_record(glucose={"value": 14.0, "context": "fasting"}, **ACTIVE)
        actions = _recommend(record, thresholds, diabetic)
        assert actions == frozenset({A.CONTACT_PROVIDER, A.GLUCOSE_VERY_HIGH, A.CHECK_KETONES})

    def test_glucose_critically_low(self, make_record, thresholds, no_conditions):
        record = make_record(glucose={"value": 2.5, "context": "random"}, **ACTIVE)
        actions = _recommend(record, thresholds, no_conditions)
        assert actions == frozenset({A.SEEK_IMMEDIATE_CARE, A.GLUCOSE_VERY_LOW, A.CONSUME_GLUCOSE})

    def test_generic_red(self, make_record, thresholds, no_conditions):
        record = make_record(**ACTIVE)
        evaluation = EvaluationResult(status=Status.RED)
        assert recommend(record, evaluation, no_conditions, thresholds) == frozenset({A.CONTACT_PROVIDER})


class TestAbnormalLayers:
    """Tests for the yellow/red action layers."""

    def test_salt_escalation_is_exclusive(self, make_record, thresholds, hypertensive):
        record = make_record(
            bloodPressure={"systolic": 145, "diastolic": 70},
            diet={"saltLevel": 4, "carbLevel": 3},
        )
        actions = _recommend(record, thresholds, hypertensive)
        assert A.REDUCE_SALT_IMMEDIATELY in actions
        assert A.REDUCE_SALT not in actions

    def test_later_salt_group_does_not_add_weaker_rung(self, make_record, thresholds, no_conditions):
        # BP-high group adds the urgent rung; the plain high-salt group would add reduceSalt
        record = make_record(
            bloodPressure={"systolic": 145, "diastolic": 70},
            diet={"saltLevel": 5, "carbLevel": 3},
            **ACTIVE,
        )
        built = build_actions(record, evaluate(record, thresholds, no_conditions), no_conditions, thresholds)
        assert built.ordered() == [A.MONITOR_BP, A.REDUCE_SALT_IMMEDIATELY]

    def test_bp_high_moderate_salt(self, make_record, thresholds, no_conditions):
        record = make_record(
            bloodPressure={"systolic": 150, "diastolic": 95},
            diet={"saltLevel": 3, "carbLevel": 3},
            alcoholUnits=1,
            exercise={"minutes": 20},
        )
        actions = _recommend(record, thresholds, no_conditions)
        assert {A.MONITOR_BP, A.REDUCE_SALT, A.INCREASE_EXERCISE, A.LIMIT_ALCOHOL, A.LIGHT_WALK} == actions

    def test_bp_elevated(self, make_record, thresholds, no_conditions):
        record = make_record(bloodPressure={"systolic": 132, "diastolic": 78}, **ACTIVE)
        assert _recommend(record, thresholds, no_conditions) == frozenset({A.LIFESTYLE_CHANGE, A.WATCH_SALT})

    def test_bp_elevated_with_high_salt_upgrades_watch_salt(self, make_record, thresholds, no_conditions):
        record = make_record(
            bloodPressure={"systolic": 132, "diastolic": 78},
            diet={"saltLevel": 4, "carbLevel": 3},
            **ACTIVE,
        )
        actions = _recommend(record, thresholds, no_conditions)
        assert A.REDUCE_SALT in actions
        assert A.WATCH_SALT not in actions

    def test_glucose_high_diabetic(self, make_record, thresholds, diabetic):
        record = make_record(
            glucose={"value": 8.0, "context": "fasting"},
            diet={"saltLevel": 2, "carbLevel": 4},
            **ACTIVE,
        )
        actions = _recommend(record, thresholds, diabetic)
        assert actions == frozenset({A.MONITOR_GLUCOSE, A.FOLLOW_MEDICATION_PLAN, A.REDUCE_CARBS})

    def test_glucose_high_without_diabetes(self, make_record, thresholds, no_conditions):
        record = make_record(glucose={"value": 11.0, "context": "random"}, **ACTIVE)
        assert _recommend(record, thresholds, no_conditions) == frozenset({A.MONITOR_GLUCOSE, A.REVIEW_DIET})

    def test_glucose_low(self, make_record, thresholds, no_conditions):
        record = make_record(glucose={"value": 3.5}, **ACTIVE)
        actions = _recommend(record, thresholds, no_conditions)
        assert actions == frozenset({A.CONSUME_GLUCOSE, A.RECHECK_GLUCOSE, A.REVIEW_MEDS})

    def test_glucose_low_suppressed_when_red_for_other_reason(self, make_record, thresholds, no_conditions):
        record = make_record(
            bloodPressure={"systolic": 190, "diastolic": 130},
            glucose={"value": 3.5},
            **ACTIVE,
        )
        actions = _recommend(record, thresholds, no_conditions)
        assert A.CONSUME_GLUCOSE not in actions
        assert A.RECHECK_GLUCOSE not in actions

    def test_missed_meds_with_conditions(self, make_record, thresholds, both_conditions):
        record = make_record(
            medication={"taken": False, "names": ["amlodipine", "metformin"]},
            bloodPressure={"systolic": 150, "diastolic": 85},
            glucose={"value": 8.5, "context": "fasting"},
            **ACTIVE,
        )
        actions = _recommend(record, thresholds, both_conditions)
        assert {A.TAKE_MEDS, A.MISSED_MEDS_BP, A.MISSED_MEDS_GLUCOSE} <= actions

    def test_missed_meds_without_conditions(self, make_record, thresholds, no_conditions):
        record = make_record(medication={"taken": False}, **ACTIVE)
        assert _recommend(record, thresholds, no_conditions) == frozenset({A.TAKE_MEDS})

    def test_low_exercise_when_abnormal(self, make_record, thresholds, no_conditions):
        record = make_record(alcoholUnits=3, exercise={"minutes": 10})
        actions = _recommend(record, thresholds, no_conditions)
        assert actions == frozenset({A.LIGHT_WALK, A.INCREASE_EXERCISE, A.LIMIT_ALCOHOL})

    def test_alcohol_with_hypertension(self, make_record, thresholds, hypertensive):
        record = make_record(alcoholUnits=4, **ACTIVE)
        actions = _recommend(record, thresholds, hypertensive)
        assert actions == frozenset({A.LIMIT_ALCOHOL, A.ALCOHOL_RAISES_BP})


class TestRoutinePath:
    """Tests for green records."""

    def test_exercise_only(self, make_record, thresholds, no_conditions):
        record = make_record(exercise={"minutes": 10})
        assert _recommend(record, thresholds, no_conditions) == frozenset({A.KEEP_ROUTINE})

    def test_condition_aware_reminders(self, make_record, thresholds, both_conditions):
        record = make_record(diet={"saltLevel": 3, "carbLevel": 3}, **ACTIVE)
        actions = _recommend(record, thresholds, both_conditions)
        assert actions == frozenset({A.KEEP_ROUTINE, A.WATCH_SALT, A.WATCH_CARBS})

    def test_reminders_need_conditions(self, make_record, thresholds, no_conditions):
        record = make_record(diet={"saltLevel": 5, "carbLevel": 5}, **ACTIVE)
        assert _recommend(record, thresholds, no_conditions) == frozenset({A.KEEP_ROUTINE})

    def test_default_thresholds_when_omitted(self, make_record, thresholds, no_conditions):
        record = make_record(bloodPressure={"systolic": 150, "diastolic": 70}, **ACTIVE)
        evaluation = evaluate(record, thresholds, no_conditions)
        assert recommend(record, evaluation, no_conditions) == recommend(
            record, evaluation, no_conditions, thresholds
        )


class TestRecommendProperties:
    """Tests for properties that hold for every record."""

    @pytest.mark.parametrize("fields", [
        {"bloodPressure": {"systolic": 190, "diastolic": 130}, "diet": {"saltLevel": 5, "carbLevel": 5}},
        {"bloodPressure": {"systolic": 145, "diastolic": 92}, "diet": {"saltLevel": 4, "carbLevel": 4},
         "alcoholUnits": 6, "medication": {"taken": False}, "exercise": {"minutes": 5}},
        {"glucose": {"value": 3.2}, "bloodPressure": {"systolic": 131, "diastolic": 70},
         "diet": {"saltLevel": 4, "carbLevel": 4}},
    ])
    def test_salt_ladder_never_holds_two_rungs(self, make_record, thresholds, both_conditions, fields):
        record = make_record(**fields)
        built = build_actions(record, evaluate(record, thresholds, both_conditions), both_conditions, thresholds)
        ordered = built.ordered()
        salt_rungs = {A.REDUCE_SALT_IMMEDIATELY, A.REDUCE_SALT, A.WATCH_SALT}
        assert len(salt_rungs.intersection(ordered)) <= 1
        assert len(ordered) == len(set(ordered))

    def test_idempotent(self, make_record, thresholds, both_conditions):
        record = make_record(
            bloodPressure={"systolic": 150, "diastolic": 95},
            glucose={"value": 9.0, "context": "fasting"},
            diet={"saltLevel": 4, "carbLevel": 4},
        )
        assert _recommend(record, thresholds, both_conditions) == _recommend(record, thresholds, both_conditions)
