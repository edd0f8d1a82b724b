"""Unit tests for the digest compiler."""

from datetime import date, datetime, timezone

import pytest

from behavior_coach.errors import InvalidInputError
from behavior_coach.models.analysis import BehaviorAnalysis, Detection, Priority, RecommendationType
from behavior_coach.models.metrics import BehaviorMetrics
from behavior_coach.models.pattern import Severity
from behavior_coach.services.detector_service import impact_for
from behavior_coach.services.digest_service import GENERIC_FOCUS, compile_digest, week_bounds
from behavior_coach.services.recommendation_service import synthesize

NOW = datetime(2024, 6, 26, tzinfo=timezone.utc)
WEEK_START = date(2024, 6, 23)
WEEK_END = date(2024, 6, 29)


def _analysis(catalog, pattern_ids, metrics=None, score=100) -> BehaviorAnalysis:
    metrics = metrics or BehaviorMetrics(total_records=5)
    detections = []
    for pattern_id in pattern_ids:
        severity = catalog.get(pattern_id).severity
        detections.append(
            Detection(
                id=f"det-{pattern_id}",
                pattern_id=pattern_id,
                severity=severity,
                confidence=0.8,
                impact=impact_for(severity),
                detected_at=NOW,
            )
        )
    return BehaviorAnalysis(
        user_id="user-1",
        analyzed_at=NOW,
        timeframe_days=7,
        catalog_version=catalog.version,
        metrics=metrics,
        detections=tuple(detections),
        recommendations=tuple(synthesize(detections, metrics, catalog)),
        overall_score=score,
    )


class TestWeekBounds:
    @pytest.mark.parametrize(
        "today",
        [date(2024, 6, 23), date(2024, 6, 26), date(2024, 6, 29)],
    )
    def test_sunday_to_saturday(self, today):
        assert week_bounds(today) == (WEEK_START, WEEK_END)

    def test_next_sunday_starts_new_week(self):
        assert week_bounds(date(2024, 6, 30)) == (date(2024, 6, 30), date(2024, 7, 6))


class TestImprovementAreas:
    def test_only_negative_detections(self, catalog):
        analysis = _analysis(catalog, ["low_action_items", "low_decision_density", "meeting_overload"], score=60)
        digest = compile_digest(analysis, WEEK_START, WEEK_END, catalog)
        assert digest.improvement_areas == ("Low Decision Making", "Meeting Overload")

    def test_none_when_clean(self, catalog):
        digest = compile_digest(_analysis(catalog, []), WEEK_START, WEEK_END, catalog)
        assert digest.improvement_areas == ()


class TestAchievements:
    def test_all_achievements(self, catalog):
        metrics = BehaviorMetrics(total_records=5, action_items_per_record=2.5, collaboration_score=0.8)
        digest = compile_digest(_analysis(catalog, [], metrics, score=100), WEEK_START, WEEK_END, catalog)
        assert digest.achievements == (
            "Strong action item generation",
            "Excellent team collaboration",
            "High overall productivity score",
        )

    def test_score_at_80_is_not_an_achievement(self, catalog):
        digest = compile_digest(_analysis(catalog, [], score=80), WEEK_START, WEEK_END, catalog)
        assert digest.achievements == ()


class TestKeyMetrics:
    def test_labels_and_rounding(self, catalog):
        metrics = BehaviorMetrics(total_records=7, action_items_per_record=1.2857, collaboration_score=0.4286)
        digest = compile_digest(_analysis(catalog, [], metrics, score=95), WEEK_START, WEEK_END, catalog)
        assert digest.key_metrics == {
            "Meetings This Week": 7,
            "Action Items per Meeting": 1.3,
            "Collaboration Score": 43,
            "Overall Score": 95,
        }


class TestRecommendationFilter:
    def test_keeps_weekly_and_high_priority(self, catalog):
        analysis = _analysis(
            catalog,
            ["low_action_items", "repetitive_content", "poor_follow_up", "meeting_overload"],
            score=60,
        )
        digest = compile_digest(analysis, WEEK_START, WEEK_END, catalog)

        assert [r.pattern_id for r in digest.recommendations] == [
            "low_action_items",
            "repetitive_content",
            "poor_follow_up",
            "meeting_overload",
        ]
        for rec in digest.recommendations:
            assert rec.type == RecommendationType.WEEKLY or rec.priority in (Priority.HIGH, Priority.URGENT)


class TestNextWeekFocus:
    def test_focus_from_catalog_phrases(self, catalog):
        digest = compile_digest(_analysis(catalog, ["low_action_items"], score=90), WEEK_START, WEEK_END, catalog)
        assert digest.next_week_focus == ("End meetings with clear next steps",)

    def test_low_score_appends_generic_focus(self, catalog):
        digest = compile_digest(
            _analysis(catalog, ["low_action_items", "low_collaboration"], score=65),
            WEEK_START,
            WEEK_END,
            catalog,
        )
        assert digest.next_week_focus == (
            "End meetings with clear next steps",
            "Invite more team members to meetings",
            GENERIC_FOCUS,
        )

    def test_low_score_without_detections(self, catalog):
        digest = compile_digest(_analysis(catalog, [], score=50), WEEK_START, WEEK_END, catalog)
        assert digest.next_week_focus == (GENERIC_FOCUS,)

    def test_capped_at_three(self, catalog):
        analysis = _analysis(
            catalog,
            ["low_action_items", "low_decision_density", "poor_follow_up", "low_collaboration"],
            score=40,
        )
        digest = compile_digest(analysis, WEEK_START, WEEK_END, catalog)
        assert digest.next_week_focus == (
            "End meetings with clear next steps",
            "Use decision frameworks in meetings",
            "Follow up on open action items",
        )

    def test_explicit_focus_limit(self, catalog):
        analysis = _analysis(catalog, ["low_action_items", "low_collaboration"], score=90)
        digest = compile_digest(analysis, WEEK_START, WEEK_END, catalog, max_focus_areas=1)
        assert digest.next_week_focus == ("End meetings with clear next steps",)

    def test_duplicate_detections_deduplicated(self, catalog):
        analysis = _analysis(catalog, ["low_action_items", "low_action_items"], score=90)
        digest = compile_digest(analysis, WEEK_START, WEEK_END, catalog)
        assert digest.next_week_focus == ("End meetings with clear next steps",)


class TestDigestValidation:
    def test_inverted_week_rejected(self, catalog):
        with pytest.raises(InvalidInputError):
            compile_digest(_analysis(catalog, []), WEEK_END, WEEK_START, catalog)

    def test_carries_user_and_week(self, catalog):
        digest = compile_digest(_analysis(catalog, []), WEEK_START, WEEK_END, catalog)
        assert digest.user_id == "user-1"
        assert digest.week_start == WEEK_START
        assert digest.week_end == WEEK_END
