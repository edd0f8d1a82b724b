"""Unit tests for the metrics calculator."""

import pytest

from behavior_coach.models.metrics import BehaviorMetrics
from behavior_coach.services.metrics_service import (
    compute_metrics,
    distinct_fingerprint_ratio,
    fingerprint_similarity,
)


class TestEmptyInput:
    def test_returns_zero_metrics(self):
        metrics = compute_metrics([])
        assert metrics == BehaviorMetrics()
        assert metrics.total_records == 0
        assert metrics.follow_up_rate == 0.0
        assert metrics.engagement_score == 0.0

    def test_fingerprint_helpers_handle_empty(self):
        assert distinct_fingerprint_ratio([]) == 0.0
        assert fingerprint_similarity([]) == 0.0


class TestRates:
    def test_per_record_averages(self, make_record):
        records = [
            make_record(actions=3, decisions=2),
            make_record(actions=0, decisions=0),
            make_record(actions=1, decisions=1),
            make_record(actions=0, decisions=1),
        ]
        metrics = compute_metrics(records)

        assert metrics.total_records == 4
        assert metrics.action_items_per_record == pytest.approx(1.0)
        assert metrics.decisions_per_record == pytest.approx(1.0)

    def test_follow_up_rate_counts_records_with_action_items(self, make_record):
        records = [make_record(actions=2), make_record(actions=0), make_record(actions=0), make_record(actions=5)]
        assert compute_metrics(records).follow_up_rate == pytest.approx(0.5)

    def test_collaboration_score_counts_multi_participant_records(self, make_record):
        records = [
            make_record(participants=1),
            make_record(participants=1),
            make_record(participants=2),
            make_record(participants=5),
            make_record(participants=1),
        ]
        assert compute_metrics(records).collaboration_score == pytest.approx(0.4)

    def test_average_duration(self, make_record):
        records = [make_record(duration=30), make_record(duration=90)]
        assert compute_metrics(records).average_duration_minutes == pytest.approx(60.0)

    def test_sparse_scenario(self, sparse_week):
        metrics = compute_metrics(sparse_week)
        assert metrics.total_records == 10
        assert metrics.action_items_per_record == pytest.approx(0.2)
        assert metrics.collaboration_score == pytest.approx(0.1)
        assert metrics.decisions_per_record == 0.0


class TestEngagementScore:
    def test_full_length_and_full_variety_is_one(self, make_record):
        records = [make_record(content_length=400), make_record(content_length=200)]
        assert compute_metrics(records).engagement_score == pytest.approx(1.0)

    def test_length_proxy_saturates(self, make_record):
        short = compute_metrics([make_record(content_length=100)])
        long = compute_metrics([make_record(content_length=10_000)])
        assert short.engagement_score == pytest.approx(0.5 * 0.5 + 0.5)
        assert long.engagement_score == pytest.approx(1.0)

    def test_identical_fingerprints_reduce_variety(self, make_record):
        records = [make_record(fingerprint="same", content_length=0) for _ in range(4)]
        metrics = compute_metrics(records)
        assert metrics.distinct_fingerprint_ratio == pytest.approx(0.25)
        assert metrics.engagement_score == pytest.approx(0.125)

    def test_prefix_length_controls_distinctness(self, make_record):
        records = [make_record(fingerprint="abcdef-1"), make_record(fingerprint="abcdef-2")]
        assert compute_metrics(records, prefix_length=6).distinct_fingerprint_ratio == pytest.approx(0.5)
        assert compute_metrics(records, prefix_length=8).distinct_fingerprint_ratio == pytest.approx(1.0)

    def test_custom_length_norm(self, make_record):
        records = [make_record(content_length=50)]
        metrics = compute_metrics(records, length_norm=100.0)
        assert metrics.engagement_score == pytest.approx(0.5 * 0.5 + 0.5)


class TestFingerprintSimilarity:
    def test_all_unique_is_zero(self, make_record):
        records = [make_record() for _ in range(5)]
        assert fingerprint_similarity(records) == 0.0

    def test_all_shared_is_one(self, make_record):
        records = [make_record(fingerprint="standup") for _ in range(3)]
        assert fingerprint_similarity(records) == 1.0

    def test_partial_sharing(self, make_record):
        records = [
            make_record(fingerprint="standup"),
            make_record(fingerprint="standup"),
            make_record(fingerprint="planning"),
            make_record(fingerprint="retro"),
        ]
        assert fingerprint_similarity(records) == pytest.approx(0.5)


class TestPurity:
    def test_same_input_same_output(self, sparse_week):
        assert compute_metrics(sparse_week) == compute_metrics(list(sparse_week))


class TestMissingFingerprints:
    def test_unfingerprinted_records_are_not_shared(self, make_record):
        records = [make_record(fingerprint="") for _ in range(3)]
        assert fingerprint_similarity(records) == 0.0
        assert distinct_fingerprint_ratio(records) == 1.0

    def test_mixed_fingerprints(self, make_record):
        records = [
            make_record(fingerprint="standup"),
            make_record(fingerprint="standup"),
            make_record(fingerprint=""),
            make_record(fingerprint=""),
        ]
        assert fingerprint_similarity(records) == pytest.approx(0.5)
        assert distinct_fingerprint_ratio(records) == pytest.approx(0.75)

    def test_similarity_is_a_metric(self, make_record):
        records = [make_record(fingerprint="standup") for _ in range(2)] + [make_record(fingerprint="")]
        assert compute_metrics(records).fingerprint_similarity == pytest.approx(2 / 3)


class TestExplicitArguments:
    def test_zero_prefix_length_is_respected(self, make_record):
        records = [make_record(fingerprint="planning"), make_record(fingerprint="retro")]
        metrics = compute_metrics(records, prefix_length=0)
        assert metrics.distinct_fingerprint_ratio == pytest.approx(0.5)
        assert metrics.fingerprint_similarity == pytest.approx(1.0)

    def test_prefix_length_applies_to_similarity(self, make_record):
        records = [make_record(fingerprint="abcdef-1"), make_record(fingerprint="abcdef-2")]
        assert compute_metrics(records, prefix_length=6).fingerprint_similarity == pytest.approx(1.0)
        assert compute_metrics(records, prefix_length=8).fingerprint_similarity == 0.0
