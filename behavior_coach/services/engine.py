"""Coaching engine: runs the full analysis pipeline for one user.

records -> metrics -> detections -> recommendations -> score, then an
optional weekly digest. Each call is synchronous and stateless; the catalog
is read-only after load, so one engine can serve many users concurrently.
"""

from datetime import date, datetime, timezone
from typing import Any, Callable, Optional, Sequence
from uuid import uuid4

import structlog

from behavior_coach.config import Settings, get_settings
from behavior_coach.errors import InvalidInputError
from behavior_coach.models.activity import ActivityRecord
from behavior_coach.models.analysis import BehaviorAnalysis, Recommendation
from behavior_coach.models.digest import CoachingDigest
from behavior_coach.models.interaction import CoachingInteraction, InteractionAction
from behavior_coach.services.catalog_service import PatternCatalog, get_default_catalog
from behavior_coach.services.detector_service import detect
from behavior_coach.services.digest_service import compile_digest, week_bounds
from behavior_coach.services.logging_service import log_analysis_summary
from behavior_coach.services.metrics_service import compute_metrics
from behavior_coach.services.ports import ActivityRecordSource, EventSink
from behavior_coach.services.recommendation_service import immediate_suggestions, synthesize
from behavior_coach.services.scoring_service import aggregate

logger = structlog.get_logger(__name__)


class CoachingEngine:
    """Detects behavioral patterns and produces coaching for a user."""

    def __init__(
        self,
        catalog: Optional[PatternCatalog] = None,
        event_sink: Optional[EventSink] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.catalog = catalog if catalog is not None else get_default_catalog()
        self.event_sink = event_sink
        self.settings = settings or get_settings()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze(
        self,
        user_id: str,
        timeframe_days: int,
        records: Sequence[ActivityRecord],
        analyzed_at: Optional[datetime] = None,
    ) -> BehaviorAnalysis:
        """Run the pipeline over records already scoped to ``timeframe_days``.

        Args:
            user_id: Owner of the records.
            timeframe_days: Window the caller used to select the records.
            records: Activity records for the window.
            analyzed_at: Run timestamp; fixing it makes the result reproducible.

        Raises:
            InvalidInputError: On a non-positive timeframe or malformed records.
        """
        self._validate_input(timeframe_days, records)
        analyzed_at = analyzed_at or self._clock()

        metrics = compute_metrics(
            records,
            prefix_length=self.settings.fingerprint_prefix_length,
            length_norm=self.settings.engagement_length_norm,
        )
        detections = detect(
            records,
            metrics,
            self.catalog,
            user_id=user_id,
            detected_at=analyzed_at,
            confidence=self.settings.detection_confidence,
        )
        recommendations = synthesize(detections, metrics, self.catalog)
        overall_score = aggregate(metrics, detections)

        analysis = BehaviorAnalysis(
            user_id=user_id,
            analyzed_at=analyzed_at,
            timeframe_days=timeframe_days,
            catalog_version=self.catalog.version,
            metrics=metrics,
            detections=tuple(detections),
            recommendations=tuple(recommendations),
            overall_score=overall_score,
        )

        log_analysis_summary(analysis)
        self._emit(
            "behavior_analysis_completed",
            {
                "user_id": user_id,
                "timeframe_days": timeframe_days,
                "overall_score": overall_score,
                "detected_patterns": [d.pattern_id for d in detections],
            },
        )
        return analysis

    def analyze_from_source(
        self,
        source: ActivityRecordSource,
        user_id: str,
        timeframe_days: Optional[int] = None,
        analyzed_at: Optional[datetime] = None,
    ) -> BehaviorAnalysis:
        """Fetch the user's records from ``source`` and analyze them."""
        if timeframe_days is None:
            timeframe_days = self.settings.default_timeframe_days
        if timeframe_days <= 0:
            raise InvalidInputError(f"timeframe_days must be positive, got {timeframe_days}")
        records = source.fetch(user_id, timeframe_days)
        return self.analyze(user_id, timeframe_days, records, analyzed_at=analyzed_at)

    def _validate_input(self, timeframe_days: int, records: Sequence[ActivityRecord]) -> None:
        if timeframe_days <= 0:
            raise InvalidInputError(f"timeframe_days must be positive, got {timeframe_days}")

        seen: set[str] = set()
        for record in records:
            if not record.participant_ids:
                raise InvalidInputError(f"Record {record.id} has no participants")
            if record.id in seen:
                raise InvalidInputError(f"Duplicate record id: {record.id}")
            seen.add(record.id)

    # ------------------------------------------------------------------
    # Delivery-facing views
    # ------------------------------------------------------------------

    def compile_digest(
        self, analysis: BehaviorAnalysis, week_start: date, week_end: date
    ) -> CoachingDigest:
        return compile_digest(
            analysis,
            week_start,
            week_end,
            self.catalog,
            max_focus_areas=self.settings.max_focus_areas,
        )

    def weekly_digest(
        self,
        source: ActivityRecordSource,
        user_id: str,
        today: Optional[date] = None,
    ) -> CoachingDigest:
        """Analyze the last week of activity and compile its digest."""
        now = self._clock()
        today = today or now.date()
        analysis = self.analyze_from_source(
            source, user_id, self.settings.digest_timeframe_days, analyzed_at=now
        )
        week_start, week_end = week_bounds(today)
        return self.compile_digest(analysis, week_start, week_end)

    def immediate_suggestions(
        self, analysis: BehaviorAnalysis, limit: Optional[int] = None
    ) -> list[Recommendation]:
        if limit is None:
            limit = self.settings.max_immediate_suggestions
        return immediate_suggestions(analysis.recommendations, limit=limit)

    # ------------------------------------------------------------------
    # Interaction tracking
    # ------------------------------------------------------------------

    def record_interaction(
        self,
        user_id: str,
        recommendation_id: str,
        action: str | InteractionAction,
        context: Optional[dict[str, Any]] = None,
    ) -> CoachingInteraction:
        """Validate a coaching interaction and hand it to the event sink.

        Raises:
            InvalidInputError: If ``action`` is not viewed, dismissed or acted_on,
                or an id is empty.
        """
        try:
            action = InteractionAction(action)
        except ValueError as e:
            allowed = [a.value for a in InteractionAction]
            raise InvalidInputError(f"action must be one of {allowed}, got {action!r}") from e

        if not user_id or not recommendation_id:
            raise InvalidInputError("user_id and recommendation_id are required")

        interaction = CoachingInteraction(
            id=f"coaching_{uuid4().hex}",
            user_id=user_id,
            recommendation_id=recommendation_id,
            action=action,
            context=context or {},
            occurred_at=self._clock(),
        )

        logger.info(
            "coaching_interaction_recorded",
            user_id=user_id,
            recommendation_id=recommendation_id,
            action=action.value,
        )
        self._emit("coaching_interaction", interaction.model_dump(mode="json"))
        return interaction

    def _emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Fire-and-forget: sink failures are logged, never raised."""
        if self.event_sink is None:
            return
        try:
            self.event_sink.emit(event_name, payload)
        except Exception:
            logger.warning("event_sink_emit_failed", event_name=event_name, exc_info=True)
