"""Pattern catalog: versioned, read-only definitions of detectable behaviors.

The compiled-in catalog below is the reference set. An external catalog can
be supplied as a JSON file holding either an ordered list of pattern records
or ``{"version": ..., "patterns": [...]}``. Every catalog is validated when it
is loaded, so a bad entry fails startup instead of a detection run.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator, Optional

import structlog
from pydantic import ValidationError

from behavior_coach.config import get_settings
from behavior_coach.errors import CatalogConfigurationError
from behavior_coach.models.pattern import PatternDefinition
from behavior_coach.services.signals import is_known_signal

logger = structlog.get_logger(__name__)

CATALOG_VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Reference catalog (order is significant: detections follow it)
# ---------------------------------------------------------------------------

DEFAULT_PATTERNS: list[dict[str, Any]] = [
    {
        "id": "low_action_items",
        "name": "Low Action Item Generation",
        "description": "User consistently has meetings without clear action items",
        "category": "productivity",
        "severity": "medium",
        "timeframe_days": 14,
        "conditions": [
            {"signal": "action_items_per_record", "operator": "<", "threshold": 0.5},
            {"signal": "records_without_action_items", "operator": ">=", "threshold": 3},
        ],
        "evidence": [
            {"signal": "action_items_per_record", "template": "{value:.1f} action items per meeting"},
            {"signal": "records_without_action_items", "template": "{value:.0f} meetings without action items"},
        ],
        "suggestion": {
            "title": "Try adding clearer action items",
            "message": (
                "Your recent meetings had few action items. Consider ending meetings with "
                '"What are our next steps?" to drive accountability.'
            ),
            "action_text": "Learn More",
            "action_url": "/help/action-items",
        },
        "action_steps": [
            "End each meeting by asking \"What are our next steps?\"",
            "Assign a named owner to every action item",
            "Set explicit deadlines for follow-up tasks",
        ],
        "tracking_metric": "action_items_per_record",
        "focus_phrase": "End meetings with clear next steps",
    },
    {
        "id": "repetitive_content",
        "name": "Repetitive Summary Content",
        "description": "User creates very similar summaries repeatedly",
        "category": "engagement",
        "severity": "low",
        "timeframe_days": 7,
        "conditions": [
            {"signal": "fingerprint_similarity", "operator": ">", "threshold": 0.8},
            {"signal": "total_records", "operator": ">=", "threshold": 3},
        ],
        "evidence": [
            {"signal": "fingerprint_similarity", "template": "{value:.0%} of meetings share near-identical content"},
            {"signal": "total_records", "template": "{value:.0f} meetings analyzed"},
        ],
        "suggestion": {
            "title": "Mix up your meeting formats",
            "message": (
                "Your summaries seem similar lately. Try different meeting types like "
                "brainstorming or retrospectives for variety."
            ),
            "action_text": "Explore Templates",
            "action_url": "/templates",
        },
        "action_steps": [
            "Replace one recurring status meeting with an async update",
            "Try a brainstorming or retrospective format this week",
        ],
        "tracking_metric": "engagement_score",
        "focus_phrase": "Vary meeting formats",
    },
    {
        "id": "low_decision_density",
        "name": "Low Decision Making",
        "description": "Meetings lack clear decisions or conclusions",
        "category": "decision_making",
        "severity": "high",
        "timeframe_days": 21,
        "conditions": [
            {"signal": "records_without_decisions", "operator": ">=", "threshold": 3},
        ],
        "evidence": [
            {"signal": "decisions_per_record", "template": "{value:.1f} decisions per meeting"},
            {"signal": "records_without_decisions", "template": "{value:.0f} meetings without decisions"},
        ],
        "suggestion": {
            "title": "Focus on decision-making",
            "message": (
                "Many recent meetings lacked clear decisions. Try using decision frameworks "
                'like "What will we decide today?"'
            ),
            "action_text": "Decision Templates",
            "action_url": "/help/decisions",
        },
        "action_steps": [
            "Start meetings with \"What decisions do we need to make?\"",
            "Use a decision framework such as RACI or DACI",
            "Document decisions clearly in summaries",
        ],
        "tracking_metric": "decisions_per_record",
        "focus_phrase": "Use decision frameworks in meetings",
    },
    {
        "id": "poor_follow_up",
        "name": "Poor Follow-up Rate",
        "description": "User rarely follows up on action items or decisions",
        "category": "follow_through",
        "severity": "high",
        "timeframe_days": 30,
        "conditions": [
            {"signal": "follow_up_rate", "operator": "<", "threshold": 0.3},
            {"signal": "total_records", "operator": ">", "threshold": 5},
        ],
        "evidence": [
            {"signal": "follow_up_rate", "template": "{value:.0%} of meetings produced follow-up items"},
            {"signal": "total_records", "template": "{value:.0f} meetings analyzed"},
        ],
        "suggestion": {
            "title": "Improve follow-up consistency",
            "message": (
                "Few of your meetings lead to follow-up. Set calendar reminders or use "
                "auto-follow-up to keep commitments moving."
            ),
            "action_text": "Enable Auto-Follow-up",
            "action_url": "/automation/followup",
        },
        "action_steps": [
            "Send a recap with owners within 24 hours of each meeting",
            "Set calendar reminders for every open action item",
            "Review last week's action items at the start of each meeting",
        ],
        "tracking_metric": "follow_up_rate",
        "focus_phrase": "Follow up on open action items",
    },
    {
        "id": "low_collaboration",
        "name": "Low Team Collaboration",
        "description": "User rarely involves team members or shares summaries",
        "category": "collaboration",
        "severity": "medium",
        "timeframe_days": 14,
        "conditions": [
            {"signal": "collaboration_score", "operator": "<", "threshold": 0.2},
        ],
        "evidence": [
            {"signal": "collaboration_score", "template": "{value:.0%} collaborative meetings"},
            {"signal": "solo_records", "template": "{value:.0f} solo meetings"},
        ],
        "suggestion": {
            "title": "Increase team collaboration",
            "message": (
                "Most of your meetings are solo. Consider inviting team members or "
                "sharing summaries for better alignment."
            ),
            "action_text": "Invite Team",
            "action_url": "/team/invite",
        },
        "action_steps": [
            "Invite relevant team members to meetings",
            "Share summaries with the broader team",
            "Schedule regular team check-ins",
        ],
        "tracking_metric": "collaboration_score",
        "focus_phrase": "Invite more team members to meetings",
    },
    {
        "id": "meeting_overload",
        "name": "Meeting Overload",
        "description": "User has too many meetings without sufficient breaks",
        "category": "productivity",
        "severity": "critical",
        "timeframe_days": 7,
        "conditions": [
            {"signal": "total_records", "operator": ">", "threshold": 25},
        ],
        "evidence": [
            {"signal": "total_records", "template": "{value:.0f} meetings in the analysis window"},
            {"signal": "average_duration_minutes", "template": "{value:.0f} minutes average meeting length"},
        ],
        "suggestion": {
            "title": "Consider meeting hygiene",
            "message": (
                "You had 25+ meetings this week. Consider shorter meetings, async updates, "
                "or meeting-free blocks."
            ),
            "action_text": "Meeting Best Practices",
            "action_url": "/help/meeting-hygiene",
        },
        "action_steps": [
            "Decline or delegate meetings without a clear agenda",
            "Block two meeting-free focus periods per week",
            "Default new meetings to 25 or 50 minutes",
            "Move status updates to async channels",
        ],
        "tracking_metric": "total_records",
        "focus_phrase": "Protect meeting-free focus time",
    },
]


class PatternCatalog:
    """Ordered, read-only collection of pattern definitions."""

    def __init__(self, patterns: list[PatternDefinition], version: str = CATALOG_VERSION):
        self._patterns = tuple(patterns)
        self._by_id = {p.id: p for p in self._patterns}
        self.version = version

    def __iter__(self) -> Iterator[PatternDefinition]:
        return iter(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern_id: object) -> bool:
        return pattern_id in self._by_id

    def get(self, pattern_id: str) -> Optional[PatternDefinition]:
        return self._by_id.get(pattern_id)

    def active_patterns(self) -> list[PatternDefinition]:
        return [p for p in self._patterns if p.is_active]

    @property
    def pattern_ids(self) -> list[str]:
        return [p.id for p in self._patterns]


def build_catalog(data: Any, version: str = CATALOG_VERSION) -> PatternCatalog:
    """Validate raw catalog data and build a PatternCatalog.

    Args:
        data: A list of pattern records, or a dict with ``patterns`` and an
            optional ``version``.
        version: Version used when ``data`` does not carry one.

    Raises:
        CatalogConfigurationError: On any schema or reference error.
    """
    if isinstance(data, dict):
        version = str(data.get("version", version))
        data = data.get("patterns")

    if not isinstance(data, list):
        raise CatalogConfigurationError("Catalog must be a list of pattern definitions")
    if not data:
        raise CatalogConfigurationError("Catalog is empty")

    patterns: list[PatternDefinition] = []
    for index, raw in enumerate(data):
        try:
            pattern = PatternDefinition.model_validate(raw)
        except ValidationError as e:
            label = raw.get("id", f"#{index}") if isinstance(raw, dict) else f"#{index}"
            raise CatalogConfigurationError(
                f"Pattern {label} is invalid:\n{_format_validation_errors(e)}"
            ) from e
        _check_signal_references(pattern)
        patterns.append(pattern)

    seen: set[str] = set()
    for pattern in patterns:
        if pattern.id in seen:
            raise CatalogConfigurationError(f"Duplicate pattern id: {pattern.id}")
        seen.add(pattern.id)

    return PatternCatalog(patterns, version=version)


def _check_signal_references(pattern: PatternDefinition) -> None:
    referenced = [c.signal for c in pattern.conditions] + [e.signal for e in pattern.evidence]
    for signal in referenced:
        if not is_known_signal(signal):
            raise CatalogConfigurationError(
                f"Pattern {pattern.id} references unknown signal: {signal}"
            )


def _format_validation_errors(error: ValidationError) -> str:
    """Format Pydantic validation errors for readable output."""
    lines = []
    for err in error.errors():
        loc = " -> ".join(str(x) for x in err["loc"])
        lines.append(f"  - {loc}: {err['msg']}")
    return "\n".join(lines)


def load_catalog(path: str | Path | None = None) -> PatternCatalog:
    """Load and validate the pattern catalog.

    Args:
        path: JSON catalog file. Falls back to the ``catalog_path`` setting,
            then to the compiled-in reference catalog.

    Raises:
        CatalogConfigurationError: If the file cannot be read or validation fails.
    """
    if path is None:
        path = get_settings().catalog_path

    if path is None:
        catalog = build_catalog(DEFAULT_PATTERNS)
        logger.info("catalog_loaded", source="builtin", version=catalog.version, patterns=len(catalog))
        return catalog

    path = Path(path)
    if not path.is_file():
        raise CatalogConfigurationError(f"Catalog file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogConfigurationError(f"Invalid JSON in catalog file: {e}") from e
    except OSError as e:
        raise CatalogConfigurationError(f"Failed to read catalog file: {e}") from e

    catalog = build_catalog(data, version=path.stem)
    logger.info("catalog_loaded", source=str(path), version=catalog.version, patterns=len(catalog))
    return catalog


@lru_cache
def get_default_catalog() -> PatternCatalog:
    """Get the cached catalog for this process (loaded once at first use)."""
    return load_catalog()


def get_pattern(pattern_id: str, catalog: Optional[PatternCatalog] = None) -> Optional[PatternDefinition]:
    """Look up a pattern by id in the given catalog, or the process catalog."""
    if catalog is None:
        catalog = get_default_catalog()
    return catalog.get(pattern_id)
