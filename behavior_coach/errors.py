"""Exception hierarchy for the coaching engine."""


class CoachingEngineError(Exception):
    """Base class for all engine errors."""

    pass


class InvalidInputError(CoachingEngineError):
    """Raised when caller-supplied input is rejected before computation.

    Covers a non-positive timeframe, records without participants, duplicate
    record ids, unknown interaction actions and inverted digest weeks. The
    whole call fails; nothing is partially computed.
    """

    pass


class CatalogConfigurationError(CoachingEngineError):
    """Raised when the pattern catalog cannot be loaded or validated."""

    pass


class RuleEvaluationWarning(CoachingEngineError):
    """Raised while evaluating a single pattern rule.

    The detector catches it per pattern and treats the pattern as not
    detected, so it never escapes a detection run.

    Attributes:
        pattern_id: Catalog entry whose rule failed (may be unset at raise time)
        signal: Signal that could not be resolved
    """

    def __init__(self, message: str, signal: str | None = None, pattern_id: str | None = None):
        self.signal = signal
        self.pattern_id = pattern_id
        super().__init__(message)
