"""
Engine errors.

InputError and RecommendationTimeout reach the caller. UpstreamUnavailable is fatal
only for the candidate pool and the user profile; the behavior profiler and social
factors catch it and fall back to neutral defaults. ComputationError drops a single
candidate from the batch.
"""


class RecommendationError(Exception):
    """Base class for all engine errors."""


class InputError(RecommendationError, ValueError):
    """Missing or invalid user id, context, or filters. Nothing is computed."""


class UpstreamUnavailable(RecommendationError):
    """A read-only collaborator (store, event log, social graph) failed or timed out."""

    def __init__(self, source: str, message: str = ""):
        self.source = source
        super().__init__(f"{source} unavailable" + (f": {message}" if message else ""))


class ComputationError(RecommendationError):
    """A scorer could not score a candidate because its data is malformed."""

    def __init__(self, candidate_id: str, message: str):
        self.candidate_id = candidate_id
        super().__init__(f"candidate {candidate_id}: {message}")


class RecommendationTimeout(RecommendationError):
    """The request exceeded its time budget. No partial ranking is returned."""
