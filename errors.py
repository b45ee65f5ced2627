"""Exception types raised by the essay scoring pipeline.

All errors derive from `EssayScoringError` so callers at the submission boundary
can catch scoring problems without also catching unrelated failures.
"""

from __future__ import annotations


class EssayScoringError(Exception):
    """Base class for every error raised by the scoring pipeline."""


class ModelLoadFailure(EssayScoringError):
    """The sentence-embedding model could not be fetched or initialized."""


class ModelUnavailable(EssayScoringError):
    """An embedding was requested before the model finished loading."""


class ScoringFailure(EssayScoringError):
    """Segmentation or scoring failed; no partial score is produced."""
