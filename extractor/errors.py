"""
Extraction errors.

Anything raised from here aborts the whole run; nothing is persisted.
Per-document scoring failures are not errors - they are reported in
EvaluationRound.failures and extraction carries on.
"""


class CoreExtractionError(Exception):
    """Base for fatal extraction errors."""


class DocumentNotFoundError(CoreExtractionError):
    """A document id is unknown to the feature store (or not a candidate)."""

    def __init__(self, document_id: int, message: str = None):
        self.document_id = document_id
        super().__init__(message or f"Document {document_id} not found")


class EmptyCandidatePoolError(CoreExtractionError):
    """A round was attempted with no candidates left."""

    def __init__(self, message: str = "No more candidate documents"):
        super().__init__(message)


class InvalidStateError(CoreExtractionError):
    """An operation was called in the wrong selector state."""


class EvaluationFailedError(CoreExtractionError):
    """Every candidate in a round failed to score."""

    def __init__(self, failed_count: int):
        self.failed_count = failed_count
        super().__init__(f"All {failed_count} candidate evaluations failed")
