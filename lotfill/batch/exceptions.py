class BatchError(Exception):
    """Base exception for batch fill orchestration."""


class TargetTimeout(BatchError):
    """Raised when a new target never became ready within the poll budget."""


class MissingIdentifyingFieldError(BatchError):
    """Raised when the current target has no subject field. Fatal."""


class NoPendingBatchError(BatchError):
    """Raised when an advance is requested with no batch in progress."""
