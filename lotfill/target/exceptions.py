class TargetError(Exception):
    """Base exception for target hosts and field accessors."""


class TargetCreationRefused(TargetError):
    """Raised when the host will not open a new target instance."""


class TargetClosedError(TargetError):
    """Raised when a target instance went away while being prepared."""


class TargetAccessError(TargetError):
    """Raised when a target cannot be read yet (still initializing)."""


class FieldAccessFailure(TargetError):
    """A single field write that raised. Recorded, never propagated."""

    def __init__(self, field: str, cause: Exception) -> None:
        super().__init__(f"{field}: {cause}")
        self.field = field
        self.cause = cause
