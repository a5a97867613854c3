from dataclasses import dataclass


@dataclass(frozen=True)
class LocationEntry:
    """A row of the location lookup table."""

    code: str
    label: str


@dataclass(frozen=True)
class ExtractedFields:
    """Metadata mined from one document. Any field may be missing."""

    issued_date: str | None = None
    location: LocationEntry | None = None
    issuer: str | None = None
    quantity: int | None = None

    def __post_init__(self) -> None:
        if self.quantity is not None and self.quantity <= 0:
            raise ValueError(f"quantity must be positive, got {self.quantity}")

    def missing(self) -> list[str]:
        """Names of the fields that resolved to nothing."""
        return [
            name
            for name in ("issued_date", "location", "issuer", "quantity")
            if getattr(self, name) is None
        ]
