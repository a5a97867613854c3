from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from lotfill.extraction.models import ExtractedFields, LocationEntry
from lotfill.target.exceptions import FieldAccessFailure


def unit_subject(base_name: str, unit: int, total: int) -> str:
    """Subject of one unit: ``base (#2/3)``, or just ``base`` for a single unit."""
    return f"{base_name} (#{unit}/{total})" if total > 1 else base_name


@dataclass(frozen=True)
class BatchState:
    """The one batch in progress.

    ``done`` counts units already filled; unit 1 is the operator's own target.
    """

    base_name: str
    total: int
    done: int
    source_url: str
    fields: ExtractedFields = field(default_factory=ExtractedFields)
    attachment_ref: str | None = None

    def __post_init__(self) -> None:
        if self.total < 1:
            raise ValueError(f"total must be at least 1, got {self.total}")
        if not 0 <= self.done <= self.total:
            raise ValueError(f"done must be within 0..{self.total}, got {self.done}")

    @property
    def is_complete(self) -> bool:
        return self.done == self.total

    @property
    def remaining(self) -> int:
        return self.total - self.done

    @property
    def next_unit(self) -> int:
        return self.done + 1

    def subject_for(self, unit: int) -> str:
        return unit_subject(self.base_name, unit, self.total)

    def advanced(self) -> "BatchState":
        if self.is_complete:
            raise ValueError(f"Batch '{self.base_name}' is already complete")
        return replace(self, done=self.done + 1)

    def same_batch(self, other: "BatchState") -> bool:
        return (
            self.base_name == other.base_name
            and self.source_url == other.source_url
            and self.total == other.total
        )

    def to_record(self) -> dict[str, Any]:
        """Flat JSON-compatible form used by the state store."""
        location = self.fields.location
        return {
            "base_name": self.base_name,
            "total": self.total,
            "done": self.done,
            "source_url": self.source_url,
            "issued_date": self.fields.issued_date,
            "issuer": self.fields.issuer,
            "location_code": location.code if location else None,
            "location_label": location.label if location else None,
            "quantity": self.fields.quantity,
            "attachment_ref": self.attachment_ref,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "BatchState":
        """Rebuild a state from ``to_record`` output.

        Raises:
            KeyError: if a required key is missing.
            ValueError: if the values break the batch invariants.
        """
        location = None
        if record.get("location_code") is not None:
            location = LocationEntry(
                code=str(record["location_code"]),
                label=str(record.get("location_label") or ""),
            )
        return cls(
            base_name=str(record["base_name"]),
            total=int(record["total"]),
            done=int(record["done"]),
            source_url=str(record["source_url"]),
            fields=ExtractedFields(
                issued_date=record.get("issued_date"),
                location=location,
                issuer=record.get("issuer"),
                quantity=record.get("quantity"),
            ),
            attachment_ref=record.get("attachment_ref"),
        )


@dataclass(frozen=True)
class Progress:
    """What the operator sees between units."""

    base_name: str
    total: int
    done: int

    @classmethod
    def of(cls, state: BatchState) -> "Progress":
        return cls(base_name=state.base_name, total=state.total, done=state.done)

    @property
    def remaining(self) -> int:
        return self.total - self.done

    @property
    def is_complete(self) -> bool:
        return self.remaining <= 0

    @property
    def status_line(self) -> str:
        return f"{self.base_name}   Remaining: {self.remaining}"

    @property
    def action_label(self) -> str:
        if self.is_complete:
            return "Done"
        return f"Open next target (#{self.done + 1}/{self.total})"


@dataclass
class FillReport:
    """Outcome of the field writes for one unit."""

    unit: int
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failures: list[FieldAccessFailure] = field(default_factory=list)

    @property
    def failed(self) -> list[str]:
        return [failure.field for failure in self.failures]


class AdvanceStatus(str, Enum):
    FILLED = "filled"
    COMPLETED = "completed"
    REFUSED = "refused"
    TIMED_OUT = "timed_out"
    STALE = "stale"


@dataclass(frozen=True)
class AdvanceResult:
    """Outcome of one advance trigger."""

    status: AdvanceStatus
    unit: int
    report: FillReport | None = None
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status in (AdvanceStatus.FILLED, AdvanceStatus.COMPLETED)
