from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

from lotfill.batch.models import FillReport
from lotfill.extraction.models import ExtractedFields
from lotfill.logging.logger import Log
from lotfill.target.base import BaseTargetFieldAccessor, FieldCapability, TargetHandle
from lotfill.target.exceptions import FieldAccessFailure


@dataclass(slots=True)
class UnitContext:
    unit: int
    handle: TargetHandle
    subject: str
    fields: ExtractedFields
    attachment_ref: str | None = None
    report: FillReport = field(init=False)

    def __post_init__(self) -> None:
        self.report = FillReport(unit=self.unit)


class FieldStep(ABC):
    """Writes one field of a unit through the accessor."""

    capability: ClassVar[FieldCapability]

    @abstractmethod
    def value(self, context: UnitContext) -> object | None:
        """The value to write, or None when there is nothing to write."""

    @abstractmethod
    def write(
        self, accessor: BaseTargetFieldAccessor, context: UnitContext, value: object
    ) -> bool:
        raise NotImplementedError


class SubjectStep(FieldStep):
    capability = FieldCapability.SUBJECT

    def value(self, context: UnitContext) -> object | None:
        return context.subject

    def write(self, accessor: BaseTargetFieldAccessor, context: UnitContext, value: object) -> bool:
        return accessor.set_subject(context.handle, str(value))


class IssuedDateStep(FieldStep):
    capability = FieldCapability.ISSUED_DATE

    def value(self, context: UnitContext) -> object | None:
        return context.fields.issued_date

    def write(self, accessor: BaseTargetFieldAccessor, context: UnitContext, value: object) -> bool:
        return accessor.set_date(context.handle, str(value))


class IssuerStep(FieldStep):
    capability = FieldCapability.ISSUER

    def value(self, context: UnitContext) -> object | None:
        return context.fields.issuer

    def write(self, accessor: BaseTargetFieldAccessor, context: UnitContext, value: object) -> bool:
        return accessor.set_issuer(context.handle, str(value))


class LocationStep(FieldStep):
    capability = FieldCapability.LOCATION

    def value(self, context: UnitContext) -> object | None:
        return context.fields.location

    def write(self, accessor: BaseTargetFieldAccessor, context: UnitContext, value: object) -> bool:
        location = context.fields.location
        if location is None:
            return False
        return accessor.set_location(context.handle, location)


class AttachmentStep(FieldStep):
    capability = FieldCapability.ATTACHMENT

    def value(self, context: UnitContext) -> object | None:
        return context.attachment_ref

    def write(self, accessor: BaseTargetFieldAccessor, context: UnitContext, value: object) -> bool:
        return accessor.attach(context.handle, str(value))


# Subject goes first: it is the field that identifies the unit.
DEFAULT_STEPS: tuple[FieldStep, ...] = (
    SubjectStep(),
    IssuedDateStep(),
    IssuerStep(),
    LocationStep(),
    AttachmentStep(),
)


def apply_fields(
    accessor: BaseTargetFieldAccessor,
    context: UnitContext,
    steps: tuple[FieldStep, ...] = DEFAULT_STEPS,
) -> FillReport:
    """Run every step once; a failing write never stops the following ones."""
    report = context.report
    capabilities = accessor.capabilities(context.handle)
    for step in steps:
        name = step.capability.value
        value = step.value(context)
        if value is None:
            continue
        if step.capability not in capabilities:
            Log.warning(f"Target has no {name} field, skipping", unit=context.unit)
            report.skipped.append(name)
            continue
        try:
            applied = step.write(accessor, context, value)
        except Exception as exc:
            failure = FieldAccessFailure(name, exc)
            Log.warning(f"Writing {name} failed: {exc}", unit=context.unit)
            report.failures.append(failure)
            continue
        if applied:
            report.applied.append(name)
        else:
            Log.warning(f"No matching {name} value on target", unit=context.unit)
            report.skipped.append(name)
    return report
