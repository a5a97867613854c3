from collections.abc import Sequence
from dataclasses import dataclass, field

from lotfill.extraction.models import LocationEntry
from lotfill.target.base import (
    ALL_CAPABILITIES,
    BaseTargetFieldAccessor,
    BaseTargetHost,
    FieldCapability,
    TargetHandle,
)
from lotfill.target.choices import ChoiceOption, select_location
from lotfill.target.exceptions import (
    TargetAccessError,
    TargetClosedError,
    TargetCreationRefused,
)


@dataclass
class InMemoryForm:
    """State of one in-memory target instance."""

    handle: TargetHandle
    capabilities: frozenset[FieldCapability]
    location_choices: list[ChoiceOption]
    pending_probes: int = 0
    closed: bool = False
    values: dict[str, object] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)


class InMemoryTargetHost(BaseTargetHost, BaseTargetFieldAccessor):
    """Targets kept in process memory, for dry runs and tests.

    ``init_probes`` is how many readiness probes a newly opened target fails
    with TargetAccessError before it finishes initializing.
    """

    def __init__(
        self,
        capabilities: frozenset[FieldCapability] = ALL_CAPABILITIES,
        location_choices: Sequence[ChoiceOption] = (),
        init_probes: int = 0,
        refuse_open: bool = False,
    ) -> None:
        self._capabilities = capabilities
        self._location_choices = list(location_choices)
        self._init_probes = init_probes
        self.refuse_open = refuse_open
        self.forms: dict[str, InMemoryForm] = {}
        self.opened: list[TargetHandle] = []
        self._current = self._create("memory://current", pending_probes=0)

    def current_target(self) -> TargetHandle:
        return self._current

    def open_target(self, url: str) -> TargetHandle:
        if self.refuse_open:
            raise TargetCreationRefused(f"Opening {url} was refused")
        handle = self._create(url, pending_probes=self._init_probes)
        self.opened.append(handle)
        return handle

    def form(self, handle: TargetHandle) -> InMemoryForm:
        form = self.forms.get(handle.id)
        if form is None or form.closed:
            raise TargetClosedError(f"Target {handle.id} is closed")
        return form

    def close(self, handle: TargetHandle) -> None:
        self.forms[handle.id].closed = True

    def capabilities(self, handle: TargetHandle) -> frozenset[FieldCapability]:
        return self.form(handle).capabilities

    def is_ready(self, handle: TargetHandle) -> bool:
        form = self.form(handle)
        if form.pending_probes > 0:
            form.pending_probes -= 1
            raise TargetAccessError(f"Target {handle.id} is still initializing")
        return FieldCapability.SUBJECT in form.capabilities

    def set_subject(self, handle: TargetHandle, value: str) -> bool:
        return self._write(handle, FieldCapability.SUBJECT, value)

    def set_date(self, handle: TargetHandle, value: str) -> bool:
        return self._write(handle, FieldCapability.ISSUED_DATE, value)

    def set_issuer(self, handle: TargetHandle, value: str) -> bool:
        return self._write(handle, FieldCapability.ISSUER, value)

    def set_location(self, handle: TargetHandle, entry: LocationEntry) -> bool:
        form = self.form(handle)
        if not form.location_choices:
            return self._write(handle, FieldCapability.LOCATION, entry.label)
        choice = select_location(form.location_choices, entry)
        if choice is None:
            return False
        return self._write(handle, FieldCapability.LOCATION, choice.value)

    def attach(self, handle: TargetHandle, payload_ref: str) -> bool:
        form = self.form(handle)
        attached = list(form.values.get(FieldCapability.ATTACHMENT.value, []))  # type: ignore[call-overload]
        attached.append(payload_ref)
        return self._write(handle, FieldCapability.ATTACHMENT, attached)

    def _create(self, url: str, pending_probes: int) -> TargetHandle:
        handle = TargetHandle(id=f"memory-{len(self.forms)}", url=url)
        self.forms[handle.id] = InMemoryForm(
            handle=handle,
            capabilities=self._capabilities,
            location_choices=self._location_choices,
            pending_probes=pending_probes,
        )
        return handle

    def _write(self, handle: TargetHandle, capability: FieldCapability, value: object) -> bool:
        form = self.form(handle)
        if capability not in form.capabilities:
            return False
        form.values[capability.value] = value
        form.writes.append(capability.value)
        return True
