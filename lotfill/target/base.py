from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from lotfill.extraction.models import LocationEntry


class FieldCapability(str, Enum):
    """Fields a target instance may expose."""

    SUBJECT = "subject"
    ISSUED_DATE = "issued_date"
    ISSUER = "issuer"
    LOCATION = "location"
    ATTACHMENT = "attachment"


ALL_CAPABILITIES: frozenset[FieldCapability] = frozenset(FieldCapability)


@dataclass(frozen=True)
class TargetHandle:
    """Opaque reference to one target instance."""

    id: str
    url: str


class BaseTargetHost(ABC):
    """Creates target instances."""

    @abstractmethod
    def current_target(self) -> TargetHandle:
        """The target the operator is looking at (receives unit 1)."""

    @abstractmethod
    def open_target(self, url: str) -> TargetHandle:
        """Open a new, not necessarily initialized, target instance.

        Raises:
            TargetCreationRefused: if the host will not create it.
        """


class BaseTargetFieldAccessor(ABC):
    """Best-effort field writes on a target instance.

    Every setter returns whether the value was applied; a target without the
    field is a no-op, not an error.
    """

    @abstractmethod
    def capabilities(self, handle: TargetHandle) -> frozenset[FieldCapability]:
        """Fields this target exposes."""

    def supports(self, handle: TargetHandle, capability: FieldCapability) -> bool:
        return capability in self.capabilities(handle)

    @abstractmethod
    def is_ready(self, handle: TargetHandle) -> bool:
        """Whether the identifying (subject) field can be read right now.

        May raise while the target is still initializing; callers treat that
        as "not ready". Raises TargetClosedError if the target is gone.
        """

    @abstractmethod
    def set_subject(self, handle: TargetHandle, value: str) -> bool: ...

    @abstractmethod
    def set_date(self, handle: TargetHandle, value: str) -> bool: ...

    @abstractmethod
    def set_issuer(self, handle: TargetHandle, value: str) -> bool: ...

    @abstractmethod
    def set_location(self, handle: TargetHandle, entry: LocationEntry) -> bool: ...

    @abstractmethod
    def attach(self, handle: TargetHandle, payload_ref: str) -> bool: ...
