import uuid
from collections.abc import Sequence
from dataclasses import asdict
from pathlib import Path
from typing import Any

from lotfill.extraction.models import LocationEntry
from lotfill.target.base import (
    ALL_CAPABILITIES,
    BaseTargetFieldAccessor,
    BaseTargetHost,
    FieldCapability,
    TargetHandle,
)
from lotfill.target.choices import ChoiceOption, select_location
from lotfill.target.exceptions import TargetClosedError, TargetCreationRefused
from lotfill.utils.json_files import read_json, write_json_atomic


class JsonDraftHost(BaseTargetHost, BaseTargetFieldAccessor):
    """Target instances stored as JSON draft files, one per unit.

    Layout: ``<drafts_dir>/<id>.json``; the operator's own draft is
    ``current.json``. A draft is ready once it parses and has a subject key.
    """

    CURRENT_ID = "current"
    QRT_SLOT = "qrt_attachment"

    def __init__(
        self,
        drafts_dir: Path,
        current_url: str = "",
        location_choices: Sequence[ChoiceOption] = (),
    ) -> None:
        self._drafts_dir = drafts_dir
        self._current_url = current_url
        self._location_choices = list(location_choices)

    def draft_path(self, handle: TargetHandle) -> Path:
        return self._drafts_dir / f"{handle.id}.json"

    def current_target(self) -> TargetHandle:
        handle = TargetHandle(id=self.CURRENT_ID, url=self._current_url)
        if not self.draft_path(handle).exists():
            write_json_atomic(self.draft_path(handle), self._template(handle.url))
        return handle

    def open_target(self, url: str) -> TargetHandle:
        handle = TargetHandle(id=f"draft-{uuid.uuid4().hex[:12]}", url=url)
        try:
            write_json_atomic(self.draft_path(handle), self._template(url))
        except OSError as exc:
            raise TargetCreationRefused(f"Cannot create draft in {self._drafts_dir}: {exc}") from exc
        return handle

    def capabilities(self, handle: TargetHandle) -> frozenset[FieldCapability]:
        return ALL_CAPABILITIES

    def is_ready(self, handle: TargetHandle) -> bool:
        return FieldCapability.SUBJECT.value in self._read(handle)

    def set_subject(self, handle: TargetHandle, value: str) -> bool:
        return self._update(handle, FieldCapability.SUBJECT.value, value)

    def set_date(self, handle: TargetHandle, value: str) -> bool:
        return self._update(handle, FieldCapability.ISSUED_DATE.value, value)

    def set_issuer(self, handle: TargetHandle, value: str) -> bool:
        return self._update(handle, FieldCapability.ISSUER.value, value)

    def set_location(self, handle: TargetHandle, entry: LocationEntry) -> bool:
        draft = self._read(handle)
        choices = [ChoiceOption(**option) for option in draft.get("location_choices", [])]
        if not choices:
            return self._update(handle, FieldCapability.LOCATION.value, entry.label)
        choice = select_location(choices, entry)
        if choice is None:
            return False
        return self._update(handle, FieldCapability.LOCATION.value, choice.value)

    def attach(self, handle: TargetHandle, payload_ref: str) -> bool:
        """Attach to the QRT slot when the draft has one, else to the general list."""
        draft = self._read(handle)
        if self.QRT_SLOT in draft:
            return self._update(handle, self.QRT_SLOT, payload_ref)
        attachments = list(draft.get("attachments", []))
        attachments.append(payload_ref)
        return self._update(handle, "attachments", attachments)

    def _template(self, url: str) -> dict[str, Any]:
        return {
            "url": url,
            "subject": "",
            "issued_date": None,
            "issuer": None,
            "location": None,
            self.QRT_SLOT: None,
            "attachments": [],
            "location_choices": [asdict(option) for option in self._location_choices],
        }

    def _read(self, handle: TargetHandle) -> dict[str, Any]:
        try:
            return read_json(self.draft_path(handle))
        except FileNotFoundError as exc:
            raise TargetClosedError(f"Draft {handle.id} no longer exists") from exc

    def _update(self, handle: TargetHandle, key: str, value: object) -> bool:
        draft = self._read(handle)
        draft[key] = value
        write_json_atomic(self.draft_path(handle), draft)
        return True
