import asyncio
from dataclasses import replace
from enum import Enum
from pathlib import Path

from lotfill.batch.console import BaseOperatorConsole, parse_manual_date, parse_quantity_answer
from lotfill.batch.exceptions import (
    MissingIdentifyingFieldError,
    NoPendingBatchError,
    TargetTimeout,
)
from lotfill.batch.field_steps import UnitContext, apply_fields
from lotfill.batch.models import (
    AdvanceResult,
    AdvanceStatus,
    BatchState,
    FillReport,
    Progress,
)
from lotfill.batch.poller import wait_until_ready
from lotfill.batch.store import BaseBatchStateStore, JsonFileBatchStateStore
from lotfill.config.settings import Settings
from lotfill.extraction.engine import ExtractionEngine
from lotfill.extraction.exceptions import ExtractionUnavailable
from lotfill.extraction.models import ExtractedFields
from lotfill.extraction.source import SourceDocument, base_name_from_filename
from lotfill.logging.logger import Log
from lotfill.pdf.factory import PdfExtractorFactory
from lotfill.target.base import (
    BaseTargetFieldAccessor,
    BaseTargetHost,
    FieldCapability,
    TargetHandle,
)
from lotfill.target.exceptions import TargetClosedError, TargetCreationRefused
from lotfill.target.factory import TargetHostFactory


class FillState(str, Enum):
    IDLE = "idle"
    SOURCE_CHOSEN = "source_chosen"
    EXTRACTED = "extracted"
    FILLING_UNIT = "filling_unit"
    AWAITING_ADVANCE = "awaiting_advance"
    COMPLETE = "complete"


class FillOrchestrator:
    """Drives a batch of units from one document, one target at a time.

    Flow: start (resume?) -> begin(document) fills unit 1 in place ->
    advance() per remaining unit, each triggered by the operator.
    Every unit is persisted before the next one can start, so a restart
    resumes at the first unfilled unit.
    """

    def __init__(
        self,
        engine: ExtractionEngine,
        store: BaseBatchStateStore,
        host: BaseTargetHost,
        accessor: BaseTargetFieldAccessor,
        console: BaseOperatorConsole,
        settings: Settings,
    ) -> None:
        self._engine = engine
        self._store = store
        self._host = host
        self._accessor = accessor
        self._console = console
        self._settings = settings
        self._state = FillState.IDLE
        self._batch: BatchState | None = None
        self._started = False

    @property
    def state(self) -> FillState:
        return self._state

    @property
    def batch(self) -> BatchState | None:
        return self._batch

    def progress(self) -> Progress | None:
        return Progress.of(self._batch) if self._batch is not None else None

    def start(self) -> BatchState | None:
        """Check the current target and pick up a pending batch, if any.

        Raises:
            MissingIdentifyingFieldError: if the current target has no subject field.
        """
        self._require_identifying_field()
        self._started = True

        pending = self._store.load()
        if pending is None:
            return None
        if pending.is_complete:
            Log.info(f"Clearing finished batch '{pending.base_name}'")
            self._store.clear()
            return None

        self._batch = pending
        self._state = FillState.AWAITING_ADVANCE
        Log.info(
            f"Resuming batch '{pending.base_name}'",
            done=pending.done,
            total=pending.total,
        )
        self._console.show_progress(Progress.of(pending))
        return pending

    def begin(self, document: SourceDocument) -> BatchState:
        """Extract a document and fill unit 1 into the current target.

        A batch already pending is resumed instead; the document is ignored.
        """
        if not self._started:
            self.start()
        if self._state is FillState.AWAITING_ADVANCE and self._batch is not None:
            Log.warning(
                f"Batch '{self._batch.base_name}' is still pending, resuming it "
                f"instead of starting '{document.name}'"
            )
            self._console.show_progress(Progress.of(self._batch))
            return self._batch

        self._state = FillState.SOURCE_CHOSEN
        base_name = base_name_from_filename(
            document.name, self._settings.filename_underscore_to_slash
        )
        fields = self._extract(document)

        default_quantity = fields.quantity or self._settings.default_quantity
        total = parse_quantity_answer(
            self._console.ask_quantity(default_quantity), default_quantity
        )
        fields = self._complete_required_fields(fields)

        self._state = FillState.FILLING_UNIT
        handle = self._host.current_target()
        batch = BatchState(
            base_name=base_name,
            total=total,
            done=0,
            source_url=handle.url,
            fields=fields,
            attachment_ref=str(document.path),
        )
        self._fill(batch, 1, handle)
        batch = batch.advanced()
        self._commit(batch)
        self._console.notify(
            f"Filled '{batch.subject_for(1)}' in the current target (#1)."
            + ("" if batch.is_complete else " Open the next targets one at a time.")
        )
        return batch

    async def advance(self) -> AdvanceResult:
        """Open, wait for, and fill the next unit's target.

        Refused creation, a target that never becomes ready, or one that
        closes while waiting leaves ``done`` untouched; calling again retries
        the same unit.

        Raises:
            NoPendingBatchError: if no batch is waiting for its next unit.
        """
        if self._state is not FillState.AWAITING_ADVANCE or self._batch is None:
            raise NoPendingBatchError("No batch is waiting for its next unit")

        batch = self._batch
        unit = batch.next_unit
        self._state = FillState.FILLING_UNIT

        try:
            handle = self._host.open_target(batch.source_url)
        except TargetCreationRefused as exc:
            return self._abort(unit, AdvanceStatus.REFUSED, f"Could not open target #{unit}: {exc}")
        Log.info(f"Opened target for unit {unit}/{batch.total}", target=handle.id)

        try:
            probes = await wait_until_ready(
                lambda: self._accessor.is_ready(handle),
                interval=self._settings.poll_interval_seconds,
                max_attempts=self._settings.poll_max_attempts,
                backoff_factor=self._settings.poll_backoff_factor,
                max_interval=self._settings.poll_max_interval_seconds,
            )
            Log.debug(f"Target {handle.id} ready after {probes} probes")
            report = self._fill(batch, unit, handle)
        except (TargetTimeout, TargetClosedError) as exc:
            return self._abort(unit, AdvanceStatus.TIMED_OUT, f"Target #{unit} was not filled: {exc}")
        except asyncio.CancelledError:
            self._state = FillState.AWAITING_ADVANCE
            raise

        return self._record_unit(batch, unit, report)

    def abandon(self) -> None:
        """Drop the pending batch. A poll already running finds nothing to update."""
        self._store.clear()
        if self._batch is not None:
            Log.info(f"Abandoned batch '{self._batch.base_name}'", done=self._batch.done)
        self._batch = None
        self._state = FillState.IDLE

    def _require_identifying_field(self) -> None:
        handle = self._host.current_target()
        if not self._accessor.supports(handle, FieldCapability.SUBJECT):
            raise MissingIdentifyingFieldError(
                "Subject field not found. Run this on a new target form."
            )

    def _extract(self, document: SourceDocument) -> ExtractedFields:
        try:
            fields = self._engine.extract_document(document)
        except ExtractionUnavailable as exc:
            Log.warning(f"Document text unavailable, fields left for manual input: {exc}")
            self._console.notify(f"Could not read '{document.name}'; enter values manually.")
            fields = ExtractedFields()
        self._state = FillState.EXTRACTED
        return fields

    def _complete_required_fields(self, fields: ExtractedFields) -> ExtractedFields:
        if fields.issued_date is not None:
            return fields
        answer = self._console.ask_issued_date()
        manual_date = parse_manual_date(answer)
        if manual_date is None:
            if answer and answer.strip():
                Log.warning(f"Ignoring malformed issued date '{answer.strip()}'")
            return fields
        return replace(fields, issued_date=manual_date)

    def _fill(self, batch: BatchState, unit: int, handle: TargetHandle) -> FillReport:
        context = UnitContext(
            unit=unit,
            handle=handle,
            subject=batch.subject_for(unit),
            fields=batch.fields,
            attachment_ref=batch.attachment_ref,
        )
        report = apply_fields(self._accessor, context)
        Log.info(
            f"Filled unit {unit}/{batch.total}",
            subject=context.subject,
            applied=report.applied,
            skipped=report.skipped,
            failed=report.failed,
        )
        return report

    def _record_unit(self, batch: BatchState, unit: int, report: FillReport) -> AdvanceResult:
        stored = self._store.load()
        if stored is None or not stored.same_batch(batch) or stored.done != batch.done:
            message = f"Batch '{batch.base_name}' changed while unit {unit} was filled; not advancing"
            Log.warning(message)
            self._batch = stored if stored is not None and not stored.is_complete else None
            self._state = FillState.AWAITING_ADVANCE if self._batch else FillState.IDLE
            return AdvanceResult(AdvanceStatus.STALE, unit, report, message)

        advanced = stored.advanced()
        self._commit(advanced)
        status = AdvanceStatus.COMPLETED if advanced.is_complete else AdvanceStatus.FILLED
        return AdvanceResult(status, unit, report, f"Filled '{advanced.subject_for(unit)}'")

    def _commit(self, batch: BatchState) -> None:
        self._batch = batch
        if batch.is_complete:
            self._store.clear()
            self._state = FillState.COMPLETE
            Log.info(f"Batch '{batch.base_name}' complete", total=batch.total)
        else:
            self._store.save(batch)
            self._state = FillState.AWAITING_ADVANCE
        self._console.show_progress(Progress.of(batch))

    def _abort(self, unit: int, status: AdvanceStatus, message: str) -> AdvanceResult:
        Log.warning(message)
        self._console.notify(message)
        self._state = FillState.AWAITING_ADVANCE
        return AdvanceResult(status, unit, message=message)


def build_orchestrator(
    settings: Settings,
    console: BaseOperatorConsole,
    state_dir: Path | None = None,
) -> FillOrchestrator:
    """Build a FillOrchestrator with the configured adapters."""
    engine = ExtractionEngine(pdf_extractor=PdfExtractorFactory.create(settings))
    store = JsonFileBatchStateStore(
        state_dir=state_dir if state_dir is not None else settings.state_dir,
        key=settings.state_key,
    )
    host = TargetHostFactory.create(settings)
    return FillOrchestrator(
        engine=engine,
        store=store,
        host=host,
        accessor=host,
        console=console,
        settings=settings,
    )
