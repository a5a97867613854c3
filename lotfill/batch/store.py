from abc import ABC, abstractmethod
from pathlib import Path

from lotfill.batch.models import BatchState
from lotfill.logging.logger import Log
from lotfill.utils.json_files import read_json, write_json_atomic


class BaseBatchStateStore(ABC):
    """Single-record repository for the batch in progress.

    There is no locking: one operator drives one batch at a time.
    """

    @abstractmethod
    def load(self) -> BatchState | None:
        """The stored batch, or None when no batch is pending."""

    @abstractmethod
    def save(self, state: BatchState) -> None:
        """Replace the stored batch."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored batch. Clearing an empty store is a no-op."""


class JsonFileBatchStateStore(BaseBatchStateStore):
    """Stores the batch as ``<state_dir>/<key>.json``."""

    def __init__(self, state_dir: Path, key: str) -> None:
        self._path = state_dir / f"{key}.json"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> BatchState | None:
        if not self._path.exists():
            return None
        try:
            return BatchState.from_record(read_json(self._path))
        except (KeyError, TypeError, ValueError) as exc:
            Log.warning(f"Ignoring unreadable batch state at {self._path}: {exc}")
            return None

    def save(self, state: BatchState) -> None:
        write_json_atomic(self._path, state.to_record())
        Log.debug(
            "Batch state saved",
            base_name=state.base_name,
            done=state.done,
            total=state.total,
        )

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        Log.debug(f"Batch state cleared at {self._path}")
