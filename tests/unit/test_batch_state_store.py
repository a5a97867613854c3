import json
from pathlib import Path

from lotfill.batch.models import BatchState
from lotfill.batch.store import JsonFileBatchStateStore
from lotfill.extraction.models import ExtractedFields


def _state(done: int = 1) -> BatchState:
    return BatchState(
        base_name="A123",
        total=3,
        done=done,
        source_url="https://forms.example/new",
        fields=ExtractedFields(issuer="Jane"),
    )


class TestJsonFileBatchStateStore:
    def test_empty_store(self, tmp_path: Path) -> None:
        assert JsonFileBatchStateStore(tmp_path, "batch").load() is None

    def test_save_then_load(self, tmp_path: Path) -> None:
        store = JsonFileBatchStateStore(tmp_path / "state", "batch")

        store.save(_state())

        assert store.path == tmp_path / "state" / "batch.json"
        assert store.load() == _state()

    def test_save_replaces_previous_record(self, tmp_path: Path) -> None:
        store = JsonFileBatchStateStore(tmp_path, "batch")

        store.save(_state(done=1))
        store.save(_state(done=2))

        assert store.load().done == 2
        assert list(tmp_path.iterdir()) == [store.path]

    def test_record_is_flat_json(self, tmp_path: Path) -> None:
        store = JsonFileBatchStateStore(tmp_path, "batch")

        store.save(_state())

        record = json.loads(store.path.read_text(encoding="utf-8"))
        assert record["done"] == 1
        assert record["issuer"] == "Jane"
        assert record["location_code"] is None

    def test_clear(self, tmp_path: Path) -> None:
        store = JsonFileBatchStateStore(tmp_path, "batch")
        store.save(_state())

        store.clear()
        store.clear()

        assert store.load() is None

    def test_stores_are_keyed(self, tmp_path: Path) -> None:
        first = JsonFileBatchStateStore(tmp_path, "one")
        first.save(_state())

        assert JsonFileBatchStateStore(tmp_path, "two").load() is None

    def test_corrupt_record_is_ignored(self, tmp_path: Path) -> None:
        store = JsonFileBatchStateStore(tmp_path, "batch")
        store.path.write_text("{not json", encoding="utf-8")

        assert store.load() is None

    def test_invalid_record_is_ignored(self, tmp_path: Path) -> None:
        store = JsonFileBatchStateStore(tmp_path, "batch")
        record = _state().to_record()
        record["done"] = 9
        store.path.write_text(json.dumps(record), encoding="utf-8")

        assert store.load() is None

    def test_non_object_record_is_ignored(self, tmp_path: Path) -> None:
        store = JsonFileBatchStateStore(tmp_path, "batch")
        store.path.write_text("[1, 2]", encoding="utf-8")

        assert store.load() is None
