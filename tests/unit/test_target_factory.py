from pathlib import Path
from unittest.mock import MagicMock

import pytest

from lotfill.extraction.locations import LOCATION_TABLE
from lotfill.target.factory import TargetHostFactory, location_choices
from lotfill.target.json_drafts import JsonDraftHost
from lotfill.target.memory import InMemoryTargetHost


def _settings(target_host: str, tmp_path: Path) -> MagicMock:
    return MagicMock(target_host=target_host, drafts_dir=tmp_path, source_url="https://forms.example/new")


class TestTargetHostFactory:
    def test_json_drafts(self, tmp_path: Path) -> None:
        host = TargetHostFactory.create(_settings("json_drafts", tmp_path))

        assert isinstance(host, JsonDraftHost)
        assert host.current_target().url == "https://forms.example/new"

    def test_memory_is_case_insensitive(self, tmp_path: Path) -> None:
        assert isinstance(TargetHostFactory.create(_settings(" Memory ", tmp_path)), InMemoryTargetHost)

    def test_unknown_host(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unknown target host 'browser'"):
            TargetHostFactory.create(_settings("browser", tmp_path))


class TestLocationChoices:
    def test_mirror_lookup_table(self) -> None:
        options = location_choices()

        assert [(o.value, o.text) for o in options] == list(LOCATION_TABLE.items())
