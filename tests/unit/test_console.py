from unittest.mock import patch

import pytest

from lotfill.batch.console import TyperConsole, parse_manual_date, parse_quantity_answer
from lotfill.batch.models import Progress


class TestParseQuantityAnswer:
    @pytest.mark.parametrize(
        ("answer", "expected"),
        [
            ("", 3),
            ("   ", 3),
            (None, 3),
            ("5", 5),
            (" 7 boxes", 7),
            ("0", 1),
            ("-4", 1),
            ("many", 1),
        ],
    )
    def test_answers(self, answer: str | None, expected: int) -> None:
        assert parse_quantity_answer(answer, default=3) == expected

    def test_non_positive_default(self) -> None:
        assert parse_quantity_answer("", default=0) == 1


class TestParseManualDate:
    def test_iso_date(self) -> None:
        assert parse_manual_date(" 2025-09-18 ") == "2025-09-18"

    @pytest.mark.parametrize("answer", [None, "", "09/18/2025", "2025-9-18", "soon"])
    def test_rejected(self, answer: str | None) -> None:
        assert parse_manual_date(answer) is None


class TestTyperConsole:
    def test_quantity_prompt_offers_default(self) -> None:
        with patch("lotfill.batch.console.typer.prompt", return_value="4") as prompt:
            assert TyperConsole().ask_quantity(3) == "4"
        prompt.assert_called_once_with("Enter LOT QTY", default="3")

    def test_show_progress(self, capsys: pytest.CaptureFixture[str]) -> None:
        TyperConsole().show_progress(Progress(base_name="A1", total=3, done=1))

        assert capsys.readouterr().out == "A1   Remaining: 2   [Open next target (#2/3)]\n"
