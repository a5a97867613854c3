import re
from abc import ABC, abstractmethod

import typer

from lotfill.batch.models import Progress

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_quantity_answer(answer: str | None, default: int) -> int:
    """Lot count typed by the operator; blank keeps the default, junk means 1."""
    if answer is None or not answer.strip():
        quantity = default
    else:
        match = _LEADING_INT_RE.match(answer)
        quantity = int(match.group(1)) if match else 0
    return quantity if quantity > 0 else 1


def parse_manual_date(answer: str | None) -> str | None:
    """A manually entered ``YYYY-MM-DD`` date, or None if blank or malformed."""
    value = (answer or "").strip()
    return value if _ISO_DATE_RE.match(value) else None


class BaseOperatorConsole(ABC):
    """Prompts and notices shown to the operator."""

    @abstractmethod
    def ask_quantity(self, default: int) -> str | None:
        """Raw answer to the lot quantity prompt; None when dismissed."""

    @abstractmethod
    def ask_issued_date(self) -> str | None:
        """Raw answer to the manual issued date prompt; None when dismissed."""

    @abstractmethod
    def show_progress(self, progress: Progress) -> None: ...

    @abstractmethod
    def notify(self, message: str) -> None: ...


class TyperConsole(BaseOperatorConsole):
    """Terminal prompts through typer."""

    def ask_quantity(self, default: int) -> str | None:
        return typer.prompt("Enter LOT QTY", default=str(default))

    def ask_issued_date(self) -> str | None:
        return typer.prompt(
            "Could not find a date in the document. Enter Issued Date (YYYY-MM-DD) "
            "or leave blank",
            default="",
            show_default=False,
        )

    def show_progress(self, progress: Progress) -> None:
        typer.echo(f"{progress.status_line}   [{progress.action_label}]")

    def notify(self, message: str) -> None:
        typer.echo(message)
