import re
from abc import ABC, abstractmethod
from typing import ClassVar, Generic, TypeVar

from lotfill.extraction.exceptions import ParseMiss
from lotfill.logging.logger import Log

T = TypeVar("T")


def labeled_remainder(pattern: re.Pattern[str], text: str, field: str) -> str:
    """Return the stripped first capture group of a labeled line.

    Raises:
        ParseMiss: if no line carries the label or the remainder is blank.
    """
    match = pattern.search(text)
    if match is None:
        raise ParseMiss(field, "label not found")
    remainder = match.group(1).strip()
    if not remainder:
        raise ParseMiss(field, "label has no value")
    return remainder


class BaseResolver(ABC, Generic[T]):
    """Contract for single-field resolvers.

    ``parse`` is strict and raises ParseMiss; ``resolve`` is the lenient form
    the extraction engine uses.
    """

    field: ClassVar[str]

    @abstractmethod
    def parse(self, text: str) -> T:
        """Resolve the field from document text.

        Raises:
            ParseMiss: if nothing usable is found.
        """

    def resolve(self, text: str) -> T | None:
        try:
            return self.parse(text)
        except ParseMiss as miss:
            Log.debug(f"No {self.field} found", reason=miss.reason)
            return None
