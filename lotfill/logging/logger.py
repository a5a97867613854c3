import logging
import sys
from typing import TextIO


class Log:
    """Centralized logging for lotfill.

    Keyword context is appended to the message as ``key=value`` pairs so the
    batch and unit a line belongs to stay visible with the plain formatter.
    """

    _logger: logging.Logger = logging.getLogger("lotfill")

    @classmethod
    def configure(cls, log_level: str, stream: TextIO | None = None) -> None:
        """Configure the logger with the specified level and a stream handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(stream or sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._emit(logging.INFO, message, context)

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._emit(logging.ERROR, message, context)

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._emit(logging.WARNING, message, context)

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._emit(logging.DEBUG, message, context)

    @classmethod
    def _emit(cls, level: int, message: str, context: dict[str, object]) -> None:
        if context:
            pairs = " ".join(f"{key}={value!r}" for key, value in context.items())
            message = f"{message} {pairs}"
        cls._logger.log(level, message)
