"""
Log module for route scripts.

``log.info/warn/error/debug`` write to the ``scriptgate.script`` logger with the
request's route and script attached as record attributes. ``print(...)`` in a
script is routed to the same logger at INFO, one record per call.
"""

import logging
from functools import partial
from typing import Any, Callable

from RestrictedPython.PrintCollector import PrintCollector

logger = logging.getLogger("scriptgate.script")


class ScriptPrinter(PrintCollector):
    """``_print_`` implementation: each print() call becomes one log record."""

    def __init__(self, emit: Callable[[str], None], _getattr_: Any = None) -> None:
        super().__init__(_getattr_)
        self._emit = emit

    def _call_print(self, *objects: Any, **kwargs: Any) -> None:
        if kwargs.get("file") is not None:
            # explicit file=: keep PrintCollector's guarded behaviour
            super()._call_print(*objects, **kwargs)
            return
        super()._call_print(*objects, **kwargs)
        text = "".join(self.txt).rstrip("\n")
        self.txt = []
        self._emit(text)


class ScriptLog:
    __slots__ = ("_logger", "_extra")

    def __init__(self, logger_instance: logging.Logger, extra: dict[str, Any] | None) -> None:
        self._logger = logger_instance
        self._extra = dict(extra) if extra else None

    def _emit(self, level: int, msg: str, *args: Any) -> None:
        self._logger.log(level, msg, *args, extra=self._extra)

    def info(self, msg: str, *args: Any) -> None:
        self._emit(logging.INFO, msg, *args)

    def warn(self, msg: str, *args: Any) -> None:
        self._emit(logging.WARNING, msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        self._emit(logging.ERROR, msg, *args)

    def debug(self, msg: str, *args: Any) -> None:
        self._emit(logging.DEBUG, msg, *args)

    def printer_factory(self) -> Callable[..., ScriptPrinter]:
        """Value for the sandbox's ``_print_`` global."""
        # "%s" so printed text is never treated as a format string
        return partial(ScriptPrinter, partial(self._emit, logging.INFO, "%s"))


def make_log_module(
    *,
    logger_instance: logging.Logger | None = None,
    extra: dict[str, Any] | None = None,
) -> ScriptLog:
    """Build the `log` object. extra (route, script) is attached to every record."""
    return ScriptLog(logger_instance or logger, extra)
