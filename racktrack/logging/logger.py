import logging
import sys
from typing import TextIO

_RESERVED = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys() | {"message", "asctime", "taskName"}
)


class ContextFormatter(logging.Formatter):
    """Appends keyword context passed to Log calls as `key=value` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {k: v for k, v in vars(record).items() if k not in _RESERVED}
        if not context:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in sorted(context.items()))
        return f"{line} | {pairs}"


class Log:
    """Centralized logging shared by the HTTP server and the maintenance CLIs."""

    _logger: logging.Logger = logging.getLogger("racktrack")

    @classmethod
    def configure(cls, log_level: str, stream: TextIO | None = None) -> None:
        """Set the level and attach one handler. Request logs from werkzeug follow the same level."""
        level = log_level.upper()
        cls._logger.setLevel(level)
        logging.getLogger("werkzeug").setLevel(level)
        if not cls._logger.handlers:
            handler = logging.StreamHandler(stream or sys.stdout)
            handler.setFormatter(
                ContextFormatter("%(asctime)s [%(levelname)s] [%(threadName)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._logger.info(message, extra=context)

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._logger.warning(message, extra=context)

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._logger.error(message, extra=context)

    @classmethod
    def exception(cls, message: str, **context: object) -> None:
        """Log at error level with the active exception's traceback."""
        cls._logger.exception(message, extra=context)

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._logger.debug(message, extra=context)
