"""
azc structured logging.

Every sync decision and transfer is logged as a structured event so a run
can be audited afterwards. Silent mode raises the console threshold so
nothing but fatal errors reach stderr.
"""

from __future__ import annotations

import logging
import sys
import time
from datetime import date
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from azc.core.config import LoggingConfig


_configured = False

# Loggers of the Azure SDK that echo every HTTP request and response
HTTP_LOGGERS = ("azure.core.pipeline.policies.http_logging_policy", "azure.storage.blob")

SILENT_LEVEL = logging.CRITICAL + 1


def _handlers(config: LoggingConfig, silent: bool) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if config.console_enabled:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(SILENT_LEVEL if silent else getattr(logging, config.level))
        handlers.append(console)

    if config.file_enabled:
        config.log_directory.mkdir(parents=True, exist_ok=True)
        path = config.log_directory / f"azc_{date.today():%Y%m%d}.log"
        log_file = logging.FileHandler(path, encoding="utf-8")
        log_file.setLevel(logging.DEBUG)
        handlers.append(log_file)

    # Without any handler the stdlib falls back to printing warnings on stderr
    return handlers or [logging.NullHandler()]


def _processors(json_format: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def setup_logging(config: LoggingConfig, silent: bool = False, force: bool = False) -> None:
    """Configure structlog on top of stdlib logging.

    Only the first call takes effect unless *force* is set.
    """
    global _configured

    if _configured and not force:
        return

    logging.basicConfig(
        level=logging.DEBUG,
        handlers=_handlers(config, silent),
        format="%(message)s",
        force=True,
    )

    # The SDK logs request/response headers at INFO; keep them for verbose runs only
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING if silent else logging.INFO)

    structlog.configure(
        processors=_processors(config.json_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name or "azc")


class OperationLogger:
    """Logs the start, completion or failure of one transfer with its duration.

    Context given at construction, plus anything added with ``update``, is
    attached to the closing event.
    """

    def __init__(
        self,
        operation: str,
        logger: structlog.stdlib.BoundLogger | None = None,
        **context: Any,
    ):
        self.operation = operation
        self.logger = logger or get_logger()
        self.context = context
        self._started: float | None = None

    def __enter__(self) -> OperationLogger:
        self._started = time.monotonic()
        self.logger.debug(f"{self.operation} started", **self.context)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        fields = dict(self.context, operation=self.operation, duration_seconds=round(self.elapsed, 3))
        if exc_type is None:
            self.logger.info(f"{self.operation} completed", **fields)
        else:
            self.logger.error(
                f"{self.operation} failed",
                error_type=exc_type.__name__,
                error=str(exc_val),
                **fields,
            )

    @property
    def elapsed(self) -> float:
        if self._started is None:
            return 0.0
        return time.monotonic() - self._started

    def update(self, **context: Any) -> None:
        """Add fields to the closing event."""
        self.context.update(context)
