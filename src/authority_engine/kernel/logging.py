"""
Structured logging for the Authority Engine

Every command a human issues (stage, approve, reject, confirm, override)
leaves a structured log line carrying a correlation id, so an audit reader
can follow one approval from staging through to a learned policy.

Free-text fields written by humans (justifications, rejection reasons,
override reasons) are redacted before logging: they belong in the returned
records, not in log aggregation.
"""

import contextvars
import logging
import os
import secrets
import sys
import time
from typing import Any

import structlog

REDACTED = "***REDACTED***"

# Human-authored free text and actor names
REDACTED_FIELDS = frozenset(
    {
        "justification",
        "human_justification",
        "conditions",
        "reason",
        "rejection_reason",
        "created_by",
        "staged_by",
    }
)

correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)


def generate_correlation_id() -> str:
    """Return a 22-character URL-safe id (128 bits of entropy)"""
    return secrets.token_urlsafe(16)


def get_correlation_id() -> str:
    """Current correlation id; one is generated on first use in a context"""
    cid = correlation_id_var.get()
    if not cid:
        cid = generate_correlation_id()
        correlation_id_var.set(cid)
    return cid


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def redact_context(context: dict[str, Any]) -> dict[str, Any]:
    """
    Replace human-authored fields with a placeholder

    Example:
        >>> redact_context({"justification": "ok because...", "action_id": "a1"})
        {'justification': '***REDACTED***', 'action_id': 'a1'}
    """
    return {key: REDACTED if key in REDACTED_FIELDS else value for key, value in context.items()}


def add_correlation_id(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    event_dict["correlation_id"] = get_correlation_id()
    return event_dict


def redact_event(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Processor form of redact_context, for log calls made outside LogOperation"""
    return redact_context(event_dict)


def is_production() -> bool:
    """True when ENVIRONMENT is 'production' (default: development)"""
    return os.getenv("ENVIRONMENT", "development").lower() == "production"


def _renderers(json_output: bool) -> list[structlog.types.Processor]:
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.processors.ExceptionRenderer(), structlog.dev.ConsoleRenderer(colors=True)]


def configure_logging(*, json_output: bool = False, log_level: str = "INFO") -> None:
    """
    Route structlog through stdlib logging on stderr

    stdout is left alone so `--json` CLI output stays machine-readable.

    Args:
        json_output: One JSON object per line instead of coloured console output
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            add_correlation_id,
            redact_event,
            *_renderers(json_output),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Module logger; pass __name__"""
    return structlog.get_logger(name)


class LogOperation:
    """
    Log the start and outcome of one command

    On success a "<operation> completed" line carries the duration in
    milliseconds. On failure "<operation> failed" is logged at error level
    with the message and the exception propagates unchanged. Context values
    are redacted with redact_context.

    Example:
        >>> with LogOperation(logger, "approve", staged_action_id="staged-0001"):
        ...     ...
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context: Any,
    ):
        self.logger = logger
        self.operation = operation
        self.context = redact_context(context)
        self.start_time = 0.0

    def _elapsed_ms(self) -> float:
        return round((time.perf_counter() - self.start_time) * 1000, 2)

    def __enter__(self) -> "LogOperation":
        self.start_time = time.perf_counter()
        self.logger.info(f"{self.operation} started", operation=self.operation, **self.context)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if exc_type is None:
            self.logger.info(
                f"{self.operation} completed",
                operation=self.operation,
                duration_ms=self._elapsed_ms(),
                **self.context,
            )
            return

        # Tracebacks only outside production
        self.logger.error(
            f"{self.operation} failed",
            operation=self.operation,
            duration_ms=self._elapsed_ms(),
            error=str(exc_val),
            exc_info=not is_production(),
            **self.context,
        )
