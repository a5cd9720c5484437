"""Logging setup: console plus optional daily-rotated file, with secret redaction."""

import logging
import re
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%SZ"

# Audit trail for login/registration attempts (username and outcome, never the password).
AUDIT_LOGGER_NAME = "app.audit"

_SECRET_PATTERNS = [
    re.compile(r"((?:password|passwd|token|secret|key)\s*[=:]\s*)([^&\s,;]+)", re.IGNORECASE),
    re.compile(r"(Bearer\s+)([A-Za-z0-9\-_.=]+)", re.IGNORECASE),
]


def redact(value: str) -> str:
    """Mask common secret patterns (password=..., Bearer ...) in a log message."""
    for pattern in _SECRET_PATTERNS:
        value = pattern.sub(r"\1***", value)
    return value


class RedactingFilter(logging.Filter):
    """Rewrite each record's rendered message with secrets masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Bad format args; leave the record for Handler.handleError to report.
            return True
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(settings: "Settings") -> None:
    """Install handlers on the root logger. Safe to call more than once."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_secure_users_handler", False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.LOG_FILE:
        handlers.append(
            TimedRotatingFileHandler(
                settings.LOG_FILE,
                when="midnight",
                backupCount=14,
                encoding="utf-8",
                utc=True,
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(RedactingFilter())
        handler._secure_users_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL)
