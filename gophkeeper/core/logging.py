"""GophKeeper logging configuration.

Every handler installed by setup_logging() carries a RedactingFilter, so
bearer tokens, JWTs and credential-like key/value pairs never reach a log
line even when a caller formats them into a message by mistake.
"""

import json
import logging
import re
import sys
from typing import Literal

# Human-readable format for development
DEV_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

REDACTED = "[REDACTED]"

# Keys whose values are masked wherever they appear as key=value or "key": value
SENSITIVE_KEYS = (
    "authorization",
    "access_token",
    "refresh_token",
    "password",
    "jwt_secret",
    "crypto_key",
)

_BEARER = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9\-._~+/]+=*")
_JWT = re.compile(r"\beyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*")
_KEY_VALUE = re.compile(
    r"(?i)([\"']?\b(?:" + "|".join(SENSITIVE_KEYS) + r")[\"']?\s*[:=]\s*)"
    r"(?:bearer\s+)?(?:\"[^\"]*\"|'[^']*'|[^\s,;}&]+)"
)


def redact(message: str) -> str:
    """Mask token and credential values in a log message."""
    message = _BEARER.sub(f"Bearer {REDACTED}", message)
    message = _JWT.sub(REDACTED, message)
    return _KEY_VALUE.sub(rf"\g<1>{REDACTED}", message)


class RedactingFilter(logging.Filter):
    """Rewrites each record's message through redact() before it is emitted."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Bad format args are reported by Handler.handleError during emit
            return True
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, fields escaped with json.dumps()."""

    def __init__(self):
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = redact(self.formatException(record.exc_info))
        return json.dumps(log_entry, default=str)


def setup_logging(
    level: str = "INFO",
    format_type: Literal["structured", "dev"] = "dev",
) -> None:
    """
    Configure root logging for the server or the CLI.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'structured' for JSON lines, 'dev' for readable output
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"unknown log level: {level}")

    if format_type == "structured":
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logging.root.handlers = [handler]
        logging.root.setLevel(numeric_level)
    else:
        logging.basicConfig(
            level=numeric_level,
            format=DEV_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
            stream=sys.stdout,
            force=True,
        )

    for handler in logging.root.handlers:
        handler.addFilter(RedactingFilter())

    # uvicorn access logs duplicate what the handlers already log
    for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    # SQL echo would print bound parameters, ciphertext included
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if numeric_level == logging.DEBUG else logging.WARNING
    )

    logging.getLogger("gophkeeper").info(
        f"Logging configured: level={level}, format={format_type}"
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the gophkeeper namespace."""
    return logging.getLogger(f"gophkeeper.{name}")
