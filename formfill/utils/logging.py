"""Personal-data-safe logging utilities.

Applicants type their names, phone numbers and email addresses into the
form and upload photos that travel as base64 data URLs. This module wraps
the standard logger so that none of that ends up in log output.
"""

import logging
import re
import sys
from typing import Any

from formfill.config import get_settings

# Patterns that may contain personal data - these will be redacted
PII_PATTERNS = [
    # Inline images (photo/signature drafts)
    (r"data:image/[a-z+.-]+;base64,[A-Za-z0-9+/=]+", "[REDACTED-IMAGE]"),
    # Email addresses
    (r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b", "[REDACTED-EMAIL]"),
    # Bangladeshi mobile numbers, with or without country code
    (r"(?:\+?88)?01[3-9]\d{8}\b", "[REDACTED-PHONE]"),
    # Generic phone numbers
    (r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b", "[REDACTED-PHONE]"),
]


class PIISafeFormatter(logging.Formatter):
    """Formatter that redacts personal data from log messages."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        redact_pii: bool = True,
    ):
        super().__init__(fmt, datefmt)
        self.redact_pii = redact_pii
        self._compiled_patterns = [(re.compile(p, re.IGNORECASE), r) for p, r in PII_PATTERNS]

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, redacting personal data if enabled."""
        message = super().format(record)

        if self.redact_pii:
            message = self.redact(message)

        return message

    def redact(self, text: str) -> str:
        """Redact personal data patterns from text."""
        for pattern, replacement in self._compiled_patterns:
            text = pattern.sub(replacement, text)
        return text


class PIISafeLogger:
    """Logger wrapper that keeps applicant data out of the logs.

    Usage:
        logger = get_logger(__name__)
        logger.info("Filled form", drawn_fields=12)
        logger.warning("Could not render field", field="name_bn", error=str(e))

    Safety:
        - Never log field values, only field ids
        - Never log image bytes or data URLs
    """

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)
        self._setup_handler()

    def _setup_handler(self) -> None:
        """Set up the log handler with redacting formatter."""
        if not self._logger.handlers:
            settings = get_settings()

            handler = logging.StreamHandler(sys.stdout)
            handler.setLevel(settings.log_level)

            if settings.is_production:
                fmt = '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
            else:
                fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

            handler.setFormatter(PIISafeFormatter(fmt, redact_pii=True))
            self._logger.addHandler(handler)
            self._logger.setLevel(settings.log_level)

    def _format_kwargs(self, kwargs: dict[str, Any]) -> str:
        if not kwargs:
            return ""
        return " | " + " ".join(f"{k}={v}" for k, v in kwargs.items())

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._logger.debug(f"{message}{self._format_kwargs(kwargs)}")

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._logger.info(f"{message}{self._format_kwargs(kwargs)}")

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._logger.warning(f"{message}{self._format_kwargs(kwargs)}")

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self._logger.error(f"{message}{self._format_kwargs(kwargs)}")

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._logger.exception(f"{message}{self._format_kwargs(kwargs)}")


def get_logger(name: str) -> PIISafeLogger:
    """Get a redacting logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        PIISafeLogger instance
    """
    return PIISafeLogger(name)
