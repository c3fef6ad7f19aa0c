"""Centralized logging setup and structured DEBUG helpers.

Every module logs through ``logging.getLogger(__name__)``. Structured fields
travel in ``extra=extra_context(...)`` so that verbose traces stay greppable
without changing the one-line human format on the console.
"""
from __future__ import annotations

import logging
import os
import re
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_PARAMS = {"token", "access_token", "api_key", "apikey", "password", "secret"}
_BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+", re.IGNORECASE)
_REDACTED = "[REDACTED]"


def _level_from_env() -> int:
    """Resolve the effective log level from the environment."""
    if os.environ.get(Constants.ENV_DEBUG) == "1":
        return logging.DEBUG
    name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").upper()
    level = getattr(logging, name, None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Install the console handler on the root logger.

    Safe to call repeatedly; handlers installed by an earlier call are replaced.

    Args:
        level: Explicit level name (e.g. "DEBUG"); wins over the environment.
        log_file: Optional path for an additional timestamped file log.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_remotever", False):
            root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    console._remotever = True  # type: ignore[attr-defined]
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        file_handler._remotever = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    if level:
        resolved = getattr(logging, str(level).upper(), None)
        root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    else:
        root.setLevel(_level_from_env())


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log record.

    None values are dropped so records only carry the fields that were set.
    """
    return {k: v for k, v in fields.items() if v is not None}


def redact(text: Optional[str]) -> Optional[str]:
    """Mask bearer tokens inside free-form text."""
    if text is None:
        return None
    return _BEARER_RE.sub(r"\1" + _REDACTED, text)


def safe_url(url: str) -> str:
    """Return ``url`` with credentials and token-like query values masked."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return _REDACTED
    netloc = parts.netloc
    if "@" in netloc:
        netloc = _REDACTED + "@" + netloc.rsplit("@", 1)[1]
    query = parts.query
    if query:
        pairs = [
            (k, _REDACTED if k.lower() in _SENSITIVE_PARAMS else v)
            for k, v in parse_qsl(query, keep_blank_values=True)
        ]
        query = urlencode(pairs)
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self):
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds, measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 2)
