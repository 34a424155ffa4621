"""
Structured logging helpers for the search scraping pipeline.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

MAX_FIELD_LENGTH = 300


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.

    Long string values (response snippets, exception text) are cut to
    ``MAX_FIELD_LENGTH`` characters so a CAPTCHA page never floods the log.
    """

    if not logger.isEnabledFor(level):
        return

    payload: dict[str, Any] = {
        "event": event,
        "logged_at": datetime.now(timezone.utc).isoformat(),
    }
    for key, value in fields.items():
        payload[key] = _truncate(value)
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))


def _truncate(value: Any) -> Any:
    if isinstance(value, str) and len(value) > MAX_FIELD_LENGTH:
        return value[:MAX_FIELD_LENGTH] + "..."
    return value
