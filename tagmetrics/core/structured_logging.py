"""Helpers for consistent structured logging across the project.

Entries are compact JSON objects with a fixed ``event`` field. Tag sets,
enums and other values that are not JSON-native are rendered through
``_to_json``.
"""
from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Mapping


def _to_json(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return str(value)


def _serialize(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, default=_to_json, separators=(",", ":"))


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit ``{"event": event, **fields}`` when ``level`` is enabled."""
    if not logger.isEnabledFor(level):
        return
    logger.log(level, _serialize({"event": event, **fields}))


def log_debug(logger: logging.Logger, event: str, **fields: Any) -> None:
    log_event(logger, logging.DEBUG, event, **fields)


def log_info(logger: logging.Logger, event: str, **fields: Any) -> None:
    log_event(logger, logging.INFO, event, **fields)


def log_error(logger: logging.Logger, event: str, **fields: Any) -> None:
    log_event(logger, logging.ERROR, event, **fields)
