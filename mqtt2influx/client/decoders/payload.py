#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Best-effort extraction helpers for JSON payloads

Every helper returns None instead of raising when the value is missing
or has an unexpected type, so decoders can bail out with a single check.
"""

from __future__ import annotations

import json
import logging
import math
import re
from datetime import datetime
from typing import Any, Mapping, Optional

from mqtt2influx.lib.constants import TRACE

from ..models import Unit

logger = logging.getLogger(__name__)

# full-date, T/t/space, partial-time with optional fraction, Z/z or +hh:mm offset
_RFC3339_RE = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2}:\d{2})(?:\.(\d+))?(?:[Zz]|([+-]\d{2}:\d{2}))",
    re.ASCII,
)


def _reject_constant(name: str) -> Any:
    # NaN/Infinity are not JSON and not valid line protocol
    raise ValueError(f"Non-finite number {name!r} in payload")


def load_json(payload: bytes) -> Optional[Any]:
    """Parse payload bytes as strict JSON"""
    try:
        return json.loads(payload, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError) as e:
        logger.log(TRACE, "Payload is not valid JSON: %r", e)
        return None


def get_path(obj: Any, *path: str) -> Optional[Any]:
    """
    Walk nested objects by keys. Returns None if any level is missing

    Example:
        get_path({"a": {"b": 1}}, "a", "b") -> 1
        get_path({"a": 1}, "a", "b") -> None
    """
    cur = obj
    for key in path:
        if not isinstance(cur, Mapping) or key not in cur:
            return None
        cur = cur[key]
    return cur


def as_number(value: Any) -> Optional[float]:
    """JSON number -> float; bool, strings and non-finite values -> None"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        # JSON integers are unbounded
        return None
    if not math.isfinite(number):
        return None
    return number


def get_number(obj: Any, *path: str) -> Optional[float]:
    return as_number(get_path(obj, *path))


def get_string(obj: Any, *path: str) -> Optional[str]:
    value = get_path(obj, *path)
    return value if isinstance(value, str) else None


def get_unit(obj: Any, *path: str) -> Optional[Unit]:
    value = get_path(obj, *path)
    if not isinstance(value, str):
        return None
    try:
        return Unit(value)
    except ValueError:
        logger.log(TRACE, "Unknown unit %r", value)
        return None


def parse_rfc3339(value: Any) -> Optional[datetime]:
    """
    Parse an RFC3339 date-time; an explicit UTC offset is required

    Examples:
        parse_rfc3339("2022-10-11T16:13:59Z") -> datetime(..., tzinfo=UTC)
        parse_rfc3339("2022-10-11t16:13:59.5z") -> datetime(..., tzinfo=UTC)
        parse_rfc3339("2022-10-11T16:13:59") -> None (no offset)
        parse_rfc3339("2022-10-11T16:13Z") -> None (no seconds)
    """
    if not isinstance(value, str):
        return None
    m = _RFC3339_RE.fullmatch(value)
    if m is None:
        return None
    date, hms, fraction, offset = m.groups()
    # datetime keeps microseconds only
    micro = f".{fraction[:6].ljust(6, '0')}" if fraction else ""
    try:
        return datetime.fromisoformat(f"{date}T{hms}{micro}{offset or '+00:00'}")
    except ValueError:
        return None


def unix_seconds(value: datetime) -> int:
    return math.floor(value.timestamp())
