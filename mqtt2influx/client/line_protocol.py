#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
InfluxDB line protocol rendering

Format:
  measurement,tag1=v1,tag2=v2 field1=v1,field2=v2 timestamp

Example:
  >>> encode_record(NormalizedRecord("tasmota_plug", {"name": "Lamp, Desk"}, {"power": 12.0}, 1700000000))
  'tasmota_plug,name=Lamp\\,\\ Desk power=12 1700000000'
"""

from __future__ import annotations

from decimal import Decimal

from .models import NormalizedRecord

# Order matters: each character is escaped in turn on the raw value
_TAG_VALUE_ESCAPES = ((",", "\\,"), ("=", "\\="), (" ", "\\ "))


def escape_tag_value(value: str) -> str:
    """
    Escape comma, equals sign and space with a backslash

    Examples:
        escape_tag_value("Lamp, Desk") -> "Lamp\\,\\ Desk"
        escape_tag_value("a=b") -> "a\\=b"
    """
    for char, escaped in _TAG_VALUE_ESCAPES:
        value = value.replace(char, escaped)
    return value


def format_field_value(value: float) -> str:
    """
    Render a float as plain decimal text

    Uses the shortest representation that round-trips, never switches to
    scientific notation, and drops a zero fractional part.

    Examples:
        format_field_value(0.347) -> "0.347"
        format_field_value(230.0) -> "230"
        format_field_value(1e-07) -> "0.0000001"
        format_field_value(1e+20) -> "100000000000000000000"
    """
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def encode_record(record: NormalizedRecord) -> str:
    """Render a record as a single line, without trailing newline"""
    head = record.measurement
    for key, value in record.tags.items():
        head += f",{key}={escape_tag_value(value)}"
    fields = ",".join(f"{key}={format_field_value(value)}" for key, value in record.fields.items())
    return f"{head} {fields} {record.timestamp}"
