#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import pytest

from mqtt2influx.client.line_protocol import encode_record, escape_tag_value, format_field_value
from mqtt2influx.client.models import NormalizedRecord


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Lamp", "Lamp"),
        ("Lamp, Desk", "Lamp\\,\\ Desk"),
        ("a=b", "a\\=b"),
        ("x, y=z", "x\\,\\ y\\=z"),
        ("Küche-1_(2)", "Küche-1_(2)"),
    ],
)
def test_escape_tag_value(raw: str, expected: str):
    assert escape_tag_value(raw) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (0.347, "0.347"),
        (4218.118, "4218.118"),
        (230.0, "230"),
        (40, "40"),
        (0.0, "0"),
        (-0.0, "0"),
        (-1.5, "-1.5"),
        (1e-07, "0.0000001"),
        (1e20, "100000000000000000000"),
        (0.1 + 0.2, "0.30000000000000004"),
    ],
)
def test_format_field_value_is_plain_decimal(value: float, expected: str):
    assert format_field_value(value) == expected


def test_encode_record_layout():
    record = NormalizedRecord(
        measurement="electricity",
        tags={"mpan": "1234567890123"},
        fields={"power": 0.347, "cumulative": 4218.118, "price": 0.3412, "standing": 0.4692},
        timestamp=1665504839,
    )
    line = encode_record(record)
    assert line == (
        "electricity,mpan=1234567890123 "
        "power=0.347,cumulative=4218.118,price=0.3412,standing=0.4692 "
        "1665504839"
    )
    assert not line.endswith("\n")


def test_encode_record_is_idempotent():
    record = NormalizedRecord(
        measurement="environment",
        tags={"name": "Office, 1st floor"},
        fields={"temperature": 21.5, "humidity": 40.0},
        timestamp=1672574400,
    )
    assert encode_record(record) == encode_record(record)
    assert encode_record(record) == "environment,name=Office\\,\\ 1st\\ floor temperature=21.5,humidity=40 1672574400"


def test_encode_record_keeps_field_order():
    record = NormalizedRecord(measurement="m", tags={"name": "n"}, fields={"b": 2.0, "a": 1.0}, timestamp=1)
    assert encode_record(record) == "m,name=n b=2,a=1 1"
