#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import time

import pytest

from mqtt2influx.client.decoders.zigbee import ZigbeeDecoder
from mqtt2influx.client.line_protocol import encode_record
from mqtt2influx.client.models import RouteEntry


def _entry(keys=("temperature", "battery")) -> RouteEntry:
    return RouteEntry(
        topic_prefix="zigbee2mqtt/Office sensor",
        decoder=ZigbeeDecoder(),
        bucket="climate",
        device_name="Office",
        measurement="environment",
        keys=tuple(keys),
    )


def test_only_configured_and_present_keys_are_kept():
    payload = json.dumps({"temperature": 21.5, "humidity": 40}).encode()
    record = ZigbeeDecoder().decode(("",), payload, _entry())

    assert record is not None
    # humidity: not configured; battery: not in payload
    assert record.fields == {"temperature": 21.5}
    assert record.measurement == "environment"
    assert record.tags == {"name": "Office"}


def test_missing_last_seen_defaults_to_now():
    before = int(time.time())
    record = ZigbeeDecoder().decode(("",), b'{"temperature": 21.5}', _entry())
    after = int(time.time())

    assert record is not None
    assert before <= record.timestamp <= after


def test_last_seen_is_used_as_timestamp():
    payload = json.dumps({"temperature": 21.5, "battery": 97, "last_seen": "2023-01-01T12:00:00Z"}).encode()
    record = ZigbeeDecoder().decode(("",), payload, _entry())

    assert record is not None
    assert encode_record(record) == "environment,name=Office temperature=21.5,battery=97 1672574400"


def test_unparsable_last_seen_yields_none():
    payload = json.dumps({"temperature": 21.5, "last_seen": 1672574400000}).encode()
    assert ZigbeeDecoder().decode(("",), payload, _entry()) is None


def test_non_numeric_values_are_skipped():
    payload = json.dumps({"temperature": "21.5", "battery": True, "humidity": 40}).encode()
    record = ZigbeeDecoder().decode(("",), payload, _entry(["temperature", "battery", "humidity"]))

    assert record is not None
    assert record.fields == {"humidity": 40.0}


def test_fields_follow_configured_key_order():
    payload = json.dumps({"battery": 90, "temperature": 20.0}).encode()
    record = ZigbeeDecoder().decode(("",), payload, _entry())

    assert record is not None
    assert list(record.fields) == ["temperature", "battery"]


@pytest.mark.parametrize("payload", [b"online", b'{"state": "online"}', b"[1, 2]", b"{}"])
def test_payload_without_configured_keys_yields_none(payload: bytes):
    assert ZigbeeDecoder().decode(("",), payload, _entry()) is None


def test_zigbee_does_not_need_sensor_topic():
    assert ZigbeeDecoder.requires_sensor_topic is False


def test_integer_too_large_for_float_is_skipped():
    huge = "1" + "0" * 400
    payload = f'{{"temperature": {huge}, "battery": 97}}'.encode()
    record = ZigbeeDecoder().decode(("",), payload, _entry())

    assert record is not None
    assert record.fields == {"battery": 97.0}


def test_only_oversized_values_yield_none():
    payload = ('{"temperature": 1' + "0" * 400 + "}").encode()
    assert ZigbeeDecoder().decode(("",), payload, _entry()) is None


@pytest.mark.parametrize("last_seen", ["2023-01-01T12:00:00z", "2023-01-01t12:00:00.000Z", "2023-01-01 12:00:00+00:00"])
def test_rfc3339_variants_are_accepted(last_seen: str):
    payload = json.dumps({"temperature": 21.5, "last_seen": last_seen}).encode()
    record = ZigbeeDecoder().decode(("",), payload, _entry())

    assert record is not None
    assert record.timestamp == 1672574400
