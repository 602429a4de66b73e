#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import pytest

from mqtt2influx.client.decoders import GlowDecoder, TasmotaPlugDecoder, ZigbeeDecoder
from mqtt2influx.client.errors import ConfigurationError
from mqtt2influx.client.route_table import RouteTable


def _build_min_config() -> dict:
    """
    One device of every family, plus a second plug whose prefix overlaps
    the first one
    """
    return {
        "glow": [{"topic": "glow/ABC", "bucket": "energy"}],
        "tasmota_plug": [
            {"topic": "tele/lamp", "name": "Lamp", "bucket": "power"},
            {"topic": "tele/lamp-2", "name": "Lamp 2", "bucket": "power"},
        ],
        "zigbee": [
            {
                "topic": "zigbee2mqtt/Office",
                "name": "Office",
                "bucket": "climate",
                "measurement": "environment",
                "keys": ["temperature"],
            }
        ],
    }


def test_from_config_builds_entries_in_section_order():
    table = RouteTable.from_config(_build_min_config())

    assert [e.topic_prefix for e in table.entries] == ["glow/ABC", "tele/lamp", "tele/lamp-2", "zigbee2mqtt/Office"]
    assert isinstance(table.entries[0].decoder, GlowDecoder)
    assert isinstance(table.entries[1].decoder, TasmotaPlugDecoder)
    assert isinstance(table.entries[3].decoder, ZigbeeDecoder)
    assert table.entries[1].device_name == "Lamp"
    assert table.entries[3].measurement == "environment"
    assert table.entries[3].keys == ("temperature",)


def test_subscriptions_append_wildcard():
    table = RouteTable.from_config(_build_min_config())
    assert table.subscriptions == ["glow/ABC/#", "tele/lamp/#", "tele/lamp-2/#", "zigbee2mqtt/Office/#"]


def test_duplicate_prefixes_subscribe_once():
    cfg = {
        "tasmota_plug": [
            {"topic": "tele/lamp", "name": "Lamp", "bucket": "power"},
            {"topic": "tele/lamp", "name": "Lamp", "bucket": "power-archive"},
        ]
    }
    table = RouteTable.from_config(cfg)
    assert len(table) == 2
    assert table.subscriptions == ["tele/lamp/#"]


def test_lookup_is_plain_string_prefix_and_returns_all_matches():
    table = RouteTable.from_config(_build_min_config())

    matches = table.lookup("tele/lamp-2/SENSOR")
    assert [e.topic_prefix for e in matches] == ["tele/lamp", "tele/lamp-2"]

    assert [e.topic_prefix for e in table.lookup("tele/lamp/SENSOR")] == ["tele/lamp"]
    assert table.lookup("tele/kettle/SENSOR") == []
    # No wildcard semantics: "+" in a topic is just a character
    assert table.lookup("tele/+/SENSOR") == []


@pytest.mark.parametrize("section", ["glow", "tasmota_plug", "zigbee"])
def test_topic_with_trailing_slash_is_rejected(section: str):
    cfg = _build_min_config()
    cfg[section][0]["topic"] = "some/prefix/"

    with pytest.raises(ConfigurationError, match="topic must not end in /: some/prefix/$"):
        RouteTable.from_config(cfg)


@pytest.mark.parametrize(
    "section,key",
    [
        ("glow", "bucket"),
        ("tasmota_plug", "name"),
        ("zigbee", "measurement"),
        ("zigbee", "topic"),
    ],
)
def test_missing_required_key_is_rejected(section: str, key: str):
    cfg = _build_min_config()
    del cfg[section][0][key]

    with pytest.raises(ConfigurationError, match=repr(key)):
        RouteTable.from_config(cfg)


def test_zigbee_keys_must_be_list_of_strings():
    cfg = _build_min_config()
    cfg["zigbee"][0]["keys"] = "temperature"

    with pytest.raises(ConfigurationError, match="list of strings"):
        RouteTable.from_config(cfg)


def test_section_must_be_a_list():
    with pytest.raises(ConfigurationError, match="must be a list"):
        RouteTable.from_config({"glow": {"topic": "glow/ABC", "bucket": "energy"}})


def test_empty_config_gives_empty_table():
    table = RouteTable.from_config({})
    assert len(table) == 0
    assert table.subscriptions == []


@pytest.mark.parametrize(
    "field,value",
    [
        ("measurement", "office climate"),
        ("measurement", "env,room=1"),
        ("keys", ["temperature", "air quality"]),
        ("keys", ["a=b"]),
        ("keys", [""]),
    ],
)
def test_zigbee_measurement_and_keys_must_be_line_protocol_safe(field: str, value):
    cfg = _build_min_config()
    cfg["zigbee"][0][field] = value

    with pytest.raises(ConfigurationError, match="zigbee2mqtt/Office"):
        RouteTable.from_config(cfg)
