#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence

from mqtt2influx.lib.constants import TOPIC_SEPARATOR

from .decoders import DECODERS, Decoder
from .errors import ConfigurationError
from .models import RouteEntry

logger = logging.getLogger(__name__)

# Measurement names and field keys are written unescaped
_LINE_PROTOCOL_SPECIAL = frozenset(",= \\\t\r\n\"")

# Keys every section entry must carry, on top of "topic" and "bucket"
_REQUIRED_KEYS: Dict[str, Sequence[str]] = {
    "glow": (),
    "tasmota_plug": ("name",),
    "zigbee": ("name", "measurement", "keys"),
}


def _require_str(section: str, item: Mapping[str, Any], key: str) -> str:
    value = item.get(key)
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"Config error: [[{section}]] entry needs a non-empty string {key!r}, got {value!r}")
    return value


def _require_identifier(section: str, topic: str, what: str, value: str) -> str:
    if not value or any(ch in _LINE_PROTOCOL_SPECIAL for ch in value):
        raise ConfigurationError(
            f"Config error: [[{section}]] {topic!r} {what} {value!r} must be non-empty "
            "without spaces, commas, equals signs, quotes or backslashes"
        )
    return value


def _build_entry(section: str, decoder: Decoder, item: Any) -> RouteEntry:
    """
    Validate one config entry and turn it into a RouteEntry

    Input (fragment):
        {"topic": "tele/lamp", "name": "Lamp", "bucket": "power"}

    Output:
        RouteEntry(topic_prefix="tele/lamp", decoder=TasmotaPlugDecoder(), bucket="power", device_name="Lamp")
    """
    if not isinstance(item, Mapping):
        raise ConfigurationError(f"Config error: [[{section}]] entries must be tables, got {item!r}")

    topic = _require_str(section, item, "topic")
    if topic.endswith(TOPIC_SEPARATOR):
        raise ConfigurationError(f"Config error: topic must not end in /: {topic}")
    bucket = _require_str(section, item, "bucket")

    required = _REQUIRED_KEYS[section]
    device_name = _require_str(section, item, "name") if "name" in required else None
    measurement = None
    if "measurement" in required:
        measurement = _require_identifier(section, topic, "measurement", _require_str(section, item, "measurement"))

    keys: List[str] = []
    if "keys" in required:
        raw_keys = item.get("keys")
        if not isinstance(raw_keys, list) or not all(isinstance(k, str) for k in raw_keys):
            raise ConfigurationError(f"Config error: [[{section}]] {topic!r} needs 'keys' as a list of strings")
        keys = [_require_identifier(section, topic, "key", k) for k in raw_keys]

    return RouteEntry(
        topic_prefix=topic,
        decoder=decoder,
        bucket=bucket,
        device_name=device_name,
        measurement=measurement,
        keys=tuple(keys),
    )


@dataclass
class RouteTable:
    """
    Ordered list of topic prefix -> decoder bindings.

    Built once at startup and never modified. Lookup is a plain linear scan
    with str.startswith: there are only a handful of devices per bridge.

    Example usage:

      table = RouteTable.from_config(cfg)
      table.subscriptions          # ["glow/ABCDEF/#", "tele/lamp/#"]
      table.lookup("tele/lamp/SENSOR")
      # [RouteEntry(topic_prefix="tele/lamp", ...)]

    Notes:
      Overlapping prefixes are allowed; every matching entry is returned.
    """

    entries: List[RouteEntry]

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "RouteTable":
        """
        Build RouteTable from the device sections of the config

        Sections are read in a fixed order (glow, tasmota_plug, zigbee),
        entries within a section in file order.

        Raises:
          ConfigurationError on the first invalid entry
        """
        entries: List[RouteEntry] = []
        for section, decoder in DECODERS.items():
            items = cfg.get(section) or []
            if not isinstance(items, list):
                raise ConfigurationError(f"Config error: {section!r} must be a list of tables")
            for item in items:
                entry = _build_entry(section, decoder, item)
                logger.debug("Route %r -> %s (bucket %r)", entry.topic_prefix, section, entry.bucket)
                entries.append(entry)
        return cls(entries=entries)

    @property
    def subscriptions(self) -> List[str]:
        """Transport subscription patterns, de-duplicated, in route order"""
        return list(dict.fromkeys(entry.subscription for entry in self.entries))

    def lookup(self, topic: str) -> List[RouteEntry]:
        """
        Every entry whose prefix is a literal prefix of topic

        Always returns a list (empty list if nothing matches).
        """
        return [entry for entry in self.entries if topic.startswith(entry.topic_prefix)]

    def __len__(self) -> int:
        return len(self.entries)
