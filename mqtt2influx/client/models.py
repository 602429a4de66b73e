#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from mqtt2influx.lib.constants import TOPIC_WILDCARD_SUFFIX

if TYPE_CHECKING:
    from .decoders.base import Decoder


class Unit(Enum):
    """Measurement units reported by meters (values are the JSON spellings)"""

    KWH = "kWh"
    KW = "kW"
    M3 = "m3"


@dataclass(frozen=True)
class BusMessage:
    """
    Raw message produced by the transport adapter

    NOTE:
      Dispatcher does NOT assume anything about payload format
      It only uses topic to find routes and then asks decoders
      how to interpret payload
    """

    topic: str
    payload: bytes


@dataclass(frozen=True)
class RouteEntry:
    """
    One configured device: topic prefix bound to a decoder.

    Fields:
      - topic_prefix: literal topic prefix, never ends with "/"
      - decoder: decoder instance shared by all routes of the same family
      - bucket: InfluxDB bucket to write to
      - device_name: value of the "name" tag (plug and zigbee routes)
      - measurement: measurement name (zigbee routes)
      - keys: payload keys copied into fields (zigbee routes)

    Example (output):
        RouteEntry(
            topic_prefix="tele/lamp",
            decoder=TasmotaPlugDecoder(),
            bucket="power",
            device_name="Lamp, Desk",
        )
    """

    topic_prefix: str
    decoder: "Decoder"
    bucket: str
    device_name: Optional[str] = None
    measurement: Optional[str] = None
    keys: Tuple[str, ...] = ()

    @property
    def subscription(self) -> str:
        """MQTT subscription pattern, e.g. "tele/lamp/#" """
        return f"{self.topic_prefix}{TOPIC_WILDCARD_SUFFIX}"


@dataclass
class NormalizedRecord:
    """
    Decoder output, one InfluxDB point.

    Example:
        NormalizedRecord(
            measurement="electricity",
            tags={"mpan": "1234567890123"},
            fields={"power": 0.347, "cumulative": 4218.118},
            timestamp=1665504839,
        )
    """

    measurement: str
    tags: Dict[str, str] = field(default_factory=dict)
    fields: Dict[str, float] = field(default_factory=dict)
    timestamp: int = 0


@dataclass(frozen=True)
class Submission:
    """One line ready for InfluxDB"""

    bucket: str
    line: str
