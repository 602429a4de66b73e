#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from mqtt2influx.lib.constants import TRACE

from ..models import NormalizedRecord, RouteEntry
from .base import Decoder
from .payload import get_number, get_path, get_string, load_json, parse_rfc3339, unix_seconds

logger = logging.getLogger(__name__)

# Tasmota ENERGY object keys -> reading attribute
_ENERGY_KEYS = {
    "Total": "total",
    "Yesterday": "yesterday",
    "Today": "today",
    "Power": "power",
    "ApparentPower": "apparent_power",
    "ReactivePower": "reactive_power",
    "Factor": "factor",
    "Voltage": "voltage",
    "Current": "current",
}


@dataclass(frozen=True)
class TasmotaPlugReading:
    """
    tele/<device>/SENSOR payload of a Tasmota plug with energy monitoring

    Example (input JSON):
        {
          "Time": "2023-01-01T12:00:00+00:00",
          "ENERGY": {
            "TotalStartTime": "2022-03-01T10:00:00", "Total": 12.345,
            "Yesterday": 0.5, "Today": 0.25, "Power": 40, "ApparentPower": 45,
            "ReactivePower": 20, "Factor": 0.89, "Voltage": 231, "Current": 0.19
          }
        }
    """

    timestamp: int
    total_start_time: str
    total: float
    yesterday: float
    today: float
    power: float
    apparent_power: float
    reactive_power: float
    factor: float
    voltage: float
    current: float

    @classmethod
    def from_json(cls, obj: Any) -> Optional["TasmotaPlugReading"]:
        timestamp = parse_rfc3339(get_path(obj, "Time"))
        if timestamp is None:
            logger.log(TRACE, "Plug reading without valid Time")
            return None

        energy = get_path(obj, "ENERGY")
        total_start_time = get_string(energy, "TotalStartTime")
        values = {attr: get_number(energy, key) for key, attr in _ENERGY_KEYS.items()}
        missing = [k for k, v in values.items() if v is None]
        if total_start_time is None or missing:
            logger.log(TRACE, "Plug reading missing/invalid ENERGY fields: %r", missing or ["TotalStartTime"])
            return None
        return cls(timestamp=unix_seconds(timestamp), total_start_time=total_start_time, **values)

    def to_record(self, name: str) -> NormalizedRecord:
        return NormalizedRecord(
            measurement="tasmota_plug",
            tags={"name": name},
            fields={
                "power": self.power,
                "cumulative": self.total,
                "today": self.today,
                "voltage": self.voltage,
            },
            timestamp=self.timestamp,
        )


class TasmotaPlugDecoder(Decoder):
    """Energy telemetry from Tasmota plugs, tagged by configured device name"""

    @property
    def family(self) -> str:
        return "tasmota_plug"

    def decode(
        self,
        segments: Sequence[str],
        payload: bytes,
        entry: RouteEntry,
    ) -> Optional[NormalizedRecord]:
        reading = TasmotaPlugReading.from_json(load_json(payload))
        if reading is None:
            return None
        return reading.to_record(entry.device_name or "")
