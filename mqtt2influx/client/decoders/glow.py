#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Glow (Hildebrand) IHD/CAD smart meter readings

The device publishes to glow/<device id>/SENSOR/electricitymeter and
glow/<device id>/SENSOR/gasmeter; the payload is wrapped in a single key
naming the meter type:

    {"electricitymeter": {"timestamp": "...", "energy": {...}, "power": {...}}}
    {"gasmeter": {"timestamp": "...", "energy": {"import": {...}}}}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from mqtt2influx.lib.constants import TRACE

from ..models import NormalizedRecord, RouteEntry, Unit
from .base import Decoder
from .payload import get_number, get_path, get_string, get_unit, load_json, parse_rfc3339, unix_seconds

logger = logging.getLogger(__name__)

ELECTRICITY_METER = "electricitymeter"
GAS_METER = "gasmeter"


@dataclass(frozen=True)
class ImportPrice:
    unitrate: float
    standingcharge: float

    @classmethod
    def from_json(cls, obj: Any) -> Optional["ImportPrice"]:
        unitrate = get_number(obj, "unitrate")
        standingcharge = get_number(obj, "standingcharge")
        if unitrate is None or standingcharge is None:
            return None
        return cls(unitrate=unitrate, standingcharge=standingcharge)


@dataclass(frozen=True)
class ElectricityMeterReading:
    """
    Decoded "electricitymeter" object

    Only power, import cumulative and pricing end up in the line; the rest is
    required to accept the payload at all.
    """

    timestamp: int
    export_cumulative: float
    export_units: Unit
    import_cumulative: float
    import_day: float
    import_week: float
    import_month: float
    import_units: Unit
    mpan: str
    supplier: str
    price: ImportPrice
    power: float
    power_units: Unit

    @classmethod
    def from_json(cls, obj: Any) -> Optional["ElectricityMeterReading"]:
        timestamp = parse_rfc3339(get_path(obj, "timestamp"))
        imp = get_path(obj, "energy", "import")
        values = dict(
            export_cumulative=get_number(obj, "energy", "export", "cumulative"),
            export_units=get_unit(obj, "energy", "export", "units"),
            import_cumulative=get_number(imp, "cumulative"),
            import_day=get_number(imp, "day"),
            import_week=get_number(imp, "week"),
            import_month=get_number(imp, "month"),
            import_units=get_unit(imp, "units"),
            mpan=get_string(imp, "mpan"),
            supplier=get_string(imp, "supplier"),
            price=ImportPrice.from_json(get_path(imp, "price")),
            power=get_number(obj, "power", "value"),
            power_units=get_unit(obj, "power", "units"),
        )
        if timestamp is None:
            logger.log(TRACE, "Electricity reading without valid timestamp")
            return None
        missing = [k for k, v in values.items() if v is None]
        if missing:
            logger.log(TRACE, "Electricity reading missing/invalid fields: %r", missing)
            return None
        return cls(timestamp=unix_seconds(timestamp), **values)

    def to_record(self) -> NormalizedRecord:
        return NormalizedRecord(
            measurement="electricity",
            tags={"mpan": self.mpan},
            fields={
                "power": self.power,
                "cumulative": self.import_cumulative,
                "price": self.price.unitrate,
                "standing": self.price.standingcharge,
            },
            timestamp=self.timestamp,
        )


@dataclass(frozen=True)
class GasMeterReading:
    """Decoded "gasmeter" object; energy and volume carry separate units"""

    timestamp: int
    cumulative: float
    day: float
    week: float
    month: float
    units: Unit
    cumulativevol: float
    cumulativevolunits: Unit
    dayvol: float
    weekvol: float
    monthvol: float
    dayweekmonthvolunits: Unit
    mprn: str
    supplier: str
    price: ImportPrice

    @classmethod
    def from_json(cls, obj: Any) -> Optional["GasMeterReading"]:
        timestamp = parse_rfc3339(get_path(obj, "timestamp"))
        imp = get_path(obj, "energy", "import")
        values = dict(
            cumulative=get_number(imp, "cumulative"),
            day=get_number(imp, "day"),
            week=get_number(imp, "week"),
            month=get_number(imp, "month"),
            units=get_unit(imp, "units"),
            cumulativevol=get_number(imp, "cumulativevol"),
            cumulativevolunits=get_unit(imp, "cumulativevolunits"),
            dayvol=get_number(imp, "dayvol"),
            weekvol=get_number(imp, "weekvol"),
            monthvol=get_number(imp, "monthvol"),
            dayweekmonthvolunits=get_unit(imp, "dayweekmonthvolunits"),
            mprn=get_string(imp, "mprn"),
            supplier=get_string(imp, "supplier"),
            price=ImportPrice.from_json(get_path(imp, "price")),
        )
        if timestamp is None:
            logger.log(TRACE, "Gas reading without valid timestamp")
            return None
        missing = [k for k, v in values.items() if v is None]
        if missing:
            logger.log(TRACE, "Gas reading missing/invalid fields: %r", missing)
            return None
        return cls(timestamp=unix_seconds(timestamp), **values)

    def to_record(self) -> NormalizedRecord:
        return NormalizedRecord(
            measurement="gas",
            tags={"mprn": self.mprn},
            fields={
                "cumulative": self.cumulative,
                "cumulativevol": self.cumulativevol,
                "price": self.price.unitrate,
                "standing": self.price.standingcharge,
            },
            timestamp=self.timestamp,
        )


_READINGS = {
    ELECTRICITY_METER: ElectricityMeterReading,
    GAS_METER: GasMeterReading,
}


class GlowDecoder(Decoder):
    """Electricity and gas meter readings from a Glow display"""

    @property
    def family(self) -> str:
        return "glow"

    def decode(
        self,
        segments: Sequence[str],
        payload: bytes,
        entry: RouteEntry,
    ) -> Optional[NormalizedRecord]:
        msg = load_json(payload)
        if not isinstance(msg, dict) or len(msg) != 1:
            logger.log(TRACE, "Error parsing meter reading: expected single-key object")
            return None

        (meter_type, body), = msg.items()
        reading_cls = _READINGS.get(meter_type)
        if reading_cls is None:
            logger.log(TRACE, "Error parsing meter reading: unknown meter type %r", meter_type)
            return None

        reading = reading_cls.from_json(body)
        if reading is None:
            return None
        return reading.to_record()
