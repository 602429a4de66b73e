#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Generic zigbee2mqtt devices

Payload shape is not fixed; the route lists which keys to keep:

    keys = ["temperature", "battery"]
    {"temperature": 21.5, "humidity": 40, "last_seen": "2023-01-01T12:00:00Z"}
      -> environment,name=Office temperature=21.5 1672574400
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import ClassVar, Dict, Optional, Sequence

from mqtt2influx.lib.constants import TRACE

from ..models import NormalizedRecord, RouteEntry
from .base import Decoder
from .payload import as_number, load_json, parse_rfc3339, unix_seconds

logger = logging.getLogger(__name__)


class ZigbeeDecoder(Decoder):
    """Copies configured numeric keys; measurement and name tag come from the route"""

    # zigbee2mqtt publishes device state on the device topic itself
    requires_sensor_topic: ClassVar[bool] = False

    @property
    def family(self) -> str:
        return "zigbee"

    def decode(
        self,
        segments: Sequence[str],
        payload: bytes,
        entry: RouteEntry,
    ) -> Optional[NormalizedRecord]:
        msg = load_json(payload)
        if not isinstance(msg, dict):
            logger.log(TRACE, "Error parsing Zigbee message %r", payload)
            return None

        if "last_seen" in msg:
            seen = parse_rfc3339(msg["last_seen"])
            if seen is None:
                logger.log(TRACE, "Zigbee message with unparsable last_seen %r", msg["last_seen"])
                return None
        else:
            seen = datetime.now(timezone.utc)

        fields: Dict[str, float] = {}
        for key in entry.keys:
            value = as_number(msg.get(key))
            if value is not None:
                fields[key] = value

        if not fields:
            logger.debug("Zigbee message on %r has none of the keys %r", entry.topic_prefix, entry.keys)
            return None

        return NormalizedRecord(
            measurement=entry.measurement or "",
            tags={"name": entry.device_name or ""},
            fields=fields,
            timestamp=unix_seconds(seen),
        )
