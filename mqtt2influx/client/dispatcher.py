#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from mqtt2influx.lib.constants import SENSOR_MESSAGE_TYPE, TOPIC_SEPARATOR, TRACE

from .line_protocol import encode_record
from .models import BusMessage, RouteEntry, Submission
from .route_table import RouteTable

logger = logging.getLogger(__name__)


@dataclass
class Dispatcher:
    """
    Turns one bus message into zero or more InfluxDB submissions

    For every route whose prefix matches the topic:
      - strip the prefix and split the rest on "/"
      - for sensor-shaped decoders (Glow, Tasmota) skip anything that is not
        <prefix><level>/SENSOR[/...], e.g. LWT or STATE topics
      - decode payload via the route decoder
      - encode the record as line protocol, keeping the route bucket

    Notes:
      - Dispatcher does NOT talk to InfluxDB; caller forwards submissions
      - a route that fails to decode never prevents the other routes from
        being processed
    """

    table: RouteTable

    def dispatch(self, msg: BusMessage) -> List[Submission]:
        routes = self.table.lookup(msg.topic)
        if not routes:
            logger.debug("No route for topic %r", msg.topic)
            return []

        submissions: List[Submission] = []
        for entry in routes:
            submission = self._dispatch_one(entry, msg)
            if submission is not None:
                submissions.append(submission)
        return submissions

    def _dispatch_one(self, entry: RouteEntry, msg: BusMessage) -> Submission | None:
        remainder = msg.topic[len(entry.topic_prefix):]
        segments = remainder.split(TOPIC_SEPARATOR)

        if entry.decoder.requires_sensor_topic:
            n = len(segments)
            if n < 2:
                logger.log(TRACE, "Ignoring message with less than %d<2 topic levels: %r", n, msg.topic)
                return None
            message_type = segments[1]
            if message_type != SENSOR_MESSAGE_TYPE:
                logger.log(TRACE, "Ignoring message of type %r on %r", message_type, msg.topic)
                return None

        record = entry.decoder.decode(segments, msg.payload, entry)
        if record is None:
            logger.log(TRACE, "No %s reading in message on %r", entry.decoder.family, msg.topic)
            return None

        return Submission(bucket=entry.bucket, line=encode_record(record))
