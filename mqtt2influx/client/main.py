#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from typing import Any, Mapping

from .dispatcher import Dispatcher
from .errors import ConfigurationError, SinkError
from .route_table import RouteTable
from .sink.base import Sink
from .sink.influxdb.adapter import InfluxDbConfig, InfluxDbSink
from .transport.base import MessageSource
from .transport.mqtt.adapter import MqttAdapter, MqttConnectionConfig

logger = logging.getLogger(__name__)


class Bridge:
    """
    MQTT -> InfluxDB poll loop

    One message at a time: read, dispatch, forward every submission, repeat.
    Only startup (config, connect, subscribe) can fail fatally; afterwards
    sink and transport errors are logged and the loop carries on.
    """

    def __init__(self, *, source: MessageSource, table: RouteTable, sink: Sink) -> None:
        self.source = source
        self.table = table
        self.dispatcher = Dispatcher(table=table)
        self.sink = sink

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "Bridge":
        """
        Build all components from the loaded config, without connecting

        Raises:
          ConfigurationError for a missing/invalid section or route
        """
        table = RouteTable.from_config(cfg)
        if not len(table):
            logger.warning("No devices configured - nothing will be forwarded")

        mqtt_section = cfg.get("mqtt")
        if not isinstance(mqtt_section, Mapping) or not isinstance(mqtt_section.get("url"), str):
            raise ConfigurationError("Config error: [mqtt] section needs a 'url' string")
        source = MqttAdapter(cfg=MqttConnectionConfig.from_url(mqtt_section["url"]))

        sink = InfluxDbSink(cfg=InfluxDbConfig.from_config(cfg.get("influxdb")))
        return cls(source=source, table=table, sink=sink)

    def start(self) -> None:
        """Connect and subscribe to every route; TransportError is fatal here"""
        self.source.connect()
        for pattern in self.table.subscriptions:
            self.source.subscribe(pattern)
        logger.info("Bridge started: %d routes, %d subscriptions", len(self.table), len(self.table.subscriptions))

    def poll(self) -> int:
        """
        Handle at most one message

        Returns:
          number of lines written to the sink
        """
        msg = self.source.next_message()
        if msg is None:
            return 0

        written = 0
        for submission in self.dispatcher.dispatch(msg):
            try:
                self.sink.submit(submission.bucket, submission.line)
            except SinkError as e:
                logger.warning("Error processing message on %r: %s", msg.topic, e)
                continue
            written += 1
        return written

    def run_forever(self) -> None:
        while True:
            try:
                self.poll()
            except Exception:
                logger.exception("Unexpected error while handling message, continuing")

    def stop(self) -> None:
        self.source.stop()
        self.sink.close()
