#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import random
import string
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, List, Optional
from urllib.parse import parse_qs, urlsplit

import paho.mqtt.client as paho_mqtt

from mqtt2influx.lib.constants import (
    MQTT_CLIENT_ID_PREFIX,
    MQTT_DEFAULT_PORT,
    MQTT_DEFAULT_TLS_PORT,
    MQTT_KEEPALIVE,
    MQTT_LOOP_TIMEOUT,
    TRACE,
)

from ...errors import ConfigurationError, TransportError
from ...models import BusMessage
from ..base import MessageSource

logger = logging.getLogger(__name__)

RECONNECT_DELAY = 2.0


def generate_client_id(prefix: str = MQTT_CLIENT_ID_PREFIX) -> str:
    """
    Generate unique MQTT client ID with random suffix
    """
    suffix = "".join(random.choices(string.ascii_letters + string.digits, k=8))
    return f"{prefix}-{suffix}"


@dataclass(frozen=True)
class MqttConnectionConfig:
    """
    MQTT connection settings for paho-mqtt client
    """

    host: str
    port: int = MQTT_DEFAULT_PORT
    client_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    keepalive: int = MQTT_KEEPALIVE
    qos: int = 0
    tls: bool = False

    @classmethod
    def from_url(cls, url: str) -> "MqttConnectionConfig":
        """
        Parse broker URL

        Examples:
          "mqtt://localhost"                  -> host=localhost port=1883
          "mqtts://user:pw@broker:8884"       -> tls, port 8884, credentials
          "mqtt://broker?client_id=bridge-1"  -> fixed client id
        """
        parts = urlsplit(url)
        if parts.scheme not in ("mqtt", "tcp", "mqtts", "ssl"):
            raise ConfigurationError(f"Config error: unsupported MQTT URL scheme in {url!r}")
        if not parts.hostname:
            raise ConfigurationError(f"Config error: MQTT URL has no host: {url!r}")

        tls = parts.scheme in ("mqtts", "ssl")
        try:
            port = parts.port or (MQTT_DEFAULT_TLS_PORT if tls else MQTT_DEFAULT_PORT)
        except ValueError as e:
            raise ConfigurationError(f"Config error: bad MQTT port in {url!r}") from e

        query = parse_qs(parts.query)
        client_id = query.get("client_id", [None])[0]
        return cls(
            host=parts.hostname,
            port=port,
            client_id=client_id,
            username=parts.username,
            password=parts.password,
            tls=tls,
        )


class MqttAdapter(MessageSource):
    """
    MQTT source using paho-mqtt, driven from the caller's thread

    There is no background network thread: next_message() runs paho's
    loop() until on_message queues something, so one message is fully
    processed before the next one is read.

    Notes:
      - In tests we inject a mocked paho client via `client=...`
      - In production we create the client automatically
    """

    def __init__(
        self,
        *,
        cfg: MqttConnectionConfig,
        client: Optional[Any] = None,
        reconnect_delay: float = RECONNECT_DELAY,
    ) -> None:
        self._cfg = cfg
        self._subs: List[str] = []
        self._pending: Deque[BusMessage] = deque()
        self._reconnect_delay = reconnect_delay

        if client is None:
            self._client = paho_mqtt.Client(
                paho_mqtt.CallbackAPIVersion.VERSION2,
                client_id=cfg.client_id or generate_client_id(),
                clean_session=True,
            )
        else:
            self._client = client

        # Configure auth if provided
        if cfg.username:
            self._client.username_pw_set(cfg.username, cfg.password)
        if cfg.tls:
            self._client.tls_set()

        # Callbacks
        self._client.on_connect = self._on_connect
        self._client.on_message = self._on_message
        self._client.on_disconnect = self._on_disconnect

    def connect(self) -> None:
        logger.info("Connecting to MQTT broker %s:%s", self._cfg.host, self._cfg.port)
        try:
            self._client.connect(self._cfg.host, self._cfg.port, keepalive=self._cfg.keepalive)
        except (OSError, ValueError) as e:
            raise TransportError(f"MQTT connect to {self._cfg.host}:{self._cfg.port} failed: {e!r}") from e

    def subscribe(self, pattern: str) -> None:
        logger.debug("Subscribing to topic %r", pattern)
        result, _mid = self._client.subscribe(pattern, qos=self._cfg.qos)
        if result != paho_mqtt.MQTT_ERR_SUCCESS:
            raise TransportError(f"MQTT subscribe to {pattern!r} failed: {paho_mqtt.error_string(result)}")
        if pattern not in self._subs:
            self._subs.append(pattern)

    def next_message(self) -> Optional[BusMessage]:
        while not self._pending:
            rc = self._client.loop(timeout=MQTT_LOOP_TIMEOUT)
            if rc != paho_mqtt.MQTT_ERR_SUCCESS:
                logger.warning("MQTT connection error: %s", paho_mqtt.error_string(rc))
                self._reconnect()
                return None
        return self._pending.popleft()

    def stop(self) -> None:
        logger.info("Stopping MQTT adapter")
        try:
            self._client.disconnect()
        except Exception:
            logger.exception("MQTT disconnect failed")

    def _reconnect(self) -> None:
        if self._reconnect_delay:
            time.sleep(self._reconnect_delay)
        try:
            self._client.reconnect()
        except OSError as e:
            logger.warning("MQTT reconnect failed: %r", e)

    # ---- paho callbacks ----

    def _on_connect(self, client: Any, userdata: Any, flags: Any, reason_code: Any, properties: Any = None) -> None:
        if getattr(reason_code, "is_failure", False):
            logger.error("MQTT connection refused: %s", reason_code)
            return
        logger.info("MQTT connected: %s", reason_code)
        # Clean session: a reconnect drops every subscription
        for topic in self._subs:
            client.subscribe(topic, qos=self._cfg.qos)

    def _on_disconnect(
        self, client: Any, userdata: Any, flags: Any, reason_code: Any = None, properties: Any = None
    ) -> None:
        logger.warning("MQTT disconnected: %s", reason_code)

    def _on_message(self, client: Any, userdata: Any, msg: Any) -> None:
        logger.log(TRACE, "Got MQTT publish: topic=%r payload=%r", msg.topic, msg.payload)
        self._pending.append(BusMessage(topic=str(msg.topic), payload=bytes(msg.payload)))
