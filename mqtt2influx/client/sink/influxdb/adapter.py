#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import httpx

from mqtt2influx.lib.constants import INFLUXDB_PRECISION, INFLUXDB_TIMEOUT, INFLUXDB_WRITE_PATH, TRACE

from ...errors import ConfigurationError, SinkError
from ..base import Sink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InfluxDbConfig:
    url: str
    org: str
    token: str
    timeout: float = INFLUXDB_TIMEOUT

    @classmethod
    def from_config(cls, section: Any) -> "InfluxDbConfig":
        """
        Input (fragment):
            {"url": "http://localhost:8086", "org": "home", "token": "..."}
        """
        if not isinstance(section, Mapping):
            raise ConfigurationError("Config error: missing [influxdb] section")
        values: Dict[str, str] = {}
        for key in ("url", "org", "token"):
            value = section.get(key)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"Config error: [influxdb] needs a non-empty string {key!r}")
            values[key] = value
        timeout = section.get("timeout", INFLUXDB_TIMEOUT)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigurationError(f"Config error: [influxdb] timeout must be a positive number, got {timeout!r}")
        return cls(timeout=float(timeout), **values)


class InfluxDbSink(Sink):
    """
    Writes single lines to InfluxDB 2.x /api/v2/write, one request per line

    Request:
      POST <url>/api/v2/write?org=<org>&precision=s&bucket=<bucket>
      Authorization: Token <token>
    """

    def __init__(self, *, cfg: InfluxDbConfig, client: Optional[httpx.Client] = None) -> None:
        self._cfg = cfg
        self._client = client or httpx.Client(timeout=cfg.timeout)
        base_url = cfg.url if cfg.url.endswith("/") else f"{cfg.url}/"
        self._url = f"{base_url}{INFLUXDB_WRITE_PATH}"
        self._headers = {
            "Authorization": f"Token {cfg.token}",
            "Content-Type": "text/plain; charset=utf-8",
            "Accept": "application/json",
        }

    @property
    def url(self) -> str:
        return self._url

    def submit(self, bucket: str, line: str) -> None:
        logger.log(TRACE, "Submitting: %s %s", bucket, line)
        params = {"org": self._cfg.org, "precision": INFLUXDB_PRECISION, "bucket": bucket}
        try:
            response = self._client.post(
                self._url,
                params=params,
                headers=self._headers,
                content=line.encode("utf-8"),
            )
        except httpx.HTTPError as e:
            raise SinkError(f"InfluxDB request failed: {e!r}") from e

        if response.is_error:
            logger.debug("InfluxDB error: %s", response.text)
            raise SinkError(f"InfluxDB returned HTTP {response.status_code} for bucket {bucket!r}")

    def close(self) -> None:
        try:
            self._client.close()
        except Exception:
            logger.exception("InfluxDB client close failed")
