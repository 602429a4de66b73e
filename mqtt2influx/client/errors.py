#!/usr/bin/env python3
# -*- coding: utf-8 -*-


class Mqtt2InfluxError(Exception):
    """Base class for all bridge errors"""


class ConfigurationError(Mqtt2InfluxError):
    """Invalid configuration; the bridge must not start"""


class TransportError(Mqtt2InfluxError):
    """MQTT connect or subscribe failure"""


class SinkError(Mqtt2InfluxError):
    """InfluxDB write failure (network error or non-success status)"""
