#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Optional, Sequence

from ..models import NormalizedRecord, RouteEntry


class Decoder(ABC):
    """
    Base interface for payload -> NormalizedRecord conversion per device family

    Notes:
      - decoder is stateless and shared by every route of its family;
        route-specific settings (device name, keys, ...) come from RouteEntry
      - decode() never raises for malformed input, it returns None
      - requires_sensor_topic: Dispatcher only calls decode() when the topic
        remainder has at least two levels and the second one is "SENSOR"
    """

    requires_sensor_topic: ClassVar[bool] = True

    @property
    @abstractmethod
    def family(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def decode(
        self,
        segments: Sequence[str],
        payload: bytes,
        entry: RouteEntry,
    ) -> Optional[NormalizedRecord]:
        """
        Convert raw bus payload into a normalized record

        Input:
          segments: topic remainder after the route prefix, split on "/"
            e.g. prefix "tele/lamp", topic "tele/lamp/SENSOR" -> ("", "SENSOR")
          payload: raw message bytes
          entry: the matched route
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
