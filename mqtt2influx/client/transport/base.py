#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..models import BusMessage


class MessageSource(ABC):
    """
    Base interface for the bus side of the bridge

    Source responsibilities:
      - connect(): open the transport; TransportError if that is impossible
      - subscribe(pattern): "<prefix>/#" style pattern; TransportError on failure
      - next_message(): block until the next message arrives; None when the
        transport reported an error this cycle (already logged)
      - stop(): optional, for cleanup
    """

    @abstractmethod
    def connect(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def subscribe(self, pattern: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def next_message(self) -> Optional[BusMessage]:
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        raise NotImplementedError
