#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from abc import ABC, abstractmethod


class Sink(ABC):
    """
    Base interface for the time-series side of the bridge

    submit() raises SinkError on any failure; the caller logs it and moves on
    """

    @abstractmethod
    def submit(self, bucket: str, line: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError
