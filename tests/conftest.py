#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"
CONFIGS = Path(__file__).parent / "configs"


@pytest.fixture
def electricity_payload() -> bytes:
    return (FIXTURES / "electricitymeter.json").read_bytes()


@pytest.fixture
def gas_payload() -> bytes:
    return (FIXTURES / "gasmeter.json").read_bytes()


@pytest.fixture
def plug_payload() -> bytes:
    return (FIXTURES / "tasmota_plug.json").read_bytes()


@pytest.fixture
def configs_dir() -> Path:
    return CONFIGS
