#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from mqtt2influx.client.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedConfig:
    """
    Thin wrapper over loaded TOML/JSON.

    Example (output):
        LoadedConfig(raw={"mqtt": {...}, "influxdb": {...}, "glow": [...]})
    """
    raw: Dict[str, Any]


def load_config(path: str) -> LoadedConfig:
    """
    Load bridge config from disk.

    Input:
      path: path to a ".toml" file; any other suffix is read as JSON.

    Output:
      LoadedConfig with .raw containing parsed dict.

    Example:
      cfg = load_config("/etc/mqtt2influx.toml").raw
      plugs = cfg.get("tasmota_plug", [])
    """
    p = Path(path)
    logger.debug("Reading config file %r", str(p))
    try:
        if p.suffix == ".toml":
            with open(p, "rb") as f:
                data = tomllib.load(f)
        else:
            with open(p, "r", encoding="utf-8") as f:
                data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {str(p)!r}: {e}") from e
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot parse config file {str(p)!r}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {str(p)!r} must contain a table/object at top level")
    return LoadedConfig(raw=data)
