#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Payload decoders

One decoder per device family; the key is the config section name:

  - glow          (Glow IHD/CAD electricity and gas meters)
  - tasmota_plug  (Tasmota smart plugs, tele/<device>/SENSOR)
  - zigbee        (any zigbee2mqtt device, caller-selected keys)
"""

from typing import Dict

from .base import Decoder
from .glow import GlowDecoder
from .tasmota_plug import TasmotaPlugDecoder
from .zigbee import ZigbeeDecoder

DECODERS: Dict[str, Decoder] = {
    "glow": GlowDecoder(),
    "tasmota_plug": TasmotaPlugDecoder(),
    "zigbee": ZigbeeDecoder(),
}

__all__ = ["DECODERS", "Decoder", "GlowDecoder", "TasmotaPlugDecoder", "ZigbeeDecoder"]
