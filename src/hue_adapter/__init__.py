"""
hue_adapter - Philips Hue bridge adapter for home-automation gateways

Pairs with a bridge through the link button, discovers its lights and keeps
their on/off and color state in sync with the bridge's REST API.

Published under the MIT license

"Hue Personal Wireless Lighting" is a trademark owned by Koninklijke Philips Electronics N.V.
"""

from .exceptions import (
    HueAdapterException,
    MissingCredential,
    PairingError,
    RequestTimeout,
    StorageError,
)
from .color import bridge_to_hex, hex_to_bridge, normalize_hex
from .storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from .credentials import CredentialStore
from .pairing import PairingSession, PairingState, PairingStatus
from .bridge import Bridge, discover_bridges
from .device import Device, Property
from .light import HueLight
from .registry import LightRegistry
from .sync import SyncEngine
from .gateway import AdapterManager
from .adapter import BridgeAdapter
from ._internal.console import console

import logging

logger = logging.getLogger("hue_adapter")


__all__ = [
    "AdapterManager",
    "Bridge",
    "BridgeAdapter",
    "CredentialStore",
    "Device",
    "HueAdapterException",
    "HueLight",
    "JsonFileStorage",
    "KeyValueStorage",
    "LightRegistry",
    "MemoryStorage",
    "MissingCredential",
    "PairingError",
    "PairingSession",
    "PairingState",
    "PairingStatus",
    "Property",
    "RequestTimeout",
    "StorageError",
    "SyncEngine",
    "bridge_to_hex",
    "console",
    "discover_bridges",
    "hex_to_bridge",
    "normalize_hex",
]
