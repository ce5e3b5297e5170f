"""Minimal host gateway: keeps track of adapters and the devices they add."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hue_adapter.adapter import BridgeAdapter
    from hue_adapter.device import Device

logger = logging.getLogger("hue_adapter")


class AdapterManager:
    """Registry of adapters and devices.

    ``on_device_added`` callbacks are invoked synchronously for every new
    device, which is how a host hooks into discovery.
    """

    def __init__(self) -> None:
        self.adapters: dict[str, "BridgeAdapter"] = {}
        self.devices_by_id: dict[str, "Device"] = {}
        self.on_device_added: list[Callable[["Device"], None]] = []

    def add_adapter(self, adapter: "BridgeAdapter") -> None:
        if adapter.id in self.adapters:
            logger.warning(f"Adapter {adapter.id} already registered, replacing it")
        self.adapters[adapter.id] = adapter
        logger.info(f"Adapter added: {adapter.id}")

    def handle_device_added(self, device: "Device") -> None:
        self.devices_by_id[device.id] = device
        logger.info(f"Device added: {device.id} ({device.name})")
        for callback in self.on_device_added:
            callback(device)

    def get_device(self, device_id: str) -> "Device | None":
        return self.devices_by_id.get(device_id)

    @property
    def devices(self) -> list["Device"]:
        return list(self.devices_by_id.values())
