#!/usr/bin/env python3
"""
Example showing how a gateway pairs with a Philips Hue bridge and reacts to
its lights. Run it, then press the link button on the bridge.
"""

import asyncio
import logging
import sys

from hue_adapter import AdapterManager, BridgeAdapter, PairingStatus, console, discover_bridges

logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


async def main() -> int:
    console.header("Philips Hue Bridge Setup")

    bridges = await discover_bridges()
    if not bridges:
        console.error("No bridge found on this network.")
        return 1

    bridge = bridges[0]
    manager = AdapterManager()
    manager.on_device_added.append(lambda device: console.info(f"New light: {device.name}"))

    adapter = BridgeAdapter(manager, bridge["id"], bridge["internalipaddress"])
    await adapter.load()

    if not adapter.paired:
        console.warning("Press the link button on your bridge within 30 seconds.")
        adapter.start_pairing(30)
        if await adapter.pairing.wait() is not PairingStatus.SUCCEEDED:
            console.error("Pairing did not complete.")
            return 1

    console.success(f"Connected to bridge at {bridge['internalipaddress']}")

    # blink every light once
    for light in adapter.devices:
        was_on = light.on
        await light.set_property("on", not was_on)
        await asyncio.sleep(1)
        await light.set_property("on", was_on)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
