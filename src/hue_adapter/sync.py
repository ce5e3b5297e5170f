"""Pushes local light property changes to the bridge."""

import logging
from typing import Any

from hue_adapter.bridge import Bridge
from hue_adapter.color import hex_to_bridge
from hue_adapter.exceptions import HueAdapterException
from hue_adapter.light import HueLight

logger = logging.getLogger("hue_adapter")


class SyncEngine:
    """Turns property changes into bridge state updates.

    Pushes are fire-and-forget from the caller's point of view: failures are
    logged and the light keeps its new local value.
    """

    def __init__(self, bridge: Bridge):
        self.bridge = bridge

    def build_payload(self, light: HueLight, property_name: str) -> dict[str, Any] | None:
        """Compute the state to send for a change of ``property_name``.

        Returns:
            The payload, or None for a property the bridge does not know

        Raises:
            ValueError: If the light's color is not a hex color
        """
        if property_name == "color":
            return hex_to_bridge(light.color)
        if property_name == "on":
            # We might be turning on after changing the color
            return {"on": light.on, **hex_to_bridge(light.color)}
        return None

    async def on_property_changed(self, light: HueLight, property_name: str) -> None:
        try:
            payload = self.build_payload(light, property_name)
        except ValueError as e:
            logger.error(f"Cannot encode {property_name} of light {light.id}: {e}")
            return

        if payload is None:
            logger.warning(f"Unknown property: {property_name}")
            return

        await self.push(light.light_id, payload)

    async def push(self, light_id: str, payload: dict[str, Any]) -> str | None:
        """Send ``payload`` as the new state of light ``light_id``.

        Returns:
            The bridge reply text, or None if the push failed
        """
        try:
            return await self.bridge.set_light_state(light_id, payload)
        except HueAdapterException as e:
            logger.error(f"Failed to update light {light_id} on bridge {self.bridge.bridge_id}: {e}")
            return None
