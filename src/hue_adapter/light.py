"""Light class for Philips Hue lights."""

from typing import TYPE_CHECKING, Any

from hue_adapter.color import bridge_to_hex, normalize_hex
from hue_adapter.device import Device, Property

if TYPE_CHECKING:
    from hue_adapter.adapter import BridgeAdapter

THING_TYPE_ON_OFF_COLOR_LIGHT = "onOffColorLight"


class ColorProperty(Property):
    """String property holding a canonical ``#rrggbb`` color."""

    def set_cached_value(self, value: Any) -> None:
        super().set_cached_value(normalize_hex(value))


def light_unique_id(bridge_id: str, light_id: str) -> str:
    """Globally unique id of a light, stable across restarts."""
    return f"philips-hue-{bridge_id}-{light_id}"


class HueLight(Device):
    """Hue Light object

    Exposes an ``on`` (bool) and a ``color`` (``#rrggbb``) property. Changes
    to either are pushed to the bridge through the adapter's sync engine.
    """

    type = THING_TYPE_ON_OFF_COLOR_LIGHT

    def __init__(self, adapter: "BridgeAdapter", id: str, light_id: str, light: dict[str, Any]):
        """
        Args:
            adapter: The adapter of the bridge this light belongs to
            id: Globally unique identifier, see :func:`light_unique_id`
            light_id: Id of the light expected by the bridge API
            light: The light object as returned by the bridge
        """
        super().__init__(adapter, id)

        self.light_id = light_id
        self.name = light.get("name", "")

        state = light.get("state", {})
        color = bridge_to_hex(state.get("hue", 0), state.get("sat", 0), state.get("bri", 0))

        self.properties["on"] = Property(self, "on", {"type": "boolean"}, bool(state.get("on", False)))
        self.properties["color"] = ColorProperty(self, "color", {"type": "string"}, color)

    @property
    def on(self) -> bool:
        return self.properties["on"].value

    @property
    def color(self) -> str:
        return self.properties["color"].value

    async def notify_property_changed(self, property: Property) -> None:
        """Forward a local change to the bridge."""
        await super().notify_property_changed(property)
        await self.adapter.sync.on_property_changed(self, property.name)
