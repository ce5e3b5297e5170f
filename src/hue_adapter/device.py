"""Device and property capabilities the host gateway works with."""

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hue_adapter.adapter import BridgeAdapter

logger = logging.getLogger("hue_adapter")


class Property:
    """A named, typed value on a device with a locally cached value.

    Setting the value updates the cache first and then tells the device, so
    the new value is visible even if the device fails to apply it.
    """

    def __init__(self, device: "Device", name: str, description: dict[str, Any], value: Any = None):
        self.device = device
        self.name = name
        self.description = description
        self._value = value

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}={self._value!r}>"

    @property
    def value(self) -> Any:
        return self._value

    def set_cached_value(self, value: Any) -> None:
        self._value = value

    async def set_value(self, value: Any) -> Any:
        """Set the value and notify the device.

        Returns:
            The updated value
        """
        self.set_cached_value(value)
        await self.device.notify_property_changed(self)
        return self._value

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self._value, **self.description}


class Device:
    """A thing owned by an adapter, exposing a set of properties."""

    type = "thing"

    def __init__(self, adapter: "BridgeAdapter", id: str):
        self.adapter = adapter
        self.id = id
        self.name = ""
        self.properties: dict[str, Property] = {}

    def __repr__(self) -> str:
        return f'<{self.__class__.__module__}.{self.__class__.__name__} id="{self.id}" name="{self.name}">'

    def get_property(self, name: str) -> Any:
        """Return the cached value of property ``name``.

        Raises:
            KeyError: If the device has no such property
        """
        try:
            return self.properties[name].value
        except KeyError:
            raise KeyError(f"Device {self.id} has no property {name}")

    async def set_property(self, name: str, value: Any) -> Any:
        """Set property ``name`` to ``value``.

        Raises:
            KeyError: If the device has no such property
        """
        try:
            prop = self.properties[name]
        except KeyError:
            raise KeyError(f"Device {self.id} has no property {name}")
        return await prop.set_value(value)

    async def notify_property_changed(self, property: Property) -> None:
        logger.debug(f"{self.id}: {property.name} -> {property.value!r}")

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "properties": {name: prop.as_dict() for name, prop in self.properties.items()},
        }
