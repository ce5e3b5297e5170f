"""Tracks the lights of one bridge, one HueLight per bridge-local light id."""

import logging
from collections.abc import Callable, Iterator
from typing import Any

from hue_adapter.bridge import Bridge
from hue_adapter.light import HueLight

logger = logging.getLogger("hue_adapter")

LightFactory = Callable[[str, dict[str, Any]], HueLight]


def _light_id_key(light_id: str) -> tuple[int, str]:
    # bridge ids are numeric strings, order "2" before "10"
    return (int(light_id), light_id) if light_id.isdigit() else (0, light_id)


class LightRegistry:
    """Lights discovered on a bridge.

    Lights are created once and never refreshed or removed: a later discovery
    only adds ids that are new.

    Args:
        bridge: The bridge to query
        light_factory: Builds a light from its bridge-local id and API object
    """

    def __init__(self, bridge: Bridge, light_factory: LightFactory):
        self.bridge = bridge
        self.light_factory = light_factory
        self.lights_by_id: dict[str, HueLight] = {}

    def __len__(self) -> int:
        return len(self.lights_by_id)

    def __contains__(self, light_id: object) -> bool:
        return light_id in self.lights_by_id

    def __iter__(self) -> Iterator[HueLight]:
        return iter(self.lights)

    def get(self, light_id: str) -> HueLight | None:
        return self.lights_by_id.get(str(light_id))

    @property
    def lights(self) -> list[HueLight]:
        """Tracked lights in light id order."""
        return [self.lights_by_id[i] for i in sorted(self.lights_by_id, key=_light_id_key)]

    async def discover(self) -> list[HueLight]:
        """Fetch the bridge's lights and add the ones not tracked yet.

        Returns:
            The lights created by this call, in light id order

        Raises:
            MissingCredential: If the bridge has not granted a username yet
            HueAdapterException: If the bridge could not be queried
        """
        lights = await self.bridge.get_lights()

        # TODO: drop lights the bridge no longer reports
        added: list[HueLight] = []
        for light_id in sorted(lights, key=_light_id_key):
            if light_id in self.lights_by_id:
                continue
            light = self.light_factory(light_id, lights[light_id])
            self.lights_by_id[light_id] = light
            added.append(light)
            logger.info(f"Discovered light {light_id} ({light.name}) on bridge {self.bridge.bridge_id}")

        logger.debug(
            f"Discovery on bridge {self.bridge.bridge_id}: {len(lights)} reported, {len(added)} new"
        )
        return added
