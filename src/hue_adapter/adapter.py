"""Philips Hue bridge adapter, the unit a gateway creates per discovered bridge."""

import asyncio
import logging
from typing import Any

from hue_adapter.bridge import DEFAULT_TIMEOUT, Bridge
from hue_adapter.credentials import CredentialStore
from hue_adapter.exceptions import HueAdapterException, MissingCredential
from hue_adapter.gateway import AdapterManager
from hue_adapter.light import HueLight, light_unique_id
from hue_adapter.pairing import (
    DEFAULT_PAIRING_TIMEOUT,
    PAIRING_RETRY_DELAY,
    PairingSession,
    PairingStatus,
)
from hue_adapter.registry import LightRegistry
from hue_adapter.storage import JsonFileStorage, KeyValueStorage
from hue_adapter.sync import SyncEngine

logger = logging.getLogger("hue_adapter")

ADAPTER_NAME = "philips-hue"


class BridgeAdapter:
    """Philips Hue Bridge Adapter

    Instantiates one HueLight per light and handles the username acquisition
    (pairing) process. Nothing here raises into the host: failures are logged
    and the adapter stays ready for the next pairing attempt or property change.

        >>> adapter = BridgeAdapter(manager, "001788fffe123456", "192.168.1.100")
        >>> await adapter.load()
        >>> adapter.start_pairing(30)
    """

    def __init__(
        self,
        manager: AdapterManager,
        bridge_id: str,
        ip: str,
        storage: KeyValueStorage | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_delay: float = PAIRING_RETRY_DELAY,
    ):
        """Initialization function.

        Args:
            manager: Host gateway the adapter and its lights register with
            bridge_id: Stable identifier of the bridge
            ip: IP address of the bridge
            storage: Where usernames are persisted (default: JSON file in the home directory)
            timeout: Request timeout in seconds
            retry_delay: Seconds between pairing attempts
        """
        self.manager = manager
        self.id = f"{ADAPTER_NAME}-{bridge_id}"
        self.name = ADAPTER_NAME

        self.bridge = Bridge(bridge_id, ip, timeout=timeout)
        self.credentials = CredentialStore(storage if storage is not None else JsonFileStorage())
        self.sync = SyncEngine(self.bridge)
        self.registry = LightRegistry(self.bridge, self._create_light)
        self.pairing = PairingSession(
            self.bridge,
            self._on_paired,
            retry_delay=retry_delay,
            stored_username=self._stored_username,
        )

        manager.add_adapter(self)

    def __repr__(self) -> str:
        return f'<{self.__class__.__module__}.{self.__class__.__name__} id="{self.id}">'

    @property
    def bridge_id(self) -> str:
        return self.bridge.bridge_id

    @property
    def devices(self) -> list[HueLight]:
        return self.registry.lights

    @property
    def paired(self) -> bool:
        return bool(self.bridge.username)

    def get_device(self, device_id: str) -> HueLight | None:
        for light in self.registry:
            if light.id == device_id:
                return light
        return None

    async def load(self) -> None:
        """Pick up a stored username and discover lights with it.

        Without a stored username the adapter stays idle until pairing.
        """
        try:
            username = await self.credentials.get(self.bridge_id)
        except HueAdapterException as e:
            logger.error(f"Could not read stored usernames: {e}")
            return

        if username is None:
            logger.info(f"Bridge {self.bridge_id} is not paired yet")
            return

        self.bridge.username = username
        await self.discover_lights()

    def start_pairing(self, timeout_seconds: float = DEFAULT_PAIRING_TIMEOUT) -> asyncio.Task[None]:
        """If we don't have a username try to acquire one from the bridge.

        A username stored by an earlier pairing is used without contacting the
        bridge, even if :meth:`load` has not run yet.
        """
        return self.pairing.start(timeout_seconds)

    def cancel_pairing(self) -> None:
        self.pairing.cancel()

    @property
    def pairing_status(self) -> PairingStatus:
        return self.pairing.status

    async def discover_lights(self) -> list[HueLight]:
        """Discover lights known to the bridge.

        Returns:
            Lights found for the first time, empty if discovery failed
        """
        try:
            return await self.registry.discover()
        except MissingCredential as e:
            logger.warning(f"Cannot discover lights: {e.message}")
        except HueAdapterException as e:
            logger.error(f"Light discovery on bridge {self.bridge_id} failed: {e}")
        return []

    async def send_properties(self, light_id: str, properties: dict[str, Any]) -> str | None:
        """Update the state of a light on the bridge.

        Args:
            light_id: Id of light usually from 1-n
            properties: e.g. ``{"on": True, "hue": 0, "sat": 255, "bri": 255}``
        """
        return await self.sync.push(light_id, properties)

    def _create_light(self, light_id: str, light: dict[str, Any]) -> HueLight:
        device = HueLight(self, light_unique_id(self.bridge_id, light_id), light_id, light)
        self.manager.handle_device_added(device)
        return device

    async def _stored_username(self) -> str | None:
        try:
            return await self.credentials.get(self.bridge_id)
        except HueAdapterException as e:
            logger.error(f"Could not read stored usernames: {e}")
            return None

    async def _on_paired(self, username: str) -> None:
        if not self.bridge.username:
            self.bridge.username = username
        try:
            await self.credentials.put(self.bridge_id, self.bridge.username)
        except HueAdapterException as e:
            logger.error(f"Could not store username for bridge {self.bridge_id}: {e}")
        await self.discover_lights()
