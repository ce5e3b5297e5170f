"""Persistence of usernames granted by bridges, keyed by bridge id."""

import logging

from hue_adapter.storage import KeyValueStorage

logger = logging.getLogger("hue_adapter")

KNOWN_BRIDGE_USERNAMES = "PhilipsHueAdapter.knownBridgeUsernames"


class CredentialStore:
    """Bridge id -> username table kept under a single storage key.

    The table only grows: entries are merged in, never removed.
    """

    def __init__(self, storage: KeyValueStorage, key: str = KNOWN_BRIDGE_USERNAMES):
        self.storage = storage
        self.key = key
        self._initialized = False

    async def _ensure_init(self) -> None:
        if not self._initialized:
            await self.storage.init()
            self._initialized = True

    async def _load_table(self) -> dict[str, str]:
        await self._ensure_init()
        table = await self.storage.get_item(self.key)
        if not isinstance(table, dict):
            return {}
        return dict(table)

    async def get(self, bridge_id: str) -> str | None:
        """Look up the username stored for ``bridge_id``.

        Returns:
            The username, or None if this bridge has never been paired
        """
        table = await self._load_table()
        username = table.get(bridge_id)
        if not isinstance(username, str) or not username:
            logger.info(f"No known username for bridge {bridge_id}")
            return None
        return username

    async def put(self, bridge_id: str, username: str) -> None:
        """Merge ``bridge_id -> username`` into the stored table.

        The table is re-read right before writing so entries stored by other
        bridges in the meantime are kept.
        """
        table = await self._load_table()
        table[bridge_id] = username
        await self.storage.set_item(self.key, table)
        logger.info(f"Stored username for bridge {bridge_id}")
