"""Key-value persistence used to remember bridge usernames across restarts."""

import asyncio
import json
import logging
import os
import platform
from typing import Any, Protocol

from hue_adapter.exceptions import StorageError

logger = logging.getLogger("hue_adapter")


class KeyValueStorage(Protocol):
    """Asynchronous get/set store. ``init`` must be awaited before first use."""

    async def init(self) -> None: ...

    async def get_item(self, key: str) -> Any: ...

    async def set_item(self, key: str, value: Any) -> None: ...


def default_storage_path() -> str:
    """Pick a writable location for the storage file.

    Returns:
        ``~/.hue_adapter`` when the home directory is writable, otherwise a
        file of the same name in the current working directory
    """
    if platform.system() == "Windows":
        user_home_env_var = "USERPROFILE"
    else:
        user_home_env_var = "HOME"

    user_home_path = os.getenv(user_home_env_var)
    if user_home_path is not None and os.access(user_home_path, os.W_OK):
        return os.path.join(user_home_path, ".hue_adapter")
    return os.path.join(os.getcwd(), ".hue_adapter")


class JsonFileStorage:
    """Stores every key in a single JSON object on disk.

    Each ``get_item`` re-reads the file so that a read-modify-write sees
    values written by other adapters or processes since ``init``.
    """

    def __init__(self, path: str | None = None):
        self.path = path if path is not None else default_storage_path()
        self._initialized = False

    async def init(self) -> None:
        if self._initialized:
            return
        await asyncio.to_thread(self._ensure_parent)
        self._initialized = True
        logger.debug(f"Using storage file {self.path}")

    async def get_item(self, key: str) -> Any:
        self._check_initialized()
        data = await asyncio.to_thread(self._read)
        return data.get(key)

    async def set_item(self, key: str, value: Any) -> None:
        self._check_initialized()
        await asyncio.to_thread(self._write_key, key, value)

    def _check_initialized(self) -> None:
        if not self._initialized:
            raise StorageError(-1, f"Storage at {self.path} used before init()")

    def _ensure_parent(self) -> None:
        parent = os.path.dirname(self.path)
        if parent:
            try:
                os.makedirs(parent, exist_ok=True)
            except OSError as e:
                raise StorageError(-1, f"Cannot create {parent}: {e}")

    def _read(self) -> dict[str, Any]:
        try:
            with open(self.path) as f:
                data = json.loads(f.read())
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.error(f"Storage file {self.path} is not valid JSON, ignoring it")
            return {}
        except OSError as e:
            raise StorageError(-1, f"Cannot read {self.path}: {e}")

        if not isinstance(data, dict):
            logger.error(f"Storage file {self.path} does not hold an object, ignoring it")
            return {}
        return data

    def _write_key(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        try:
            with open(self.path, "w") as f:
                logger.info("Writing storage file " + self.path)
                f.write(json.dumps(data))
        except OSError as e:
            raise StorageError(-1, f"Cannot write {self.path}: {e}")


class MemoryStorage:
    """In-process storage, nothing survives a restart."""

    def __init__(self, data: dict[str, Any] | None = None):
        self.data: dict[str, Any] = dict(data or {})
        self.initialized = False

    async def init(self) -> None:
        self.initialized = True

    async def get_item(self, key: str) -> Any:
        return self.data.get(key)

    async def set_item(self, key: str, value: Any) -> None:
        self.data[key] = value
