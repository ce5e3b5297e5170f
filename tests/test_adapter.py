"""Test the bridge adapter end to end against a mocked bridge."""

from pathlib import Path
from typing import Any

import httpx
import pytest
import respx

from hue_adapter import (
    AdapterManager,
    BridgeAdapter,
    JsonFileStorage,
    MemoryStorage,
    PairingStatus,
)
from hue_adapter.credentials import KNOWN_BRIDGE_USERNAMES

from conftest import BRIDGE_ID, BRIDGE_IP, USERNAME

REGISTER_URL = f"http://{BRIDGE_IP}/api"
LIGHTS_URL = f"http://{BRIDGE_IP}/api/{USERNAME}/lights"


@pytest.fixture
def manager() -> AdapterManager:
    return AdapterManager()


def test_adapter_registers_with_manager(manager: AdapterManager) -> None:
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=MemoryStorage())

    assert adapter.id == f"philips-hue-{BRIDGE_ID}"
    assert adapter.name == "philips-hue"
    assert manager.adapters[adapter.id] is adapter
    assert adapter.pairing_status is PairingStatus.IDLE
    assert not adapter.paired


@pytest.mark.asyncio
async def test_load_with_stored_username_discovers(
    manager: AdapterManager, lights_reply: dict[str, Any]
) -> None:
    storage = MemoryStorage({KNOWN_BRIDGE_USERNAMES: {BRIDGE_ID: USERNAME}})
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=storage)

    with respx.mock(assert_all_called=True) as mock:
        mock.get(LIGHTS_URL).mock(return_value=httpx.Response(200, json=lights_reply))
        await adapter.load()

    assert adapter.paired
    assert [light.light_id for light in adapter.devices] == ["1", "2"]
    assert manager.get_device(f"philips-hue-{BRIDGE_ID}-1") is adapter.get_device(
        f"philips-hue-{BRIDGE_ID}-1"
    )
    assert len(manager.devices) == 2


@pytest.mark.asyncio
async def test_load_without_username_stays_idle(manager: AdapterManager) -> None:
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=MemoryStorage())

    with respx.mock(assert_all_called=False) as mock:
        lights = mock.get(LIGHTS_URL)
        register = mock.post(REGISTER_URL)
        await adapter.load()

    assert not lights.called
    assert not register.called
    assert adapter.devices == []
    assert adapter.pairing_status is PairingStatus.IDLE


@pytest.mark.asyncio
async def test_load_with_failing_discovery_does_not_raise(manager: AdapterManager) -> None:
    storage = MemoryStorage({KNOWN_BRIDGE_USERNAMES: {BRIDGE_ID: USERNAME}})
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=storage)

    with respx.mock(assert_all_called=True) as mock:
        mock.get(LIGHTS_URL).mock(side_effect=httpx.ConnectError("Connection refused"))
        await adapter.load()

    assert adapter.paired
    assert adapter.devices == []


@pytest.mark.asyncio
async def test_pairing_stores_username_and_discovers(
    manager: AdapterManager, lights_reply: dict[str, Any]
) -> None:
    other_bridges = {"another-bridge": "someone"}
    storage = MemoryStorage({KNOWN_BRIDGE_USERNAMES: dict(other_bridges)})
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=storage, retry_delay=0)

    with respx.mock(assert_all_called=True) as mock:
        register = mock.post(REGISTER_URL)
        register.side_effect = [
            httpx.Response(200, json=[{"error": {"type": 101, "description": "link button not pressed"}}]),
            httpx.Response(200, json=[{"success": {"username": USERNAME}}]),
        ]
        mock.get(LIGHTS_URL).mock(return_value=httpx.Response(200, json=lights_reply))

        await adapter.load()
        adapter.start_pairing(30)
        assert await adapter.pairing.wait() is PairingStatus.SUCCEEDED

    assert adapter.bridge.username == USERNAME
    assert storage.data[KNOWN_BRIDGE_USERNAMES] == {**other_bridges, BRIDGE_ID: USERNAME}
    assert len(adapter.devices) == 2


@pytest.mark.asyncio
async def test_pairing_when_already_paired_skips_registration(
    manager: AdapterManager, lights_reply: dict[str, Any]
) -> None:
    storage = MemoryStorage({KNOWN_BRIDGE_USERNAMES: {BRIDGE_ID: USERNAME}})
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=storage)

    with respx.mock(assert_all_called=False) as mock:
        register = mock.post(REGISTER_URL)
        lights = mock.get(LIGHTS_URL).mock(return_value=httpx.Response(200, json=lights_reply))

        await adapter.load()
        adapter.start_pairing(30)
        assert await adapter.pairing.wait() is PairingStatus.SUCCEEDED

    assert not register.called
    assert lights.call_count == 2
    # the second discovery added nothing new
    assert len(adapter.devices) == 2


@pytest.mark.asyncio
async def test_cancel_pairing(manager: AdapterManager) -> None:
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=MemoryStorage(), retry_delay=0.2)

    with respx.mock(assert_all_called=False) as mock:
        mock.post(REGISTER_URL).mock(
            return_value=httpx.Response(200, json=[{"error": {"type": 101, "description": "x"}}])
        )
        adapter.start_pairing(30)
        adapter.cancel_pairing()
        assert await adapter.pairing.wait() is PairingStatus.CANCELLED

    assert not adapter.paired


@pytest.mark.asyncio
async def test_light_change_reaches_bridge(
    manager: AdapterManager, lights_reply: dict[str, Any]
) -> None:
    storage = MemoryStorage({KNOWN_BRIDGE_USERNAMES: {BRIDGE_ID: USERNAME}})
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=storage)

    with respx.mock(assert_all_called=True) as mock:
        mock.get(LIGHTS_URL).mock(return_value=httpx.Response(200, json=lights_reply))
        state = mock.put(f"{LIGHTS_URL}/1/state").mock(return_value=httpx.Response(200, text="[]"))

        await adapter.load()
        light = manager.get_device(f"philips-hue-{BRIDGE_ID}-1")
        assert light is not None
        await light.set_property("on", False)

    assert state.call_count == 1
    assert light.get_property("on") is False


def test_device_description(manager: AdapterManager, lights_reply: dict[str, Any]) -> None:
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=MemoryStorage())
    light = adapter._create_light("1", lights_reply["1"])

    assert light.as_dict() == {
        "id": f"philips-hue-{BRIDGE_ID}-1",
        "name": "Living Room Bulb",
        "type": "onOffColorLight",
        "properties": {
            "on": {"name": "on", "type": "boolean", "value": True},
            "color": {"name": "color", "type": "string", "value": "#ff0000"},
        },
    }
    assert manager.get_device(light.id) is light


@pytest.mark.asyncio
async def test_manager_callbacks_see_new_lights(
    manager: AdapterManager, lights_reply: dict[str, Any]
) -> None:
    seen: list[str] = []
    manager.on_device_added.append(lambda device: seen.append(device.id))
    storage = MemoryStorage({KNOWN_BRIDGE_USERNAMES: {BRIDGE_ID: USERNAME}})
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=storage)

    with respx.mock(assert_all_called=True) as mock:
        mock.get(LIGHTS_URL).mock(return_value=httpx.Response(200, json=lights_reply))
        await adapter.load()
        await adapter.discover_lights()

    assert seen == [f"philips-hue-{BRIDGE_ID}-1", f"philips-hue-{BRIDGE_ID}-2"]


@pytest.mark.asyncio
async def test_load_with_undecodable_storage_stays_idle(
    manager: AdapterManager, tmp_path: Path
) -> None:
    path = tmp_path / ".hue_adapter"
    path.write_bytes(b"\xff\xfe\x00garbage")
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=JsonFileStorage(str(path)))

    await adapter.load()

    assert not adapter.paired
    assert adapter.pairing_status is PairingStatus.IDLE


@pytest.mark.asyncio
async def test_pairing_before_load_uses_stored_username(
    manager: AdapterManager, lights_reply: dict[str, Any]
) -> None:
    storage = MemoryStorage({KNOWN_BRIDGE_USERNAMES: {BRIDGE_ID: USERNAME}})
    adapter = BridgeAdapter(manager, BRIDGE_ID, BRIDGE_IP, storage=storage)

    with respx.mock(assert_all_called=False) as mock:
        register = mock.post(REGISTER_URL)
        mock.get(LIGHTS_URL).mock(return_value=httpx.Response(200, json=lights_reply))

        adapter.start_pairing(30)
        assert await adapter.pairing.wait() is PairingStatus.SUCCEEDED

    assert not register.called
    assert adapter.bridge.username == USERNAME
    assert len(adapter.devices) == 2
