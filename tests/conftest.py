from typing import Any

import pytest

BRIDGE_ID = "001788fffe123456"
BRIDGE_IP = "192.168.1.100"
USERNAME = "testuser"


@pytest.fixture
def lights_reply() -> dict[str, Any]:
    """A /lights reply with two color lights."""
    return {
        "1": {
            "name": "Living Room Bulb",
            "state": {"on": True, "bri": 255, "hue": 0, "sat": 255},
            "type": "Extended color light",
            "modelid": "LCT001",
        },
        "2": {
            "name": "Desk Lamp",
            "state": {"on": False, "bri": 255, "hue": 21845, "sat": 255},
            "type": "Extended color light",
            "modelid": "LCT007",
        },
    }
