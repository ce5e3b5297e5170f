"""Connection to a single Philips Hue bridge over its v1 REST API."""

import logging
from typing import Any

import httpx

from hue_adapter.exceptions import (
    HueAdapterException,
    MissingCredential,
    PairingError,
    RequestTimeout,
)
from hue_adapter.pairing import PairingState

logger = logging.getLogger("hue_adapter")

DEFAULT_TIMEOUT = 10
DEVICE_TYPE = "hue_adapter#PhilipsHueAdapter"
DISCOVERY_URL = "https://discovery.meethue.com/"

LINK_BUTTON_NOT_PRESSED = 101


class Bridge:
    """Interface to one Hue bridge

    Holds the bridge identity, the username once the bridge has granted one,
    and the pairing state. All calls to the bridge are coroutines:

        >>> bridge = Bridge("001788fffe123456", "192.168.1.100")
        >>> await bridge.register_app()
        'vQ9y3r...'
        >>> await bridge.get_lights()
        {'1': {'name': 'Desk', 'state': {...}}}
    """

    def __init__(
        self,
        bridge_id: str,
        ip: str,
        username: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialization function.

        Args:
            bridge_id: Stable identifier of the physical bridge
            ip: IP address or hostname of the bridge
            username: Username previously granted by the bridge, if any
            timeout: Request timeout in seconds (default: 10)
        """
        self.bridge_id = bridge_id
        self.ip = ip
        self.username = username
        self.timeout = timeout
        self.pairing = PairingState()

    def __repr__(self) -> str:
        return f'<{self.__class__.__module__}.{self.__class__.__name__} id="{self.bridge_id}" ip="{self.ip}">'

    def require_username(self) -> str:
        """Return the username, or raise MissingCredential if not paired yet."""
        if not self.username:
            raise MissingCredential(
                -1, f"Bridge {self.bridge_id} has no username, pair with it first"
            )
        return self.username

    async def request(
        self,
        method: str = "GET",
        address: str | None = None,
        data: dict[str, Any] | None = None,
        parse_json: bool = True,
    ) -> Any:
        """Utility function for HTTP requests for the API.

        Args:
            method: HTTP method (GET, PUT, POST, DELETE)
            address: API endpoint address
            data: Optional data to send with the request
            parse_json: Decode the body as JSON; otherwise return it as text

        Returns:
            The parsed JSON response, or the raw body text

        Raises:
            RequestTimeout: If the request times out
            HueAdapterException: If the request fails
        """
        url = f"http://{self.ip}{address}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                if method == "GET" or method == "DELETE":
                    response = await client.request(method, url)
                elif method == "PUT" or method == "POST":
                    response = await client.request(method, url, json=data)
                else:
                    raise ValueError(f"Unsupported method: {method}")

                logger.debug(f"{method} {address} {str(data)}")
                response.raise_for_status()
                if not parse_json:
                    return response.text
                return response.json()

        except httpx.TimeoutException:
            error = f"{method} Request to {url} timed out."
            logger.error(error)
            raise RequestTimeout(-1, error)
        except httpx.HTTPStatusError as e:
            error = f"{method} Request to {url} failed with status code {e.response.status_code}"
            logger.error(error)
            raise HueAdapterException(e.response.status_code, error)
        except Exception as e:
            error = f"{method} Request to {url} failed: {str(e)}"
            logger.error(error)
            raise HueAdapterException(-1, error)

    async def register_app(self, devicetype: str = DEVICE_TYPE) -> str:
        """Perform a single registration attempt.

        Args:
            devicetype: Name this software registers under

        Returns:
            The username granted by the bridge

        Raises:
            PairingError: If the bridge refused, e.g. the link button has not been pressed
            HueAdapterException: If the request itself failed
        """
        response = await self.request("POST", "/api", {"devicetype": devicetype})

        if not isinstance(response, list) or len(response) == 0:
            raise PairingError(-1, "Empty response from bridge")

        msg = response[0]
        try:
            if "error" in msg:
                error_type = msg["error"].get("type", -1)
                description = msg["error"].get("description", "Unknown error")
            elif "success" in msg:
                username = msg["success"]["username"]
                if isinstance(username, str) and username:
                    return username
                error_type = None
            else:
                error_type = None
        except (KeyError, TypeError, AttributeError):
            error_type = None

        if error_type is None:
            raise PairingError(-1, f"Unexpected response from bridge: {msg}")
        if error_type == LINK_BUTTON_NOT_PRESSED:
            raise PairingError(
                error_type,
                "The link button has not been pressed in the last 30 seconds. "
                "Please press the button on the bridge.",
            )
        raise PairingError(error_type, description)

    async def get_lights(self) -> dict[str, Any]:
        """Returns every light known to the bridge, keyed by light id.

        Raises:
            MissingCredential: If the bridge has not granted a username yet
            HueAdapterException: If the request fails or the bridge reports an error
        """
        username = self.require_username()
        lights = await self.request("GET", "/api/" + username + "/lights")

        # the bridge reports errors such as an unauthorized user as a list
        if isinstance(lights, list):
            error = lights[0].get("error", {}) if lights and isinstance(lights[0], dict) else {}
            if not isinstance(error, dict):
                error = {}
            raise HueAdapterException(
                error.get("type", -1), error.get("description", f"Unexpected lights reply: {lights}")
            )
        if not isinstance(lights, dict):
            raise HueAdapterException(-1, f"Unexpected lights reply: {lights}")
        return lights

    async def set_light_state(self, light_id: str, state: dict[str, Any]) -> str:
        """Update the state of a light.

        Args:
            light_id: Bridge-local id of the light, usually 1-n
            state: Partial or full state, e.g. ``{"on": True, "hue": 0, "sat": 255, "bri": 255}``

        Returns:
            The body of the bridge reply
        """
        username = self.require_username()
        return await self.request(
            "PUT",
            "/api/" + username + "/lights/" + str(light_id) + "/state",
            state,
            parse_json=False,
        )


async def discover_bridges(timeout: float = DEFAULT_TIMEOUT) -> list[dict[str, Any]]:
    """Find bridges on the local network through the Philips discovery service.

    Returns:
        Dicts with at least ``id`` and ``internalipaddress``, sorted by address.
        Empty if discovery fails or nothing was found.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(DISCOVERY_URL)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(
            f"Error discovering bridges: {str(e)}. "
            "Find the bridge IP in the Hue app (Settings > My Bridge) and pass it explicitly."
        )
        return []

    if not data:
        logger.warning(
            "No bridges found via the discovery service. Your bridge may not be "
            "registered with the Hue cloud service."
        )
        return []

    return sorted(data, key=lambda b: b.get("internalipaddress", ""))
