"""Time-boxed pairing with a Hue bridge.

Pairing only succeeds after someone presses the link button on the bridge, so
a session keeps registering until the bridge grants a username, the session
is cancelled, or its deadline passes.
"""

import asyncio
import enum
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hue_adapter.exceptions import HueAdapterException

if TYPE_CHECKING:
    from hue_adapter.bridge import Bridge

logger = logging.getLogger("hue_adapter")

PAIRING_RETRY_DELAY = 0.5
DEFAULT_PAIRING_TIMEOUT = 30


class PairingStatus(enum.Enum):
    IDLE = "idle"
    PAIRING = "pairing"
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


@dataclass
class PairingState:
    """Pairing progress of one bridge. ``deadline`` is only meaningful while pairing."""

    status: PairingStatus = PairingStatus.IDLE
    deadline: float = 0.0


class PairingSession:
    """Repeatedly asks the bridge for a username until success, cancel or timeout.

    Attempts form a single chain: starting a session that is already running
    only moves its deadline.

    Args:
        bridge: The bridge to pair with; its ``pairing`` state is updated in place
        on_paired: Awaited with the username once the bridge grants one
        retry_delay: Seconds to wait between failed attempts
        clock: Monotonic time source, in seconds
        stored_username: Looks up a previously granted username before asking the bridge
    """

    def __init__(
        self,
        bridge: "Bridge",
        on_paired: Callable[[str], Awaitable[None]],
        retry_delay: float = PAIRING_RETRY_DELAY,
        clock: Callable[[], float] = time.monotonic,
        stored_username: Callable[[], Awaitable[str | None]] | None = None,
    ):
        self.bridge = bridge
        self.on_paired = on_paired
        self.stored_username = stored_username
        self.retry_delay = retry_delay
        self.clock = clock
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> PairingState:
        return self.bridge.pairing

    @property
    def status(self) -> PairingStatus:
        return self.bridge.pairing.status

    @property
    def deadline(self) -> float:
        return self.bridge.pairing.deadline

    def start(self, timeout_seconds: float = DEFAULT_PAIRING_TIMEOUT) -> asyncio.Task[None]:
        """Begin pairing and make the first attempt right away.

        Must be called from a running event loop.

        Args:
            timeout_seconds: How long to keep retrying

        Returns:
            The task driving the attempts
        """
        deadline = self.clock() + timeout_seconds

        if self._task is not None and not self._task.done():
            # the previous chain may still be sleeping after a cancel; reuse it
            logger.info(f"Already pairing with bridge {self.bridge.bridge_id}, extending deadline")
            self.state.status = PairingStatus.PAIRING
            self.state.deadline = deadline
            return self._task

        self.state.status = PairingStatus.PAIRING
        self.state.deadline = deadline
        logger.info(
            f"Pairing with bridge {self.bridge.bridge_id} for up to {timeout_seconds} seconds"
        )
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    def cancel(self) -> None:
        """Stop pairing. A retry that is waiting will not fire."""
        if self.state.status is PairingStatus.PAIRING:
            logger.info(f"Pairing with bridge {self.bridge.bridge_id} cancelled")
            self.state.status = PairingStatus.CANCELLED

    async def wait(self) -> PairingStatus:
        """Wait for the current run to finish and return the final status."""
        if self._task is not None:
            await self._task
        return self.state.status

    async def _attempt(self) -> str:
        if self.bridge.username:
            return self.bridge.username
        if self.stored_username is not None:
            username = await self.stored_username()
            if username:
                return username
        return await self.bridge.register_app()

    def _should_retry(self) -> bool:
        if self.state.status is not PairingStatus.PAIRING:
            return False
        if self.clock() >= self.state.deadline:
            logger.warning(f"Pairing with bridge {self.bridge.bridge_id} timed out")
            self.state.status = PairingStatus.EXPIRED
            return False
        return True

    async def _run(self) -> None:
        while self.state.status is PairingStatus.PAIRING:
            try:
                username = await self._attempt()
            except HueAdapterException as e:
                logger.error(f"Pairing attempt with bridge {self.bridge.bridge_id} failed: {e}")
                if not self._should_retry():
                    return

                await asyncio.sleep(self.retry_delay)
                # cancel() may have been called while sleeping
                if not self._should_retry():
                    return
                continue

            if self.state.status is not PairingStatus.PAIRING:
                logger.warning(
                    f"Bridge {self.bridge.bridge_id} answered after pairing stopped, ignoring it"
                )
                return

            self.state.status = PairingStatus.SUCCEEDED
            logger.info(f"Paired with bridge {self.bridge.bridge_id}")
            try:
                await self.on_paired(username)
            except HueAdapterException as e:
                logger.error(f"Post-pairing setup for bridge {self.bridge.bridge_id} failed: {e}")
            return
