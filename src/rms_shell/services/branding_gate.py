"""Render gate that withholds branded content until branding is known."""
import asyncio
import logging
from collections.abc import Callable
from enum import Enum
from typing import TypeVar

from rms_shell.services.branding_cache import BrandingCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Never block first paint longer than this
DEFAULT_GATE_TIMEOUT = 3.0


def _log_refresh_crash(refresh: asyncio.Future[None]) -> None:
    """Retrieve and log an unexpected refresh error; the gate opens regardless."""
    if refresh.cancelled():
        return
    error = refresh.exception()
    if error is not None:
        logger.error("branding_refresh_crashed", exc_info=error)


class GateState(Enum):
    """Gate lifecycle. READY is terminal."""

    PENDING = "pending"
    READY = "ready"


class BrandingGate:
    """
    Blocks rendering of children until branding is available.

    Becomes READY on mount when the cache already holds data (a background
    refresh still runs), otherwise when the first refresh settles or the
    timeout elapses, whichever comes first. The refresh is not cancelled by
    the timeout; it keeps filling the cache after the gate has opened.
    """

    def __init__(self, cache: BrandingCache, timeout: float = DEFAULT_GATE_TIMEOUT) -> None:
        self._cache = cache
        self._timeout = timeout
        self._state = GateState.PENDING
        self._ready = asyncio.Event()
        self._race: asyncio.Task[None] | None = None
        self._mounted = False

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is GateState.READY

    @property
    def timeout(self) -> float:
        return self._timeout

    def mount(self) -> None:
        """Start the gate. Must be called from a running event loop."""
        if self._mounted:
            return
        self._mounted = True

        if self._cache.has_branding_data():
            self._open("cache")
            # Still revalidate so upstream edits show up on this run
            self._cache.use_branding()
            return

        self._race = asyncio.get_running_loop().create_task(self._race_refresh())

    async def _race_refresh(self) -> None:
        refresh = asyncio.ensure_future(self._cache.ensure_branding())
        refresh.add_done_callback(_log_refresh_crash)
        done, _ = await asyncio.wait({refresh}, timeout=self._timeout)
        if not self._mounted:
            return
        self._open("refresh" if done else "timeout")

    def _open(self, reason: str) -> None:
        if self._state is GateState.READY:
            return
        self._state = GateState.READY
        self._ready.set()
        logger.info("branding_gate_ready", extra={"reason": reason})

    async def wait_ready(self) -> GateState:
        """Wait until the gate opens. Mounts the gate if needed."""
        self.mount()
        await self._ready.wait()
        return self._state

    def render(self, children: Callable[[], T], placeholder: T) -> T:
        """Render children when READY, the neutral placeholder while PENDING."""
        if self._state is GateState.READY:
            return children()
        return placeholder

    async def unmount(self) -> None:
        """Tear down; a race still pending is cancelled and never opens the gate."""
        self._mounted = False
        race, self._race = self._race, None
        if race is not None and not race.done():
            race.cancel()
            try:
                await race
            except asyncio.CancelledError:
                pass
