"""
Process-level wiring: one container of shared services per process.

The container holds a single user's session; every request to the process
sees the same credential pair.
"""
import logging
from dataclasses import dataclass

from rms_shell.core.config import Settings
from rms_shell.core.events import EventBus
from rms_shell.core.platform import PlatformCapabilities, build_platform
from rms_shell.core.redis import RedisStore
from rms_shell.core.storage import MemoryStore
from rms_shell.services.api_client import ApiClient
from rms_shell.services.auth_storage import AuthStorage
from rms_shell.services.branding_cache import BrandingCache
from rms_shell.services.branding_gate import BrandingGate
from rms_shell.services.session import SessionService

logger = logging.getLogger(__name__)


@dataclass
class ShellContainer:
    """Shared services, constructed once at startup and passed by reference."""

    settings: Settings
    platform: PlatformCapabilities
    events: EventBus
    auth_storage: AuthStorage
    api: ApiClient
    branding: BrandingCache
    gate: BrandingGate
    session: SessionService
    redis: RedisStore | None = None

    async def start(self) -> None:
        """Seed branding from the durable store and mount the gate."""
        self.branding.load()
        self.gate.mount()

    async def aclose(self) -> None:
        await self.gate.unmount()
        await self.branding.aclose()
        await self.api.aclose()
        if self.redis is not None:
            self.redis.close()


def build_container(settings: Settings) -> ShellContainer:
    """Build the production object graph described by settings."""
    redis_store = RedisStore(
        settings.redis_url,
        enabled=settings.redis_enabled,
        socket_timeout=settings.redis_socket_timeout,
    )
    redis_store.connect()

    platform = build_platform(settings, persistent_store=redis_store, session_store=MemoryStore())
    events = EventBus()
    auth_storage = AuthStorage(platform, events)
    api = ApiClient(
        settings.api_base_url,
        token_provider=auth_storage.get_token,
        timeout=settings.http_timeout,
    )
    branding = BrandingCache(api.fetch_branding, store=platform.get_persistent_store())
    gate = BrandingGate(branding, timeout=settings.branding_gate_timeout)

    logger.info(
        "container_built",
        extra={
            "api_base_url": settings.api_base_url,
            "standalone": auth_storage.is_host_standalone(),
        },
    )
    return ShellContainer(
        settings=settings,
        platform=platform,
        events=events,
        auth_storage=auth_storage,
        api=api,
        branding=branding,
        gate=gate,
        session=SessionService(api, auth_storage),
        redis=redis_store,
    )
