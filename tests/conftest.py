"""Shared fixtures: in-memory scopes, fake branding API, and an app client."""
import asyncio
from collections.abc import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from rms_shell.api.main import create_app
from rms_shell.bootstrap import ShellContainer
from rms_shell.core.config import Settings
from rms_shell.core.events import EventBus
from rms_shell.core.platform import HostPlatform
from rms_shell.core.storage import MemoryStore
from rms_shell.schemas.branding import BrandingRecord
from rms_shell.services.api_client import ApiClient, BrandingUnavailableError
from rms_shell.services.auth_storage import AuthStorage
from rms_shell.services.branding_cache import BrandingCache
from rms_shell.services.branding_gate import BrandingGate
from rms_shell.services.session import SessionService

API_BASE = "http://api.test"

SAMPLE_USER = {
    "id": "1",
    "firstName": "A",
    "lastName": "B",
    "email": "a@b.com",
    "role": "X",
}


class FakeBrandingFetcher:
    """Branding fetcher with scripted outcomes and a call counter."""

    def __init__(self) -> None:
        self.calls = 0
        self.result: BrandingRecord | Exception = BrandingRecord()
        self.release: asyncio.Event | None = None

    def hold(self) -> asyncio.Event:
        """Make fetches block until the returned event is set."""
        self.release = asyncio.Event()
        return self.release

    async def __call__(self) -> BrandingRecord:
        self.calls += 1
        if self.release is not None:
            await self.release.wait()
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    def fail(self, reason: str = "offline") -> None:
        self.result = BrandingUnavailableError(reason)


@pytest.fixture
def persistent_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def session_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def browser_platform(persistent_store: MemoryStore, session_store: MemoryStore) -> HostPlatform:
    return HostPlatform(persistent_store, session_store, display_mode="browser")


@pytest.fixture
def standalone_platform(persistent_store: MemoryStore, session_store: MemoryStore) -> HostPlatform:
    return HostPlatform(persistent_store, session_store, display_mode="standalone")


@pytest.fixture
def fetcher() -> FakeBrandingFetcher:
    return FakeBrandingFetcher()


def json_response(status_code: int, body: object) -> httpx.Response:
    if isinstance(body, bytes):
        return httpx.Response(status_code, content=body)
    return httpx.Response(status_code, json=body)


@pytest.fixture
def upstream() -> dict[tuple[str, str], tuple[int, object]]:
    """Upstream (status, JSON body) keyed by (method, path), served by a MockTransport."""
    return {}


@pytest.fixture
def seen_requests() -> list[httpx.Request]:
    """Requests that reached the fake upstream."""
    return []


@pytest.fixture
async def container(
    upstream: dict[tuple[str, str], tuple[int, object]],
    seen_requests: list[httpx.Request],
    browser_platform: HostPlatform,
    persistent_store: MemoryStore,
    fetcher: FakeBrandingFetcher,
) -> AsyncGenerator[ShellContainer]:
    """Container wired with in-memory scopes and a fake branding fetcher."""
    settings = Settings(_env_file=None, api_base_url=API_BASE, redis_enabled=False)
    events = EventBus()
    auth_storage = AuthStorage(browser_platform, events)

    def handler(request: httpx.Request) -> httpx.Response:
        seen_requests.append(request)
        status_code, body = upstream.get(
            (request.method, request.url.path), (404, {"message": "Not found"}),
        )
        return json_response(status_code, body)

    api = ApiClient(API_BASE, token_provider=auth_storage.get_token,
                    transport=httpx.MockTransport(handler))
    branding = BrandingCache(fetcher, store=persistent_store)
    built = ShellContainer(
        settings=settings,
        platform=browser_platform,
        events=events,
        auth_storage=auth_storage,
        api=api,
        branding=branding,
        gate=BrandingGate(branding, timeout=0.2),
        session=SessionService(api, auth_storage),
    )
    yield built
    await built.aclose()


@pytest.fixture
async def client(container: ShellContainer) -> AsyncGenerator[AsyncClient]:
    """HTTP client against the app; the container is not started."""
    app = create_app(container)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://shell.test") as ac:
        yield ac
