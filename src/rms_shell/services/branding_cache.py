"""
Process-wide branding cache with stale-while-revalidate reads.

One BrandingCache is built per process at bootstrap and shared by reference.
It is seeded synchronously from the durable store, so repeat starts have
branding before anything renders, and refreshed from the API in the
background. At most one refresh is in flight at a time: concurrent callers
await the same task. A failed refresh never replaces data that an earlier
refresh (or the durable store) provided.
"""
import asyncio
import json
import logging
from collections.abc import Awaitable, Callable

from rms_shell.core.storage import KeyValueStore
from rms_shell.schemas.branding import BrandingRecord, DecodedBranding, decode_branding_payload
from rms_shell.services.api_client import BrandingUnavailableError

logger = logging.getLogger(__name__)

BRANDING_STORAGE_KEY = "cms_branding"

BrandingFetcher = Callable[[], Awaitable[BrandingRecord]]
BrandingListener = Callable[[BrandingRecord], None]


def parse_persisted_branding(raw: str | None) -> BrandingRecord | None:
    """Decode a persisted record, returning None for missing or corrupt values."""
    if raw is None:
        return None
    try:
        payload = json.loads(raw)
    except ValueError:
        logger.debug("branding_storage_corrupt", extra={"key": BRANDING_STORAGE_KEY})
        return None
    result = decode_branding_payload(payload)
    if isinstance(result, DecodedBranding):
        return result.record
    logger.debug(
        "branding_storage_corrupt",
        extra={"key": BRANDING_STORAGE_KEY, "reason": result.reason},
    )
    return None


class BrandingCache:
    """Single in-memory source of truth for tenant branding."""

    def __init__(
        self,
        fetcher: BrandingFetcher,
        store: KeyValueStore | None = None,
    ) -> None:
        self._fetch = fetcher
        self._store = store
        self._data: BrandingRecord | None = None
        self._refresh: asyncio.Future[None] | None = None
        self._background: set[asyncio.Task[None]] = set()

    @property
    def data(self) -> BrandingRecord | None:
        """Current record, or None if nothing has been resolved yet."""
        return self._data

    @property
    def is_refreshing(self) -> bool:
        return self._refresh is not None

    def load(self) -> BrandingRecord | None:
        """Seed from the durable store. A missing or corrupt value is a cache miss."""
        if self._store is None:
            return self._data
        record = parse_persisted_branding(self._store.get_item(BRANDING_STORAGE_KEY))
        if record is not None:
            self._data = record
            logger.info("branding_seeded_from_storage")
        return self._data

    def has_branding_data(self) -> bool:
        """Whether a record (possibly the empty one) is available."""
        return self._data is not None

    async def ensure_branding(self) -> None:
        """
        Refresh branding from the API.

        Joins the in-flight refresh if there is one. Never raises for network
        or payload problems: on failure the cache keeps what it has, or becomes
        the empty record if it had nothing, so has_branding_data() turns true.
        """
        if self._refresh is None:
            self._refresh = asyncio.ensure_future(self._run_refresh())
        # Shielded so a caller that gives up waiting does not cancel the
        # refresh other callers are sharing
        await asyncio.shield(self._refresh)

    async def _run_refresh(self) -> None:
        try:
            record = await self._fetch()
        except BrandingUnavailableError as e:
            logger.warning("branding_refresh_failed", extra={"reason": str(e)})
            if self._data is None:
                self._data = BrandingRecord()
        else:
            self._data = record
            self._persist(record)
        finally:
            self._refresh = None

    def _persist(self, record: BrandingRecord) -> None:
        if self._store is None:
            return
        stored = self._store.set_item(BRANDING_STORAGE_KEY, json.dumps(record.to_wire()))
        if not stored:
            logger.warning("branding_persist_failed", extra={"key": BRANDING_STORAGE_KEY})

    def use_branding(self, on_update: BrandingListener | None = None) -> BrandingRecord:
        """
        Stale-while-revalidate read.

        Returns the cached record (the empty record if none) immediately and
        schedules a refresh, even on a cache hit. When the refresh settles,
        on_update receives the current record. Without a running event loop
        only the cached value is returned.
        """
        current = self._data or BrandingRecord()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return current

        task = loop.create_task(self._revalidate(on_update))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return current

    async def _revalidate(self, on_update: BrandingListener | None) -> None:
        await self.ensure_branding()
        if on_update is not None and self._data is not None:
            on_update(self._data)

    async def aclose(self) -> None:
        """Cancel background revalidations and any in-flight refresh."""
        pending: list[asyncio.Future[None]] = list(self._background)
        if self._refresh is not None:
            pending.append(self._refresh)
        for future in pending:
            future.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._background.clear()
        self._refresh = None
