"""Redis-backed durable store with connection pooling and graceful fallback."""
import logging

from redis import ConnectionPool, Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "rms:"
DEFAULT_SOCKET_TIMEOUT = 0.5


class RedisStore:
    """
    Durable key-value scope backed by Redis.

    Implements the KeyValueStore protocol. A disabled or unreachable server
    never raises: reads return None and writes return False. Every connect
    and command is bounded by socket_timeout.
    """

    def __init__(
        self,
        url: str,
        enabled: bool = True,
        namespace: str = DEFAULT_NAMESPACE,
        socket_timeout: float = DEFAULT_SOCKET_TIMEOUT,
    ) -> None:
        self._url = url
        self._socket_timeout = socket_timeout
        self._enabled = enabled
        self._namespace = namespace
        self._pool: ConnectionPool | None = None
        self._client: Redis | None = None

    def connect(self) -> None:
        """Initialize connection pool and verify connectivity."""
        if not self._enabled:
            logger.info("Redis disabled by configuration")
            return
        try:
            self._pool = ConnectionPool.from_url(
                self._url,
                max_connections=10,
                decode_responses=True,
                socket_connect_timeout=self._socket_timeout,
                socket_timeout=self._socket_timeout,
            )
            self._client = Redis(connection_pool=self._pool)
            self._client.ping()
            logger.info("Redis connected successfully")
        except RedisError as e:
            logger.warning("Redis connection failed: %s", e)
            self._client = None
            self._pool = None

    def close(self) -> None:
        """Close connection pool."""
        if self._client:
            self._client.close()
            if self._pool:
                self._pool.disconnect()
            self._client = None
            self._pool = None
            logger.info("Redis connection closed")

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def is_connected(self) -> bool:
        """Check if client is connected."""
        return self._client is not None

    def ping(self) -> bool:
        """Check Redis connectivity."""
        if not self._client:
            return False
        try:
            return bool(self._client.ping())
        except RedisError:
            return False

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def get_item(self, key: str) -> str | None:
        """Get value, returns None if Redis unavailable."""
        if not self._client:
            return None
        try:
            return self._client.get(self._key(key))
        except RedisError as e:
            logger.warning("Redis GET failed: %s", e)
            return None

    def set_item(self, key: str, value: str) -> bool:
        """Set value without expiry, returns False if Redis unavailable."""
        if not self._client:
            return False
        try:
            self._client.set(self._key(key), value)
            return True
        except RedisError as e:
            logger.warning("Redis SET failed: %s", e)
            return False

    def remove_item(self, key: str) -> bool:
        """Delete key, returns False if Redis unavailable."""
        if not self._client:
            return False
        try:
            self._client.delete(self._key(key))
            return True
        except RedisError as e:
            logger.warning("Redis DELETE failed: %s", e)
            return False
