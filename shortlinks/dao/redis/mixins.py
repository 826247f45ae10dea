"""Redis mixin providing shared client lifecycle and connectivity checks.

Responsibilities:
    - Initialize (open) and release (close) the Redis client
    - Healthcheck Redis client

Classes:
    - RedisClientMixin: Base mixin to inject Redis client setup, teardown & healthcheck.

Example:
    Typical usage with a DAO implementation:

        >>> class RedisLinkStoreDAO(RedisClientMixin, LinkStoreBaseDAO):
        ...     pass
        ...
        >>> dao = RedisLinkStoreDAO(redis_host='localhost').open()
        >>> dao._healthcheck()
        True
        >>> dao.close()
"""

from typing import Optional

import redis

from shortlinks.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Mixin Redis client setup and health check for Redis-backed DAOs.

    Attributes:
        redis (redis.Redis | None):
            Active Redis client instance used by subclasses. None while closed.

    Methods:
        open() -> self:
            Create the Redis client (unless one was injected) and ping it.

        close() -> None:
            Close the Redis client if this DAO created it.

        _healthcheck(raise_error: bool = True) -> bool:
            Ping Redis to verify connectivity.
            Optionally raise a DataStoreError if unreachable.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
    ):
        """Configure a Redis-based DAO

        The option is given to either use an existing Redis client instance or
        create one via the appropriate Redis connection parameters. No connection
        is made until open() is called.

        Args:
            redis_host (Optional[str]):
                Hostname of the Redis server. Defaults to 'localhost'.

            redis_port (Optional[int]):
                Redis server port. Defaults to 6379.

            redis_db (Optional[int]):
                Redis database index. Defaults to 0.

            redis_decode_responses (Optional[bool]):
                If True, decodes Redis responses. Defaults to True.

            redis_username (Optional[str]):
                Username for Redis authentication (if required).

            redis_password (Optional[str]):
                Password for Redis authentication (if required).

            redis_client (Optional[redis.Redis]):
                Pre-initialized Redis client. If None, a new client is created on open().
                An injected client is never closed by this DAO.
        """
        self._redis_config = {
            'host': redis_host,
            'port': int(redis_port),
            'db': int(redis_db),
            'decode_responses': redis_decode_responses,
            'username': redis_username,
            'password': redis_password,
        }
        self._injected_client = redis_client
        self.redis = None

    def open(self):
        """Create (or adopt) the Redis client and healthcheck it

        Returns:
            self (for method chaining)

        Raises:
            DataStoreError:
                If Redis healthcheck fails (connectivity issues).
        """
        if self.redis is None and self._injected_client is not None:
            self.redis = self._injected_client
        elif self.redis is None:
            self.redis = redis.Redis(**self._redis_config)
        self._healthcheck()
        return self

    def close(self) -> None:
        if self.redis is not None and self._injected_client is None:
            self.redis.close()
        self.redis = None

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis to healthcheck connectivity

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if Redis is reachable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If Redis connection cannot be established and raise_error=True.

        Example:
            >>> self._healthcheck()
            True
        """
        try:
            self.redis.ping()
        except redis.exceptions.ConnectionError as e:
            if raise_error:
                info = self.redis.connection_pool.connection_kwargs
                redis_host = info.get('host')
                redis_port = info.get('port')
                redis_db = info.get('db')
                raise DataStoreError(
                    f"Can't connect to Redis at {redis_host}:{redis_port}/{redis_db}. Check the provided configuration paramters.",
                    operation='open',
                ) from e
            return False  # pragma: no cover
        else:
            return True
