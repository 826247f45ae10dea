import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable

from shortlinks.dao.exceptions import DataStoreError, StoreClosedError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection and command errors

    The raised DataStoreError carries the failed operation (method name) and
    the targeted key (first positional argument), so callers can decide
    whether to retry.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.RedisError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises StoreClosedError when the DAO isn't open, and
            DataStoreError on connectivity issues or other Redis errors.

    Example:
        >>> @handle_redis_connection_error
        ... def get(self, key):
        ...     return self.redis.get(key)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        operation = method.__name__
        key = args[0] if args and isinstance(args[0], str) else kwargs.get('key')

        if self.redis is None:
            raise StoreClosedError('Redis store is not open.', operation=operation, key=key)

        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            info = self.redis.connection_pool.connection_kwargs
            redis_host = info.get('host')
            redis_port = info.get('port')
            redis_db = info.get('db')
            raise DataStoreError(
                f"Can't connect to Redis at {redis_host}:{redis_port}/{redis_db}.",
                operation=operation,
                key=key,
            ) from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis {operation} failed for key {key!r}: {e}', operation=operation, key=key) from e

    return wrapper
