import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable

from urlshortener.dao.exceptions import DataStoreConnectionError, DataStoreError, DataStoreTimeoutError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def redis_address(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_errors(method: F) -> F:
    """Wrap Redis-interacting DAO methods to translate redis-py errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.RedisError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises:
                - DataStoreTimeoutError on redis.exceptions.TimeoutError;
                - DataStoreConnectionError on redis.exceptions.ConnectionError;
                - DataStoreError on any other redis.exceptions.RedisError.
            The failed operation's name is included in the error message.

    Example:
        >>> @handle_redis_errors
        ... def count_visits(self, shortcode):
        ...     return self.redis.llen(shortcode)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        operation = method.__name__
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.TimeoutError as e:
            raise DataStoreTimeoutError(f'Redis operation timed out at {redis_address(self.redis)} (operation: {operation}).') from e
        except redis.exceptions.ConnectionError as e:
            raise DataStoreConnectionError(f"Can't connect to Redis at {redis_address(self.redis)} (operation: {operation}).") from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis operation failed at {redis_address(self.redis)} (operation: {operation}): {e}') from e

    return wrapper
