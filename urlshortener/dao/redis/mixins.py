"""Client wiring shared by the Redis data stores

RedisClientMixin owns the redis-py client and the key schema of a Redis DAO,
and pings the server once at construction so that a misconfigured store is
reported when it is built rather than on its first query.

Example:
    >>> class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    ...     pass
    >>> ShortURLRedisDAO(redis_host='redis.internal', prefix='urlshortener:prod').healthcheck()
    True
"""

from typing import Optional

import redis

from urlshortener.dao.redis.redis_key_schema import RedisKeySchema
from urlshortener.dao.redis.helpers import redis_address
from urlshortener.dao.exceptions import DataStoreConnectionError


class RedisClientMixin:
    """Give a DAO a `redis` client and a `keys` schema

    Connection options are prefixed with `redis_` so that the `redis` section
    of the short_urls configuration can be splatted into the constructor as is.
    A ready client may be injected through `redis_client` instead (tests do).
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_socket_timeout: Optional[float] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Build (or adopt) the client and check the server answers

        Args:
            redis_socket_timeout (Optional[float]):
                Per-command timeout in seconds, None to wait forever.
                Expiry surfaces as DataStoreTimeoutError.
            prefix (Optional[str]):
                Namespace of every key, e.g. 'urlshortener:dev'.

        Raises:
            ValueError:
                If the port or database index is not an integer.
            DataStoreConnectionError:
                If the server does not answer PING.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self.healthcheck()

    def healthcheck(self, raise_error: bool = True) -> bool:
        """PING the server; False (or DataStoreConnectionError) when it is unreachable"""
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if raise_error:
                raise DataStoreConnectionError(
                    f"Can't connect to Redis at {redis_address(self.redis)}. Check the provided configuration parameters."
                ) from e
            return False
        else:
            return True
