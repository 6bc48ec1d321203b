"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO for
storing ShortURLModel records and their visits.

Responsibilities:
    - Save and retrieve short URLs from Redis;
    - Enforce uniqueness of both short codes and targets;
    - Maintain an index of all links ordered by creation time;
    - Append visits and count them per link;
    - Translate redis-py failures into DAO exceptions.

Key layout (see RedisKeySchema):
    <prefix>:links:<shortcode>          STRING  {"target": ..., "created_at": ...}
    <prefix>:links:<shortcode>:visits   LIST    {"client_tag": ..., "visited_at": ...}
    <prefix>:links:index                ZSET    shortcode scored by creation timestamp
    <prefix>:targets:<hash(target)>     STRING  shortcode owning the target

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from urlshortener.models import ShortURLModel
    >>> from urlshortener.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="app:dev")

    >>> short_url = ShortURLModel(
    ...     target="https://example.com/page",
    ...     shortcode="abc12345"
    ... )
    >>> dao.save(short_url)
    ShortURLModel(target='https://example.com/page', shortcode='abc12345', created_at=...)

    >>> dao.find_by_shortcode("abc12345").target
    'https://example.com/page'

    >>> dao.record_visit("abc12345")
    >>> dao.count_visits("abc12345")
    1
"""

import json
from datetime import datetime

import redis
from beartype import beartype

from urlshortener.models import ShortURLModel, VisitModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.redis.mixins import RedisClientMixin
from urlshortener.dao.redis.helpers import handle_redis_errors
from urlshortener.dao.exceptions import ShortURLAlreadyExistsError, TargetAlreadyExistsError


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        save(short_url: ShortURLModel, **kwargs) -> ShortURLModel:
            Claim the target and store the record in a single transaction.
            Raises TargetAlreadyExistsError when the target is already shortened.
            Raises ShortURLAlreadyExistsError when the short code is taken.

        find_by_shortcode(shortcode: str, **kwargs) -> ShortURLModel | None:
            Retrieve a short URL record by shortcode.

        find_all(**kwargs) -> list[ShortURLModel]:
            Retrieve every short URL record, newest first.

        record_visit(shortcode: str, client_tag: str | None = None, **kwargs) -> None:
            Append a visit to an existing link. Ignores unknown shortcodes.

        count_visits(shortcode: str, **kwargs) -> int:
            Count the visits of a link (0 for unknown shortcodes).

        All methods raise DataStoreConnectionError, DataStoreTimeoutError or
        DataStoreError on Redis failures.
    """

    @handle_redis_errors
    @beartype
    def save(self, short_url: ShortURLModel, **kwargs) -> ShortURLModel:
        """Save a short URL mapping into Redis

        The target claim, the record and the index entry are written in one
        MULTI/EXEC transaction guarded by WATCH on the target and short code
        keys. Either all three are stored or none is, and a concurrent writer
        touching either key aborts this transaction, which is then re-checked.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
                Its target is expected to be normalized.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLModel: the saved record.

        Raises:
            TargetAlreadyExistsError:
                If the target is already mapped to another short code. The
                error carries that short code.
            ShortURLAlreadyExistsError:
                If a short URL with the same shortcode already exists.
        """
        target_key = self.keys.target_key(short_url.target)
        link_key = self.keys.link_key(short_url.shortcode)
        record = json.dumps({'target': short_url.target, 'created_at': short_url.created_at.isoformat()})

        with self.redis.pipeline() as pipe:
            while True:
                try:
                    # 1- Watch both claims
                    pipe.watch(target_key, link_key)

                    # 2- Check the target and the short code are free
                    existing_shortcode = pipe.get(target_key)
                    if existing_shortcode is not None:
                        raise TargetAlreadyExistsError(
                            f"Target '{short_url.target}' is already shortened as '{existing_shortcode}'.",
                            shortcode=existing_shortcode,
                        )
                    if pipe.exists(link_key):
                        raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")

                    # 3- Claim the target, store the record and index it atomically
                    pipe.multi()
                    pipe.set(target_key, short_url.shortcode)
                    pipe.set(link_key, record)
                    pipe.zadd(self.keys.links_index_key(), {short_url.shortcode: short_url.created_at.timestamp()})
                    pipe.execute()
                    return short_url
                except redis.exceptions.WatchError:
                    # A concurrent writer touched one of the keys: check again
                    continue

    @handle_redis_errors
    @beartype
    def find_by_shortcode(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        """Retrieve a stored short URL mapping by shortcode

        Returns:
            ShortURLModel | None:
                The retrieved ShortURLModel instance, None if not found.

        Example:
            >>> dao.find_by_shortcode('abc12345')
            ShortURLModel(target='https://example.com', shortcode='abc12345', ...)
            >>> dao.find_by_shortcode('missing0') is None
            True
        """
        raw = self.redis.get(self.keys.link_key(shortcode))
        if raw is None:
            return None
        return self._to_model(shortcode, raw)

    @handle_redis_errors
    @beartype
    def find_all(self, **kwargs) -> list[ShortURLModel]:
        """Retrieve every stored short URL mapping, newest first

        Links present in the index but missing their record (e.g. a key
        removed by hand) are skipped.
        """
        shortcodes = self.redis.zrevrange(self.keys.links_index_key(), 0, -1)
        if not shortcodes:
            return []

        records = self.redis.mget([self.keys.link_key(shortcode) for shortcode in shortcodes])
        return [self._to_model(shortcode, raw) for shortcode, raw in zip(shortcodes, records) if raw is not None]

    @handle_redis_errors
    @beartype
    def record_visit(self, shortcode: str, client_tag: str | None = None, **kwargs) -> None:
        """Append a visit to the link's visit log

        NOTE: visits of unknown shortcodes are silently dropped.

        Args:
            shortcode (str):
                The short code of the visited link.
            client_tag (str | None):
                Optional metadata about the visiting client (e.g. user agent).
        """
        if not self.redis.exists(self.keys.link_key(shortcode)):
            return

        visit = VisitModel(shortcode=shortcode, client_tag=client_tag)
        entry = json.dumps({'client_tag': visit.client_tag, 'visited_at': visit.visited_at.isoformat()})
        self.redis.rpush(self.keys.link_visits_key(shortcode), entry)

    @handle_redis_errors
    @beartype
    def count_visits(self, shortcode: str, **kwargs) -> int:
        """Count the visits of a link

        Example:
            >>> dao.count_visits('abc12345')
            42
        """
        return int(self.redis.llen(self.keys.link_visits_key(shortcode)))

    @staticmethod
    def _to_model(shortcode: str, raw: str | bytes) -> ShortURLModel:
        data = json.loads(raw)
        return ShortURLModel(
            target=data['target'],
            shortcode=shortcode,
            created_at=datetime.fromisoformat(data['created_at']),
        )
