import re
import json
from datetime import datetime, UTC
from unittest.mock import MagicMock, call

import pytest
import redis
import xxhash
from beartype.roar import BeartypeCallHintParamViolation
from freezegun import freeze_time

from urlshortener.models import ShortURLModel
from urlshortener.dao.exceptions import (
    DataStoreConnectionError,
    DataStoreTimeoutError,
    ShortURLAlreadyExistsError,
    TargetAlreadyExistsError,
)
from urlshortener.dao.redis import RedisKeySchema, ShortURLRedisDAO


LINK_KEY = 'testapp:test:links:abc12345'
VISITS_KEY = 'testapp:test:links:abc12345:visits'
INDEX_KEY = 'testapp:test:links:index'
TARGET_KEY = 'testapp:test:targets:0123456789abcdef0123456789abcdef'


class TestShortURLRedisDAO:
    app_prefix: str
    key_schema: RedisKeySchema
    dao: ShortURLRedisDAO
    redis_client: redis.Redis

    @pytest.fixture
    def key_schema(self) -> RedisKeySchema:
        mock = MagicMock(spec=RedisKeySchema)
        mock.link_key.side_effect = lambda shortcode: f'testapp:test:links:{shortcode}'
        mock.link_visits_key.side_effect = lambda shortcode: f'testapp:test:links:{shortcode}:visits'
        mock.links_index_key.return_value = INDEX_KEY
        mock.target_key.return_value = TARGET_KEY
        return mock

    @pytest.fixture
    def dao(self, redis_client: redis.Redis, key_schema: RedisKeySchema, app_prefix: str) -> ShortURLRedisDAO:
        dao = ShortURLRedisDAO(redis_client=redis_client, prefix=app_prefix)
        dao.keys = key_schema
        return dao

    @pytest.fixture(autouse=True)
    def setup(self, dao: ShortURLRedisDAO, redis_client: redis.Redis):
        self.dao = dao
        self.redis_client = redis_client

    @pytest.fixture
    def short_url(self) -> ShortURLModel:
        return ShortURLModel(
            target='https://example.com/test',
            shortcode='abc12345',
            created_at=datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC),
        )

    # -------------------------------
    # save
    # -------------------------------

    def test_save_short_url(self, short_url: ShortURLModel):
        record = json.dumps({'target': 'https://example.com/test', 'created_at': '2025-10-15T12:00:00+00:00'})

        result = self.dao.save(short_url)

        assert result == short_url
        self.dao.keys.target_key.assert_called_once_with('https://example.com/test')
        self.redis_client.watch.assert_called_once_with(TARGET_KEY, LINK_KEY)
        self.redis_client.multi.assert_called_once()
        self.redis_client.set.assert_has_calls(
            [
                call(TARGET_KEY, 'abc12345'),
                call(LINK_KEY, record),
            ],
            any_order=False,
        )
        self.redis_client.zadd.assert_called_once_with(INDEX_KEY, {'abc12345': short_url.created_at.timestamp()})
        self.redis_client.execute.assert_called_once()
        self.redis_client.delete.assert_not_called()

    def test_save_writes_only_inside_the_transaction(self, short_url: ShortURLModel):
        self.dao.save(short_url)

        names = [name for name, _, _ in self.redis_client.mock_calls]
        multi_at = names.index('multi')
        assert names.index('execute') > multi_at
        assert all(index > multi_at for index, name in enumerate(names) if name in ('set', 'zadd'))

    def test_save_short_url_whose_target_already_exists(self, short_url: ShortURLModel):
        self.redis_client.get.return_value = 'zzz99999'

        with pytest.raises(TargetAlreadyExistsError, match=re.escape("Target 'https://example.com/test' is already shortened as 'zzz99999'.")) as exc_info:
            self.dao.save(short_url)

        assert exc_info.value.shortcode == 'zzz99999'
        self.redis_client.get.assert_called_once_with(TARGET_KEY)
        self.redis_client.multi.assert_not_called()
        self.redis_client.set.assert_not_called()
        self.redis_client.zadd.assert_not_called()

    def test_save_short_url_which_already_exists(self, short_url: ShortURLModel):
        self.redis_client.exists.return_value = 1

        with pytest.raises(ShortURLAlreadyExistsError, match=re.escape("Short URL with code 'abc12345' already exists.")):
            self.dao.save(short_url)

        # Nothing was claimed, so nothing needs releasing
        self.redis_client.multi.assert_not_called()
        self.redis_client.set.assert_not_called()
        self.redis_client.delete.assert_not_called()

    def test_save_retries_when_a_watched_key_changes(self, short_url: ShortURLModel):
        self.redis_client.execute.side_effect = [redis.exceptions.WatchError(), [True, True, 1]]

        assert self.dao.save(short_url) == short_url

        assert self.redis_client.watch.call_count == 2
        assert self.redis_client.execute.call_count == 2

    def test_save_detects_target_claimed_by_concurrent_writer(self, short_url: ShortURLModel):
        self.redis_client.execute.side_effect = redis.exceptions.WatchError()
        self.redis_client.get.side_effect = [None, 'zzz99999']

        with pytest.raises(TargetAlreadyExistsError) as exc_info:
            self.dao.save(short_url)

        assert exc_info.value.shortcode == 'zzz99999'
        assert self.redis_client.execute.call_count == 1

    def test_save_failing_on_write_leaves_no_claim_behind(self, short_url: ShortURLModel):
        self.redis_client.execute.side_effect = redis.exceptions.TimeoutError('Timeout reading from socket')

        with pytest.raises(DataStoreTimeoutError, match=re.escape('(operation: save)')):
            self.dao.save(short_url)

        # Every write was queued in the aborted transaction, none was sent on its own
        names = [name for name, _, _ in self.redis_client.mock_calls]
        multi_at = names.index('multi')
        assert all(index > multi_at for index, name in enumerate(names) if name in ('set', 'zadd'))
        self.redis_client.delete.assert_not_called()

    def test_save_with_real_key_schema(self, redis_client: redis.Redis, app_prefix: str, short_url: ShortURLModel):
        dao = ShortURLRedisDAO(redis_client=redis_client, prefix=app_prefix)
        target_key = f'testapp:test:targets:{xxhash.xxh3_128_hexdigest(b"https://example.com/test")}'

        assert dao.save(short_url) == short_url

        redis_client.watch.assert_called_once_with(target_key, LINK_KEY)
        redis_client.set.assert_any_call(target_key, 'abc12345')

    def test_save_rejects_non_model(self):
        with pytest.raises(BeartypeCallHintParamViolation):
            self.dao.save({'target': 'https://example.com', 'shortcode': 'abc12345'})
        self.redis_client.set.assert_not_called()

    # -------------------------------
    # find_by_shortcode
    # -------------------------------

    def test_find_by_shortcode(self):
        self.redis_client.get.return_value = json.dumps({'target': 'https://example.com/test', 'created_at': '2025-10-15T12:00:00+00:00'})

        short_url = self.dao.find_by_shortcode('abc12345')

        assert isinstance(short_url, ShortURLModel)
        assert short_url.target == 'https://example.com/test'
        assert short_url.shortcode == 'abc12345'
        assert short_url.created_at == datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)
        self.redis_client.get.assert_called_once_with(LINK_KEY)

    def test_find_by_shortcode_which_does_not_exist(self):
        self.redis_client.get.return_value = None
        assert self.dao.find_by_shortcode('abc12345') is None

    # -------------------------------
    # find_all
    # -------------------------------

    def test_find_all_newest_first(self):
        self.redis_client.zrevrange.return_value = ['new00000', 'old00000']
        self.redis_client.mget.return_value = [
            json.dumps({'target': 'https://example.com/new', 'created_at': '2025-10-16T00:00:00+00:00'}),
            json.dumps({'target': 'https://example.com/old', 'created_at': '2025-10-15T00:00:00+00:00'}),
        ]

        result = self.dao.find_all()

        assert [short_url.shortcode for short_url in result] == ['new00000', 'old00000']
        assert [short_url.target for short_url in result] == ['https://example.com/new', 'https://example.com/old']
        self.redis_client.zrevrange.assert_called_once_with(INDEX_KEY, 0, -1)
        self.redis_client.mget.assert_called_once_with(['testapp:test:links:new00000', 'testapp:test:links:old00000'])

    def test_find_all_skips_missing_records(self):
        self.redis_client.zrevrange.return_value = ['new00000', 'gone0000']
        self.redis_client.mget.return_value = [
            json.dumps({'target': 'https://example.com/new', 'created_at': '2025-10-16T00:00:00+00:00'}),
            None,
        ]

        result = self.dao.find_all()

        assert [short_url.shortcode for short_url in result] == ['new00000']

    def test_find_all_empty(self):
        self.redis_client.zrevrange.return_value = []
        assert self.dao.find_all() == []
        self.redis_client.mget.assert_not_called()

    # -------------------------------
    # record_visit / count_visits
    # -------------------------------

    @freeze_time('2025-10-15 12:30:00')
    def test_record_visit(self):
        self.redis_client.exists.return_value = 1

        self.dao.record_visit('abc12345', client_tag='Mozilla/5.0')

        self.redis_client.exists.assert_called_once_with(LINK_KEY)
        self.redis_client.rpush.assert_called_once_with(
            VISITS_KEY,
            json.dumps({'client_tag': 'Mozilla/5.0', 'visited_at': '2025-10-15T12:30:00+00:00'}),
        )

    def test_record_visit_of_unknown_shortcode_is_noop(self):
        self.redis_client.exists.return_value = 0

        assert self.dao.record_visit('abc12345') is None
        self.redis_client.rpush.assert_not_called()

    def test_count_visits(self):
        self.redis_client.llen.return_value = 42
        assert self.dao.count_visits('abc12345') == 42
        self.redis_client.llen.assert_called_once_with(VISITS_KEY)

    def test_count_visits_of_unknown_shortcode(self):
        self.redis_client.llen.return_value = 0
        assert self.dao.count_visits('unknown0') == 0

    # -------------------------------
    # error translation
    # -------------------------------

    def test_connection_error_is_translated(self):
        self.redis_client.get.side_effect = redis.exceptions.ConnectionError('Connection refused')

        with pytest.raises(DataStoreConnectionError, match=re.escape('(operation: find_by_shortcode)')):
            self.dao.find_by_shortcode('abc12345')

    def test_timeout_error_is_translated(self, short_url: ShortURLModel):
        self.redis_client.watch.side_effect = redis.exceptions.TimeoutError('Timeout writing to socket')

        with pytest.raises(DataStoreTimeoutError, match=re.escape('(operation: save)')):
            self.dao.save(short_url)
