from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest

from urlshortener.models import ShortURLModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.memory import ShortURLMemoryDAO


@pytest.fixture
def short_url_dao() -> ShortURLMemoryDAO:
    return ShortURLMemoryDAO()


@pytest.fixture
def mock_dao() -> ShortURLBaseDAO:
    """Mock an empty data store; tests override behaviour per method."""
    dao = MagicMock(spec=ShortURLBaseDAO)
    dao.find_all.return_value = []
    dao.find_by_shortcode.return_value = None
    dao.save.side_effect = lambda short_url: short_url
    dao.count_visits.return_value = 0
    return dao


@pytest.fixture
def stored_short_url() -> ShortURLModel:
    return ShortURLModel(
        target='https://example.com/blog',
        shortcode='q7FemOj2',
        created_at=datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC),
    )
