"""Entry points of the URL shortener

These functions are what an outer layer (HTTP handlers, CLI, workers) calls.
They wire the configured data store into the use cases.

The data store is selected by `load_config('short_urls')['active_backend']`
and built once per process:
    redis  -> ShortURLRedisDAO configured from the `redis` section
    memory -> ShortURLMemoryDAO

Functions:
    shorten(target: str) -> ShortURLModel
    resolve(shortcode: str, client_tag: str | None = None) -> str | None
    list_urls() -> list[ShortURLStatsModel]
    count_visits(shortcode: str) -> int
    healthcheck() -> bool

Example:
    >>> from urlshortener import app
    >>> short_url = app.shorten('https://example.com/blog/')
    >>> app.resolve(short_url.shortcode)
    'https://example.com/blog'
    >>> app.count_visits(short_url.shortcode)
    1
"""

import logging
import functools

from urlshortener.models import ShortURLModel, ShortURLStatsModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.memory import ShortURLMemoryDAO
from urlshortener.dao.redis import ShortURLRedisDAO
from urlshortener.exceptions import URLShortenerError
from urlshortener.usecases import ShortenURLUseCase, ResolveURLUseCase, ListURLsUseCase
from urlshortener.utils import load_config, app_prefix, initialize_logging


logger = logging.getLogger(__name__)


@functools.cache
def get_short_url_dao() -> ShortURLBaseDAO:
    """Build the configured short URL data store (once per process)

    Raises:
        FileNotFoundError:
            If the short_urls configuration for APP_ENV is missing.
        BadConfigurationError:
            If the configuration is invalid.
        DataStoreConnectionError:
            If Redis is unreachable.
    """
    app_config = load_config('short_urls')

    if app_config['active_backend'] == 'memory':
        logger.debug('Using in-memory backend for short URLs.')
        return ShortURLMemoryDAO()

    logger.debug('Using Redis backend for short URLs.')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    return ShortURLRedisDAO(**redis_config, prefix=app_prefix())


def shorten(target: str) -> ShortURLModel:
    return ShortenURLUseCase(get_short_url_dao()).execute(target)


def resolve(shortcode: str, client_tag: str | None = None) -> str | None:
    return ResolveURLUseCase(get_short_url_dao()).execute(shortcode, client_tag=client_tag)


def list_urls() -> list[ShortURLStatsModel]:
    return ListURLsUseCase(get_short_url_dao()).execute()


def count_visits(shortcode: str) -> int:
    return get_short_url_dao().count_visits(shortcode)


def healthcheck() -> bool:
    """Report whether the configured data store is reachable

    Configuration problems (missing or malformed document, non-numeric Redis
    port or database) and connection failures are all reported as False.
    """
    try:
        return get_short_url_dao().healthcheck(raise_error=False)
    except (URLShortenerError, FileNotFoundError, ValueError) as e:
        logger.warning('Healthcheck failed.', extra={'error': type(e).__name__, 'reason': str(e)})
        return False


initialize_logging()
