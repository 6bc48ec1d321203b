"""Resolve a short code back into its target URL

Absence is not an error: an unknown short code resolves to None and the
caller decides how to report it. Every successful resolution records a
visit BEFORE the target is returned, so a redirect only happens once the
visit has been counted by the data store.

Example:
    >>> resolve = ResolveURLUseCase(short_url_dao)
    >>> resolve.execute('q7FemOj2', client_tag='Mozilla/5.0')
    'https://example.com/blog'
    >>> resolve.execute('missing0') is None
    True
"""

import logging

from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.usecases.constants import RESOLVE_SUCCESS, RESOLVE_NOT_FOUND


logger = logging.getLogger(__name__)


class ResolveURLUseCase:
    def __init__(self, short_url_dao: ShortURLBaseDAO):
        self.short_url_dao = short_url_dao

    def execute(self, shortcode: str, client_tag: str | None = None) -> str | None:
        """Return the target URL of shortcode and record the visit

        Args:
            shortcode (str):
                Short code requested by the client.
            client_tag (str | None):
                Optional metadata about the client (e.g. user agent). Stored
                with the visit, never logged.

        Returns:
            str | None: the target URL, None if shortcode is unknown.

        Raises:
            DataStoreError:
                If the lookup or the visit write fails.
        """
        short_url = self.short_url_dao.find_by_shortcode(shortcode)
        if short_url is None:
            logger.info(
                'Short URL record not found.',
                extra={'shortcode': shortcode, 'event': RESOLVE_NOT_FOUND},
            )
            return None

        self.short_url_dao.record_visit(shortcode, client_tag=client_tag)
        logger.info(
            'Resolved short URL.',
            extra={'shortcode': shortcode, 'target': short_url.target, 'event': RESOLVE_SUCCESS},
        )
        return short_url.target
