"""Shorten a target URL into a unique short code

This use case follows this procedure to shorten URLs:
    - Step 1: Validate the target URL (no I/O happens on invalid input)
    - Step 2: Normalize it
    - Step 3: Return the existing record if an equivalent target is stored
    - Step 4: Generate a candidate short code and check it against the store
    - Step 5: Save the new record, retrying on short code collisions
    - Step 6: Give up after MAX_GENERATION_ATTEMPTS collisions

Short code collisions are detected twice: before saving (lookup) and while
saving (the data store's uniqueness constraint). Both count against the same
attempt budget. A data store that enforces target uniqueness turns a lost
race on the same target into a lookup of the winner's record.

Data store failures are never retried here; they propagate to the caller.

Example:
    >>> from urlshortener.dao.memory import ShortURLMemoryDAO
    >>> shorten = ShortenURLUseCase(ShortURLMemoryDAO())
    >>> short_url = shorten.execute('https://Example.com/blog/')
    >>> short_url.target
    'https://example.com/blog'
    >>> shorten.execute('https://example.com/blog').shortcode == short_url.shortcode
    True
"""

import logging
from datetime import datetime, UTC
from collections.abc import Callable

from urlshortener.constants import Shortcode
from urlshortener.models import ShortURLModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError, TargetAlreadyExistsError
from urlshortener.exceptions import InvalidURLError, ShortcodeGenerationExhaustedError
from urlshortener.utils.shortener import generate_shortcode
from urlshortener.utils.validation import validate_url, normalize_url
from urlshortener.usecases.constants import (
    SHORTEN_SUCCESS,
    SHORTEN_DEDUPLICATED,
    SHORTCODE_COLLISION,
    SHORTCODE_GENERATION_EXHAUSTED,
    TARGET_REJECTED,
)


logger = logging.getLogger(__name__)


class ShortenURLUseCase:
    """Turn a raw target URL into a persisted, unique short URL record

    Attributes:
        short_url_dao (ShortURLBaseDAO):
            Data store holding short URL records.
        generate (Callable[[], str]):
            Short code candidate generator. Defaults to generate_shortcode.
        max_attempts (int):
            Maximum number of short code candidates tried per call.
    """

    def __init__(
        self,
        short_url_dao: ShortURLBaseDAO,
        generate: Callable[[], str] = generate_shortcode,
        max_attempts: int = Shortcode.MAX_GENERATION_ATTEMPTS,
    ):
        self.short_url_dao = short_url_dao
        self.generate = generate
        self.max_attempts = max_attempts

    def execute(self, target: str) -> ShortURLModel:
        """Shorten a target URL

        Args:
            target (str):
                Raw target URL supplied by the client.

        Returns:
            ShortURLModel:
                The newly saved record, or the existing record of an
                equivalent target.

        Raises:
            InvalidURLError:
                If the target URL is rejected by validation (see validate_url).
            ShortcodeGenerationExhaustedError:
                If every generated short code collided.
            DataStoreError:
                If the data store fails (never retried), or if it reports the
                target as taken but holds no record for it.
        """
        # 1- Validate target URL
        try:
            validate_url(target)
        except InvalidURLError as e:
            logger.info(
                'Target URL rejected.',
                extra={'event': TARGET_REJECTED, 'error_code': e.error_code},
            )
            raise

        # 2- Normalize target URL
        normalized = normalize_url(target)

        # 3- Return existing record for an equivalent target
        existing = self._find_by_target(normalized)
        if existing is not None:
            logger.info(
                'Target URL already shortened. Returning existing record.',
                extra={'shortcode': existing.shortcode, 'target': normalized, 'event': SHORTEN_DEDUPLICATED},
            )
            return existing

        # 4/5- Mint a fresh short code
        for attempt in range(1, self.max_attempts + 1):
            shortcode = self.generate()
            if self.short_url_dao.find_by_shortcode(shortcode) is not None:
                self._log_collision(shortcode, attempt)
                continue

            short_url = ShortURLModel(target=normalized, shortcode=shortcode, created_at=datetime.now(UTC))
            try:
                saved = self.short_url_dao.save(short_url)
            except ShortURLAlreadyExistsError:
                self._log_collision(shortcode, attempt)
                continue
            except TargetAlreadyExistsError as e:
                # Lost a race on the same target: return the winner's record
                winner = self.short_url_dao.find_by_shortcode(e.shortcode) if e.shortcode else None
                if winner is not None:
                    logger.info(
                        'Target URL shortened concurrently. Returning existing record.',
                        extra={'shortcode': winner.shortcode, 'target': normalized, 'event': SHORTEN_DEDUPLICATED},
                    )
                    return winner
                # A claim without its record is a corrupted store, not a collision
                raise DataStoreError(
                    f"Target '{normalized}' is claimed by short code '{e.shortcode}' but its record is missing."
                ) from e

            logger.info(
                'Shortened target URL.',
                extra={'shortcode': saved.shortcode, 'target': saved.target, 'event': SHORTEN_SUCCESS},
            )
            return saved

        # 6- Give up
        logger.error(
            'Failed to generate a unique short code.',
            extra={'target': normalized, 'attempts': self.max_attempts, 'event': SHORTCODE_GENERATION_EXHAUSTED},
        )
        raise ShortcodeGenerationExhaustedError(self.max_attempts)

    def _find_by_target(self, normalized: str) -> ShortURLModel | None:
        for short_url in self.short_url_dao.find_all():
            try:
                stored = normalize_url(short_url.target)
            except InvalidURLError:
                stored = short_url.target
            if stored == normalized:
                return short_url
        return None

    def _log_collision(self, shortcode: str, attempt: int) -> None:
        logger.warning(
            'Short code collision. Retrying.',
            extra={'shortcode': shortcode, 'attempt': attempt, 'event': SHORTCODE_COLLISION},
        )
