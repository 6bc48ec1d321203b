"""In-memory implementation of ShortURLBaseDAO

Keeps short URL records and their visits in process memory. Intended for tests
and local experiments: nothing survives a restart and nothing is shared
between processes.

Classes:
    ShortURLMemoryDAO:
        Thread-safe DAO storing ShortURLModel records in dictionaries.

Example:
    >>> from urlshortener.dao.memory import ShortURLMemoryDAO
    >>> dao = ShortURLMemoryDAO()
    >>> dao.save(ShortURLModel(target='https://example.com', shortcode='abc12345'))
    ShortURLModel(target='https://example.com', shortcode='abc12345', ...)
    >>> dao.record_visit('abc12345', client_tag='curl/8.5.0')
    >>> dao.count_visits('abc12345')
    1
"""

import threading

from beartype import beartype

from urlshortener.models import ShortURLModel, VisitModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.exceptions import ShortURLAlreadyExistsError, TargetAlreadyExistsError


class ShortURLMemoryDAO(ShortURLBaseDAO):
    """In-memory Data Access Object (DAO) for short URL mappings

    Short codes are always unique. Target uniqueness is only enforced when
    `unique_targets=True`, mirroring a data store with a unique index on
    targets.
    """

    def __init__(self, unique_targets: bool = False):
        self.unique_targets = unique_targets
        self._lock = threading.Lock()
        self._links: dict[str, ShortURLModel] = {}  # insertion ordered
        self._targets: dict[str, str] = {}
        self._visits: dict[str, list[VisitModel]] = {}

    @beartype
    def save(self, short_url: ShortURLModel, **kwargs) -> ShortURLModel:
        with self._lock:
            if self.unique_targets and short_url.target in self._targets:
                existing_shortcode = self._targets[short_url.target]
                raise TargetAlreadyExistsError(
                    f"Target '{short_url.target}' is already shortened as '{existing_shortcode}'.",
                    shortcode=existing_shortcode,
                )
            if short_url.shortcode in self._links:
                raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")

            self._links[short_url.shortcode] = short_url
            self._targets.setdefault(short_url.target, short_url.shortcode)
            return short_url

    @beartype
    def find_by_shortcode(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        with self._lock:
            return self._links.get(shortcode)

    @beartype
    def find_all(self, **kwargs) -> list[ShortURLModel]:
        with self._lock:
            return list(reversed(self._links.values()))

    @beartype
    def record_visit(self, shortcode: str, client_tag: str | None = None, **kwargs) -> None:
        with self._lock:
            if shortcode not in self._links:
                return
            self._visits.setdefault(shortcode, []).append(VisitModel(shortcode=shortcode, client_tag=client_tag))

    @beartype
    def count_visits(self, shortcode: str, **kwargs) -> int:
        with self._lock:
            return len(self._visits.get(shortcode, []))

    @beartype
    def visits(self, shortcode: str) -> list[VisitModel]:
        """Return a copy of the visits recorded for shortcode, oldest first."""
        with self._lock:
            return list(self._visits.get(shortcode, []))

    def healthcheck(self, raise_error: bool = True) -> bool:
        return True
