"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, in-memory, PostgreSQL).

Responsibilities:
    - Provide an interface for saving and retrieving ShortURLModel objects.
    - Provide an interface for recording and counting link visits.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlshortener.models import ShortURLModel
        >>> from urlshortener.dao.redis import ShortURLRedisDAO

        >>> dao = ShortURLRedisDAO(...)

        >>> short_url = ShortURLModel(
        ...     target="https://example.com/blog/article-123",
        ...     shortcode="a1B2c3D4",
        ... )
        >>> dao.save(short_url)
        ShortURLModel(target='https://example.com/blog/article-123', shortcode='a1B2c3D4', ...)

        >>> dao.find_by_shortcode("a1B2c3D4").target
        'https://example.com/blog/article-123'

        >>> dao.record_visit("a1B2c3D4", client_tag="Mozilla/5.0")
        >>> dao.count_visits("a1B2c3D4")
        1
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from urlshortener.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        save(short_url: ShortURLModel, **kwargs) -> ShortURLModel:
            Persist a new ShortURLModel.
            Raises ShortURLAlreadyExistsError if the short code already exists.
            Raises DataStoreError (or a subclass) on write failure.

        find_by_shortcode(shortcode: str, **kwargs) -> ShortURLModel | None:
            Retrieve a ShortURLModel by short code. Returns None if not found.

        find_all(**kwargs) -> Sequence[ShortURLModel]:
            Retrieve every ShortURLModel, most recently created first.

        record_visit(shortcode: str, client_tag: str | None = None, **kwargs) -> None:
            Append a visit to the link. No-op for unknown short codes.

        count_visits(shortcode: str, **kwargs) -> int:
            Count the visits of a link. Returns 0 for unknown short codes.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLRedisDAO or
        ShortURLMemoryDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Records are immutable once saved. The DAO does not provide an
          interface to update or delete them.
        - Implementations may additionally enforce uniqueness of targets and
          raise TargetAlreadyExistsError from save().
    """

    @abstractmethod
    def save(self, short_url: ShortURLModel, **kwargs) -> ShortURLModel:
        """Persist a new ShortURLModel in the data store.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be saved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: the saved record.

        Raises:
            ShortURLAlreadyExistsError:
                If a ShortURLModel with the same short code already exists.

            TargetAlreadyExistsError:
                If the data store enforces target uniqueness and the target
                is already shortened.

            DataStoreConnectionError:
                If the data store is unreachable.

            DataStoreTimeoutError:
                If the operation exceeds its deadline.

            DataStoreError:
                If there is any other error in the data store.
        """
        pass

    @abstractmethod
    def find_by_shortcode(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        """Retrieve a ShortURLModel from the data store by its short code.

        Args:
            shortcode (str):
                The short code of the ShortURLModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel | None: The ShortURLModel instance if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_all(self, **kwargs) -> Sequence[ShortURLModel]:
        """Retrieve all ShortURLModel records, most recently created first.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def record_visit(self, shortcode: str, client_tag: str | None = None, **kwargs) -> None:
        """Append a visit to the link identified by shortcode.

        Args:
            shortcode (str):
                The short code of the visited link.

            client_tag (str | None):
                Optional metadata about the visiting client (e.g. user agent).

            **kwargs:
                Additional keyword arguments, used by data store.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count_visits(self, shortcode: str, **kwargs) -> int:
        """Count the visits recorded for the link identified by shortcode.

        Returns:
            int: number of visits, 0 if the short code is unknown.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
