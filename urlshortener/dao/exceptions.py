from urlshortener.exceptions import URLShortenerError


class DAOError(URLShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class DataStoreError(DAOError):
    """Raised when the data store fails to read or write data."""

    error_code = 'dao:data_store_error'
    status_code = 503


class DataStoreConnectionError(DataStoreError):
    """Raised when the data store is unreachable."""

    error_code = 'dao:data_store_connection_error'


class DataStoreTimeoutError(DataStoreError):
    """Raised when a data store operation exceeds its deadline."""

    error_code = 'dao:data_store_timeout_error'


class ShortURLAlreadyExistsError(DAOError):
    """Raised when saving a ShortURLModel whose shortcode is already taken."""

    error_code = 'dao:short_url_already_exists_error'
    status_code = 409


class TargetAlreadyExistsError(DAOError):
    """Raised when saving a ShortURLModel whose target is already shortened.

    Only raised by data stores that enforce target uniqueness.
    """

    error_code = 'dao:target_already_exists_error'
    status_code = 409

    def __init__(self, message: str = '', shortcode: str | None = None):
        self.shortcode = shortcode
        super().__init__(message)
