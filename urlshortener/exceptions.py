from typing import Any

from urlshortener.constants import UNKNOWN_ERROR, UNKNOWN_ERROR_MESSAGE


class URLShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:urlshortener_error'
    status_code = 500

    def to_dict(self) -> dict[str, Any]:
        return {
            'error': type(self).__name__,
            'errorCode': self.error_code,
            'message': error_message_of(self),
            'statusCode': self.status_code,
        }


class InvalidURLError(URLShortenerError):
    """Base exception for target URLs rejected by validation.

    Always caused by client input. Never retried internally.
    """

    error_code = 'validation:invalid_url_error'
    status_code = 400


class EmptyURLError(InvalidURLError):
    """Raised when the target URL is missing, not a string, or blank."""

    error_code = 'validation:empty_url_error'


class MalformedURLError(InvalidURLError):
    """Raised when the target URL cannot be parsed as an absolute URL."""

    error_code = 'validation:malformed_url_error'


class ProtocolNotAllowedError(InvalidURLError):
    """Raised when the target URL uses any scheme other than https."""

    error_code = 'validation:protocol_not_allowed_error'


class MissingHostError(InvalidURLError):
    """Raised when the target URL has an empty host."""

    error_code = 'validation:missing_host_error'


class PrivateOrLocalHostError(InvalidURLError):
    """Raised when the target URL points to a loopback, private or literal IPv4 host."""

    error_code = 'validation:private_or_local_host_error'


class ShortcodeGenerationExhaustedError(URLShortenerError):
    """Raised when every short code generation attempt collided."""

    error_code = 'app:shortcode_generation_exhausted_error'

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f'Failed to generate a unique short code after {attempts} attempts.')


class ConfigurationError(URLShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


def error_code_of(error: BaseException) -> str:
    if isinstance(error, URLShortenerError):
        return error.error_code
    return UNKNOWN_ERROR


def status_code_of(error: BaseException) -> int:
    if isinstance(error, URLShortenerError):
        return error.status_code
    return 500


def error_message_of(error: BaseException) -> str:
    """Return a human readable message for any exception.

    Falls back to the class docstring summary for application errors raised
    without a message, and to a generic message for anything else.
    """
    message = str(error)
    if message:
        return message
    if isinstance(error, URLShortenerError) and type(error).__doc__:
        return type(error).__doc__.strip().splitlines()[0]
    return UNKNOWN_ERROR_MESSAGE
