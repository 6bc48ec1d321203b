import string
from enum import StrEnum


class Shortcode:
    """Short code generation parameters."""

    # Base62 alphabet: 10 digits + 26 uppercase + 26 lowercase
    ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
    LENGTH = 8  # 62**8 ~ 2.18e14 codes
    MAX_GENERATION_ATTEMPTS = 10


class URLPolicy:
    """Rules applied to target URLs before they are shortened."""

    ALLOWED_SCHEME = 'https'
    DEFAULT_PORTS = {'http': 80, 'https': 443}
    MAX_LENGTH = 2048
    LOOPBACK_HOSTS = frozenset({'localhost', '127.0.0.1', '::1'})
    PRIVATE_HOST_PREFIXES = ('10.', '192.168.')


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        CONFIG_DIR = 'CONFIG_DIR'
        LOG_LEVEL = 'LOG_LEVEL'

    class Redis(StrEnum):
        HOST = 'REDIS_HOST'
        PORT = 'REDIS_PORT'
        DB = 'REDIS_DB'
        USERNAME = 'REDIS_USERNAME'
        PASSWORD = 'REDIS_PASSWORD'  # noqa: S105


# Error codes
UNKNOWN_ERROR = 'app:unknown_error'
UNKNOWN_ERROR_MESSAGE = 'An unexpected error occurred'
