"""Utility functions for application configuration management.

Configuration lives in YAML documents, one per application section and
environment (`APP_ENV`):

    config/
    └── short_urls/
        ├── local.yaml
        ├── dev.yaml
        └── prod.yaml

Each document names the active data store backend and its settings:

    active_backend: redis
    redis:
      host: localhost
      port: 6379
      db: 0

`REDIS_*` environment variables take precedence over the document's `redis`
section, so secrets never have to be committed to the YAML files.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the absolute path to the project root directory, using
        `PROJECT_ROOT` when available.

    config_dir() -> Path
        Return the directory holding per-section configuration documents.

    load_yaml(path: Path) -> dict
        Safely load a YAML document, defaulting to {} for empty files.

    load_config(section: str) -> dict
        Load configuration for a given section and return it as a Python
        dictionary with environment overrides applied.

Example:
    >>> from urlshortener.utils.config import load_config
    >>> config = load_config('short_urls')
    >>> config['active_backend']
    'redis'
    >>> config['redis']['host']
    'localhost'
"""

import os
import logging
import functools
from pathlib import Path
from typing import Any
from collections.abc import Callable

import yaml

from urlshortener.constants import ENV
from urlshortener.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)

BACKENDS = frozenset({'redis', 'memory'})
DEFAULT_BACKEND = 'redis'

# Environment variable -> (redis section key, value type)
REDIS_OVERRIDES = {
    ENV.Redis.HOST: ('host', str),
    ENV.Redis.PORT: ('port', int),
    ENV.Redis.DB: ('db', int),
    ENV.Redis.USERNAME: ('username', str),
    ENV.Redis.PASSWORD: ('password', str),
}


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Reads PROJECT_ROOT, falling back to the repository root (two levels above
    this package's `utils` directory).
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, Path(__file__).resolve().parents[2]))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'urlshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'urlshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def config_dir() -> Path:
    return Path(os.environ.get(ENV.App.CONFIG_DIR, project_root() / 'config'))


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file into a Python dictionary.

    Args:
        path (Path):
            Path to a YAML file.

    Returns:
        dict[str, Any]:
            Parsed YAML document. Returns {} for empty files.

    Raises:
        FileNotFoundError:
            If the file does not exist.
        BadConfigurationError:
            If the document is not valid YAML or is not a mapping.
    """
    if not path.is_file():
        raise FileNotFoundError(f'YAML not found: {path}')
    with path.open('r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise BadConfigurationError(f'Configuration document {path} is not valid YAML.') from e

    data = data or {}
    if not isinstance(data, dict):
        raise BadConfigurationError(f'Configuration document {path} must be a mapping (given type: {type(data).__name__}).')
    return data


def apply_environment_overrides(func: Callable[[str], dict]) -> Callable[[str], dict]:
    """Decorator: overlay `REDIS_*` environment variables on the loaded config

    Behavior:
        - Call the wrapped function to load the section's document.
        - Validate `active_backend` (defaults to 'redis').
        - For every REDIS_* variable that is set, overwrite the matching key
          of the `redis` section, converting ports and db indexes to int.

    Raises:
        BadConfigurationError:
            If the backend is unknown or an override has the wrong type.
    """

    @functools.wraps(func)
    def wrapper(section: str, *args, **kwargs) -> dict:
        config = func(section, *args, **kwargs)

        backend = config.setdefault('active_backend', DEFAULT_BACKEND)
        if backend not in BACKENDS:
            raise BadConfigurationError(f"Unknown backend '{backend}' in '{section}' configuration (expected one of: {', '.join(sorted(BACKENDS))}).")

        redis_config = dict(config.get('redis') or {})
        for name, (key, cast) in REDIS_OVERRIDES.items():
            value = os.environ.get(name)
            if value is None:
                continue
            try:
                redis_config[key] = cast(value)
            except ValueError as e:
                raise BadConfigurationError(f'Environment variable {name} must be of type {cast.__name__} (given value: {value!r}).') from e
            logger.debug('Applied environment override.', extra={'section': section, 'variable': name})

        config['redis'] = redis_config
        return config

    return wrapper


@apply_environment_overrides
def load_config(section: str) -> dict:
    """Load configuration for a given application section

    Args:
        section (str):
            Name of the configuration section (e.g., "short_urls").

    Returns:
        dict: The section's configuration for the current APP_ENV.

    Raises:
        FileNotFoundError:
            If config/<section>/<app env>.yaml does not exist.
        BadConfigurationError:
            If the document is malformed.

    Example:
        >>> load_config('short_urls')['redis']['port']
        6379
    """
    path = config_dir() / section / f'{app_env()}.yaml'
    logger.debug('Loading configuration.', extra={'section': section, 'path': str(path)})
    return load_yaml(path)
