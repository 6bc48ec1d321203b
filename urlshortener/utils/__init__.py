from urlshortener.utils.config import app_env, app_name, project_root, app_prefix, load_config
from urlshortener.utils.shortener import generate_shortcode, keyspace_size, keyspace_utilization
from urlshortener.utils.validation import validate_url, normalize_url
from urlshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'keyspace_size',
    'keyspace_utilization',
    'validate_url',
    'normalize_url',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'initialize_logging',
]
