"""Target URL validation and normalization

This module decides which URLs may be shortened and reduces accepted URLs
to a canonical form, so that logically equal URLs map to the same short code.

Rules (applied in order, first failure wins):
    1. Non-empty string after trimming whitespace        -> EmptyURLError
    2. Absolute URL with a scheme and '//' authority      -> MalformedURLError
    3. Scheme is exactly https                            -> ProtocolNotAllowedError
    4. Host is non-empty                                  -> MissingHostError
    5. Host is not loopback, 10.x, 192.168.x or any
       literal dotted-quad IPv4 address                   -> PrivateOrLocalHostError

Functions:
    validate_url(url: str) -> None
        Raise an InvalidURLError subclass if the URL may not be shortened.

    normalize_url(url: str) -> str
        Return the canonical form of a URL.

Example:
    >>> from urlshortener.utils.validation import validate_url, normalize_url
    >>> validate_url('https://Example.com/blog/')
    >>> normalize_url('  https://Example.com/blog/?page=2#top ')
    'https://example.com/blog?page=2#top'
    >>> validate_url('http://example.com')
    Traceback (most recent call last):
        ...
    urlshortener.exceptions.ProtocolNotAllowedError: URL must use the https protocol (given scheme: 'http').
"""

import re
from urllib.parse import SplitResult, urlsplit

from urlshortener.constants import URLPolicy
from urlshortener.exceptions import (
    EmptyURLError,
    MalformedURLError,
    MissingHostError,
    PrivateOrLocalHostError,
    ProtocolNotAllowedError,
)


DOTTED_QUAD = re.compile(r'^\d+\.\d+\.\d+\.\d+$')
AUTHORITY_END = re.compile(r'[/?#]')


def _split(url: str) -> SplitResult:
    """Split an already trimmed URL, enforcing the structural rule (2).

    Raises:
        MalformedURLError:
            If the URL has no scheme, no '//' authority, whitespace in the
            authority, an invalid port, or cannot be parsed at all.
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise MalformedURLError(f'Invalid URL format: {url!r}.') from e

    if not parts.scheme:
        raise MalformedURLError(f'URL must be absolute (missing scheme): {url!r}.')

    # urlsplit() accepts 'scheme:path' forms (e.g. 'mailto:x', 'example.com:80')
    remainder = url[len(parts.scheme) + 1 :]
    if not remainder.startswith('//'):
        raise MalformedURLError(f"URL must contain a '//' authority: {url!r}.")

    authority = AUTHORITY_END.split(remainder[2:], maxsplit=1)[0]
    if any(char.isspace() for char in authority):
        raise MalformedURLError(f'URL host must not contain whitespace: {url!r}.')

    try:
        parts.port
    except ValueError as e:
        raise MalformedURLError(f'URL has an invalid port: {url!r}.') from e

    return parts


def _is_private_or_local(host: str) -> bool:
    return host in URLPolicy.LOOPBACK_HOSTS or host.startswith(URLPolicy.PRIVATE_HOST_PREFIXES) or DOTTED_QUAD.match(host) is not None


def validate_url(url: str) -> None:
    """Validate that a URL is a public https web URL

    Args:
        url (str):
            Raw URL supplied by the client. Surrounding whitespace is ignored.

    Raises:
        EmptyURLError:
            If the URL is not a string, or is empty after trimming.
        MalformedURLError:
            If the URL is too long or cannot be parsed as an absolute URL.
        ProtocolNotAllowedError:
            If the scheme is anything other than https.
        MissingHostError:
            If the URL has no host.
        PrivateOrLocalHostError:
            If the host is loopback, private (10.x, 192.168.x) or a literal IPv4 address.

    Example:
        >>> validate_url('https://example.com')
        >>> validate_url('https://192.168.1.1')
        Traceback (most recent call last):
            ...
        urlshortener.exceptions.PrivateOrLocalHostError: URL must not point to a local or private address (given host: '192.168.1.1').
    """
    if not isinstance(url, str):
        raise EmptyURLError(f'URL must be a non-empty string (given type: {type(url)}).')

    trimmed = url.strip()
    if not trimmed:
        raise EmptyURLError('URL cannot be empty or whitespace only.')
    if len(trimmed) > URLPolicy.MAX_LENGTH:
        raise MalformedURLError(f'URL is too long (max {URLPolicy.MAX_LENGTH} characters, given {len(trimmed)}).')

    parts = _split(trimmed)

    if parts.scheme != URLPolicy.ALLOWED_SCHEME:
        raise ProtocolNotAllowedError(f'URL must use the {URLPolicy.ALLOWED_SCHEME} protocol (given scheme: {parts.scheme!r}).')

    host = parts.hostname
    if not host:
        raise MissingHostError(f'URL must have a valid host: {trimmed!r}.')

    if _is_private_or_local(host):
        raise PrivateOrLocalHostError(f'URL must not point to a local or private address (given host: {host!r}).')


def normalize_url(url: str) -> str:
    """Return the canonical form of a URL

    The URL is trimmed and rebuilt as scheme://host[:port] followed by the
    path without its trailing slash, then the query string and fragment.
    The host is lower-cased, userinfo is dropped and the scheme's default
    port is omitted. The function is idempotent.

    A run of trailing slashes is removed as a whole, so 'https://a.com/x//'
    and 'https://a.com/x/' both normalize to 'https://a.com/x'.

    Args:
        url (str):
            URL to normalize. It is expected to have passed validate_url().

    Returns:
        str: normalized URL.

    Raises:
        MalformedURLError:
            If the URL cannot be parsed as an absolute URL.

    Example:
        >>> normalize_url('https://example.com/')
        'https://example.com'
        >>> normalize_url('https://EXAMPLE.com:443/a/b/?q=1')
        'https://example.com/a/b?q=1'
    """
    parts = _split(url.strip())

    host = parts.hostname or ''
    if ':' in host:
        host = f'[{host}]'  # IPv6 literal

    port = parts.port
    netloc = host if port is None or port == URLPolicy.DEFAULT_PORTS.get(parts.scheme) else f'{host}:{port}'

    normalized = f'{parts.scheme}://{netloc}{parts.path.rstrip("/")}'
    if parts.query:
        normalized += f'?{parts.query}'
    if parts.fragment:
        normalized += f'#{parts.fragment}'
    return normalized
