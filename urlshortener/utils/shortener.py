"""Shortcode generation utility

This module provides helpers for generating random, fixed-length base62 short
codes and for reasoning about the size of the short code space.

Collision avoidance is NOT handled here. generate_shortcode() only returns a
candidate; the caller must check it against the data store.

Functions:
    generate_shortcode(length=8, alphabet=Shortcode.ALPHABET) -> str
        Generate a uniformly random short code.

    keyspace_size(length=8) -> int
        Number of distinct short codes of the given length.

    keyspace_utilization(total, length=8) -> float
        Fraction of the short code space already in use.

Example:
    >>> from urlshortener.utils import generate_shortcode
    >>> generate_shortcode()
    'q7FemOj2'
    >>> keyspace_size()
    218340105584896
"""

import secrets

from urlshortener.constants import Shortcode


def generate_shortcode(length: int = Shortcode.LENGTH, alphabet: str = Shortcode.ALPHABET) -> str:
    """Generate a random short code.

    Every character is drawn independently and uniformly from the alphabet
    with a cryptographically secure source, so codes are not guessable from
    previously issued ones.

    Args:
        length (int, optional):
            Length of the resulting code. Defaults to 8.

        alphabet (str, optional):
            Symbols to draw from. Defaults to base62 [0-9A-Za-z].

    Returns:
        str: A random short code.

    Raises:
        ValueError: If length is not positive or the alphabet is empty.
    """
    if length <= 0:
        raise ValueError(f'Short code length must be a positive integer (given value: {length}).')
    if not alphabet:
        raise ValueError('Short code alphabet must be a non-empty string.')

    return ''.join(secrets.choice(alphabet) for _ in range(length))


def keyspace_size(length: int = Shortcode.LENGTH) -> int:
    return len(Shortcode.ALPHABET) ** length


def keyspace_utilization(total: int, length: int = Shortcode.LENGTH) -> float:
    """Return the fraction of the short code space used by `total` codes.

    Example:
        >>> keyspace_utilization(109_170_052_792_448)
        0.5
    """
    if total < 0:
        raise ValueError(f'Total must be a non-negative integer (given value: {total}).')
    return total / keyspace_size(length)
