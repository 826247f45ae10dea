"""Shortcode generation utility

This module provides the pure helpers behind short code generation and
custom code validation. Uniqueness is not handled here; see
shortlinks.engine.code_generator.CodeGenerator.

Functions:
    generate_shortcode(length=6, rng=None):
        Draw a random Base62 short code.

    is_valid_custom_code(code):
        Check a caller-supplied short code against the custom code format.

Example:
    >>> import random
    >>> from shortlinks.utils import generate_shortcode
    >>> len(generate_shortcode(6, rng=random.Random(42)))
    6
    >>> is_valid_custom_code('spring-sale')
    True
    >>> is_valid_custom_code('no')
    False
"""

import random
import re
from typing import Optional

from shortlinks.constants import ALPHABET, Defaults


BASE = len(ALPHABET)  # 26 uppercase + 26 lowercase + 10 digits

CUSTOM_CODE_PATTERN = re.compile(r'[A-Za-z0-9-]+')

_system_random = random.SystemRandom()


def generate_shortcode(length: int = Defaults.CODE_LENGTH, rng: Optional[random.Random] = None) -> str:
    """Generate a random Base62 short code.

    Each character is drawn uniformly from ALPHABET with rng.choice().

    Args:
        length (int, optional):
            Number of characters. Defaults to 6.

        rng (random.Random, optional):
            Source of randomness. Pass a seeded random.Random for deterministic
            output. Defaults to a shared random.SystemRandom.

    Returns:
        str: A short alphanumeric code of exactly `length` characters.

    Example:
        >>> generate_shortcode(6, rng=random.Random(7)) == generate_shortcode(6, rng=random.Random(7))
        True

    NOTE:
        - With 62**6 (~5.7e10) possible 6-character codes, collisions are rare
          but possible. Callers must check and reserve the result.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    rng = _system_random if rng is None else rng
    return ''.join(rng.choice(ALPHABET) for _ in range(length))


def is_valid_custom_code(code: str) -> bool:
    """Check that a custom code has at least 3 characters, all letters, digits or hyphens.

    NOTE: codes are case-sensitive and are never normalized.
    """
    return (
        isinstance(code, str)
        and len(code) >= Defaults.MIN_CUSTOM_CODE_LENGTH
        and CUSTOM_CODE_PATTERN.fullmatch(code) is not None
    )
