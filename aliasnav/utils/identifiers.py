"""Shortcut identifier generation

Identifiers are derived from the record store's monotonically increasing counter
through a salted multiplicative permutation over a fixed base62 space. The mapping
is bijective while `counter < 62**length`, so identifiers are unique, opaque and
show no sequential pattern.

Functions:
    generate_id(counter, salt='aliasnav', length=10, mult=1315423911):
        Encode a counter value into a fixed-length base62 identifier.

Example:
    >>> from aliasnav.utils.identifiers import generate_id
    >>> len(generate_id(1, salt='my_secret'))
    10
"""

import math
import string

import xxhash

from aliasnav.utils.constants import DEFAULT_ID_SALT, DEFAULT_ID_LENGTH


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)


def generate_id(counter: int, salt: str = DEFAULT_ID_SALT, length: int = DEFAULT_ID_LENGTH, mult: int = 1315423911) -> str:
    """Generate a deterministic, fixed-length base62 identifier from a counter.

    Args:
        counter (int):
            Unique non-negative integer (the store's shortcut counter).

        salt (str, optional):
            Secret string used to shift the output space.

        length (int, optional):
            Length of the identifier. Defaults to 10.

        mult (int, optional):
            Multiplicative factor for the permutation.
            Must be coprime with mod (BASE**length).

    Returns:
        str: Identifier made of [a-zA-Z0-9].

    Raises:
        TypeError: If counter is not an integer or salt is not a string.
        ValueError: If counter is negative, salt is empty or mult is not coprime.

    NOTE:
        - The output is obfuscated, not encrypted.
        - Uses xxhash for hashing the salt.
    """
    if not isinstance(counter, int) or isinstance(counter, bool):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 0:
        raise ValueError(f'Counter must be a non-negative integer (given value: {counter}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    if not salt:
        raise ValueError(f'Salt must be a non-empty string (given value: {salt!r}).')
    if math.gcd(mult, BASE**length) != 1:
        raise ValueError(f'Multiplicative factor must be coprime with mod ({BASE**length}) (given value: mult={mult}).')

    # Affine permutation: collision-free as long as `counter < BASE**length`
    modulo_space = BASE**length
    salt_hash = xxhash.xxh64_intdigest(salt) % modulo_space
    permuted = (counter * mult + salt_hash) % modulo_space

    # Most significant digit first, padded to a fixed length
    return ''.join(reversed([ALPHABET[(permuted // BASE**i) % BASE] for i in range(length)])).rjust(length, ALPHABET[0])
