"""Password hashing for stored user accounts.

Hashes are ``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>`` strings so
the work factor can be raised later without invalidating stored passwords.
"""

import hashlib
import hmac
import os

ALGORITHM = 'pbkdf2_sha256'
ITERATIONS = 260000
SALT_BYTES = 16


class PasswordFormatError(ValueError):
    """Raised when a stored hash is not in the expected format."""
    pass


def hash_password(plain: str, iterations: int = ITERATIONS) -> str:
    """Hash a plain-text password with a fresh random salt.

    Args:
        plain: Password as typed by the user
        iterations: PBKDF2 work factor

    Returns:
        Encoded hash string
    """
    if not plain:
        raise ValueError("Password cannot be empty.")
    salt = os.urandom(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac('sha256', plain.encode('utf-8'), salt, iterations)
    return f"{ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(plain: str, encoded: str) -> bool:
    """Check a plain-text password against an encoded hash."""
    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split('$')
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
        rounds = int(iterations)
    except (AttributeError, ValueError) as e:
        raise PasswordFormatError("Malformed password hash") from e
    if algorithm != ALGORITHM:
        raise PasswordFormatError(f"Unsupported algorithm: {algorithm}")

    actual = hashlib.pbkdf2_hmac('sha256', (plain or '').encode('utf-8'), salt, rounds)
    return hmac.compare_digest(actual, expected)
