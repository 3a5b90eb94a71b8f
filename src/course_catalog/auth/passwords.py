"""Password hashing and verification."""

from __future__ import annotations

from passlib.context import CryptContext

_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Verified against when the login email is unknown, so that path costs a hash too.
DUMMY_PASSWORD_HASH = _pwd.hash("dummy-password-never-issued")


def hash_password(password: str) -> str:
    """Return a salted one-way hash suitable for storage.

    Raises:
        ValueError: if the password is blank.
    """
    if not password:
        raise ValueError("password must not be blank")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored hash.

    Blank inputs and hashes passlib does not recognise verify as False.
    """
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except (ValueError, TypeError):
        return False
