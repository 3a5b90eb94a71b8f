"""Tests for password hashing."""

import pytest

from course_catalog.auth.passwords import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    verify_password,
)


class TestPasswords:
    def test_hash_is_not_plaintext(self) -> None:
        digest = hash_password("123456")
        assert "123456" not in digest
        assert digest.startswith("$pbkdf2-sha256$")

    def test_hash_is_salted(self) -> None:
        assert hash_password("123456") != hash_password("123456")

    def test_verify_match(self) -> None:
        assert verify_password("123456", hash_password("123456")) is True

    def test_verify_mismatch(self) -> None:
        assert verify_password("654321", hash_password("123456")) is False

    @pytest.mark.parametrize(
        ("password", "stored"),
        [("", "$pbkdf2-sha256$x"), ("123456", ""), ("123456", "plain-text")],
    )
    def test_verify_degenerate_inputs(self, password: str, stored: str) -> None:
        assert verify_password(password, stored) is False

    def test_blank_password_cannot_be_hashed(self) -> None:
        with pytest.raises(ValueError):
            hash_password("")

    def test_dummy_hash_is_a_real_hash(self) -> None:
        """The dummy costs a full verification and matches no ordinary input."""
        assert DUMMY_PASSWORD_HASH.startswith("$pbkdf2-sha256$")
        assert verify_password("123456", DUMMY_PASSWORD_HASH) is False
