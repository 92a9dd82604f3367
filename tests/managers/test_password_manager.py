"""Tests for the password hashing manager."""

from unittest.mock import patch

import pytest
from passlib.exc import InternalBackendError

from techtalk.errors import PasswordHashingError
from techtalk.managers.password_manager import (
    PasswordHasher,
    hash_password,
    verify_password,
)


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(level="low")


class TestPasswordHasher:
    """Test cases for PasswordHasher."""

    def test_hash_and_verify(self, hasher: PasswordHasher) -> None:
        hashed = hasher.hash("secret1")

        assert hashed.startswith("$argon2id$")
        assert hasher.verify("secret1", hashed) is True
        assert hasher.verify("secret2", hashed) is False

    def test_hashes_are_salted(self, hasher: PasswordHasher) -> None:
        assert hasher.hash("secret1") != hasher.hash("secret1")

    def test_empty_password_is_refused(self, hasher: PasswordHasher) -> None:
        with pytest.raises(ValueError, match="cannot be empty"):
            hasher.hash("")

    @pytest.mark.parametrize("stored", ["", "   ", "not-a-hash"])
    def test_malformed_hash_never_matches(self, hasher: PasswordHasher, stored: str) -> None:
        assert hasher.verify("secret1", stored) is False

    def test_backend_failure_is_wrapped(self, hasher: PasswordHasher) -> None:
        with (
            patch.object(hasher.pwd_context, "hash", side_effect=InternalBackendError("boom")),
            pytest.raises(PasswordHashingError),
        ):
            hasher.hash("secret1")

    def test_security_levels_change_cost(self) -> None:
        low = PasswordHasher(level="low").hash("secret1")
        medium = PasswordHasher(level="medium").hash("secret1")

        assert "m=8192" in low
        assert "m=65536" in medium


class TestAsyncHelpers:
    """The async helpers run the hasher on the thread pool."""

    async def test_hash_then_verify(self) -> None:
        hashed = await hash_password("secret1")

        assert await verify_password("secret1", hashed) is True
        assert await verify_password("wrong", hashed) is False
