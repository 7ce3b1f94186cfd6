"""Tests for password hashing and token generation."""

from modules.developers.security import (
    generate_salt,
    generate_token,
    hash_password,
    verify_password,
)


class TestPasswords:
    def test_verify_matching_password(self):
        salt = generate_salt()
        stored = hash_password("hunter2", salt)
        assert verify_password("hunter2", salt, stored)

    def test_reject_wrong_password(self):
        salt = generate_salt()
        stored = hash_password("hunter2", salt)
        assert not verify_password("hunter3", salt, stored)

    def test_salt_changes_hash(self):
        assert hash_password("hunter2", "a") != hash_password("hunter2", "b")

    def test_empty_hash_never_matches(self):
        """Trial accounts have no password and cannot log in with one."""
        assert not verify_password("", "", "")


class TestTokens:
    def test_tokens_are_unique(self):
        assert len({generate_token() for _ in range(50)}) == 50

    def test_token_length(self):
        assert len(generate_token()) == 64
        assert len(generate_salt()) == 32
