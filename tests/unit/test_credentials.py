"""Unit tests for credentials, session tokens and interactive prompts."""

from __future__ import annotations

import io
from unittest.mock import patch

import pytest
from rest_harness.credentials import (
    ApiKey,
    NoAuth,
    SessionToken,
    TokenKind,
    UserPass,
    UserPassTwoFactor,
)
from rest_harness.interactive import prompt_credentials


class TestCredentials:
    """Tests for the credential value types."""

    def test_no_auth_equality(self):
        """Test that NoAuth values are interchangeable."""
        assert NoAuth() == NoAuth()

    def test_api_key_masked_repr(self):
        """Test that the API key never shows up in full."""
        key = ApiKey("glpat-verysecret")
        assert "verysecret" not in repr(key)
        assert "glpa" in repr(key)

    @pytest.mark.parametrize("token", ["", "   "])
    def test_empty_api_key(self, token):
        """Test that an empty token is rejected."""
        with pytest.raises(ValueError):
            ApiKey(token)

    def test_password_hidden_in_repr(self):
        """Test that passwords and codes are left out of repr."""
        creds = UserPassTwoFactor("alice", "s3cret", "123456")
        text = repr(creds)
        assert "alice" in text
        assert "s3cret" not in text
        assert "123456" not in text
        assert "s3cret" not in repr(UserPass("alice", "s3cret"))

    def test_immutable(self):
        """Test that credentials cannot be changed after creation."""
        creds = UserPass("alice", "s3cret")
        with pytest.raises(AttributeError):
            creds.password = "other"


class TestSessionToken:
    """Tests for SessionToken."""

    def test_default_kind(self):
        """Test tokens default to bearer."""
        assert SessionToken("abc").kind is TokenKind.BEARER

    def test_masked_repr(self):
        """Test that the token value is masked."""
        token = SessionToken("hvs.supersecret", TokenKind.VAULT)
        assert "supersecret" not in repr(token)
        assert "vault" in repr(token)

    def test_short_token_fully_masked(self):
        """Test that short tokens are hidden entirely."""
        assert "abc" not in repr(SessionToken("abc"))


class TestPromptCredentials:
    """Tests for the interactive credential prompt."""

    @patch("rest_harness.interactive.getpass.getpass", return_value="s3cret")
    @patch("sys.stdin", io.StringIO("alice\n"))
    def test_username_password(self, mock_getpass):
        """Test collecting username and password."""
        out = io.StringIO()

        creds = prompt_credentials(stream=out)

        assert creds == UserPass("alice", "s3cret")
        assert "Please enter credentials to proceed" in out.getvalue()
        assert "Username: " in out.getvalue()
        mock_getpass.assert_called_once_with("Password: ", stream=out)

    @patch("rest_harness.interactive.getpass.getpass", return_value="s3cret")
    @patch("sys.stdin", io.StringIO("alice\r\n987654\n"))
    def test_two_factor(self, mock_getpass):
        """Test that the one-time code is asked for last."""
        out = io.StringIO()

        creds = prompt_credentials(need_2fa=True, stream=out)

        assert creds == UserPassTwoFactor("alice", "s3cret", "987654")
        assert "2FA: " in out.getvalue()
