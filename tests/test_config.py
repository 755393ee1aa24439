"""Tests for configuration loading and the AuthConfig model."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from bernard.config import load_config
from bernard.exceptions import ConfigurationError
from bernard.models import AuthConfig, AuthenticatedUser


class TestAuthConfigDefaults:
    def test_defaults(self) -> None:
        config = AuthConfig()
        assert config.endpoint == "/postback/auth"
        assert config.transport == "body"
        assert config.token_name == "_b"
        assert config.base_url is None
        assert config.messenger_app_id is None
        assert config.auth_timeout is None
        assert config.ready_timeout is None
        assert config.verify_ssl is True

    def test_rejects_unknown_transport(self) -> None:
        with pytest.raises(ValidationError):
            AuthConfig(transport="cookie")  # type: ignore[arg-type]

    def test_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            AuthConfig(endpont="/typo")  # type: ignore[call-arg]


class TestLoadConfig:
    def test_none_returns_defaults(self) -> None:
        assert load_config(None) == AuthConfig()

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "nope.json") == AuthConfig()

    def test_loads_values(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.json"
        path.write_text(
            json.dumps(
                {
                    "base_url": "https://bot.example.com",
                    "endpoint": "/api/auth",
                    "transport": "header",
                    "messenger_app_id": "42",
                    "auth_timeout": 10,
                }
            ),
            encoding="utf-8",
        )

        config = load_config(str(path))

        assert config.base_url == "https://bot.example.com"
        assert config.endpoint == "/api/auth"
        assert config.transport == "header"
        assert config.messenger_app_id == "42"
        assert config.auth_timeout == 10

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid auth config"):
            load_config(path)

    def test_invalid_values(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.json"
        path.write_text(json.dumps({"transport": "carrier-pigeon"}), encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(path)


class TestAuthenticatedUser:
    def test_round_trips_user_payload(self) -> None:
        result = AuthenticatedUser(user={"id": 42}, token="abc", provider="hash_token")
        assert result.model_dump() == {
            "user": {"id": 42},
            "token": "abc",
            "provider": "hash_token",
        }

    def test_user_is_stored_as_given(self) -> None:
        payload = {"id": 42, "roles": ["admin"]}
        result = AuthenticatedUser(user=payload, token="abc", provider="hash_token")
        assert result.user is payload

    def test_user_may_be_any_object(self) -> None:
        payload = object()
        result = AuthenticatedUser(user=payload, token="abc", provider="url_token")
        assert result.user is payload
