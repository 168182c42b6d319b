"""Tests for the session store and environment configuration."""

import pytest

from fluentai.config import DEFAULT_API_URL, ConfigError, get_api_config, get_timeout
from fluentai.session import clear_session, get_token, get_user, load_session, save_session


def test_session_round_trip(isolated_session):
    save_session("tok", {"id": "u1", "name": "Ann"})

    assert isolated_session.exists()
    assert get_token() == "tok"
    assert get_user() == {"id": "u1", "name": "Ann"}

    clear_session()
    assert load_session() is None
    assert get_token() is None


def test_corrupt_session_file_is_ignored(isolated_session):
    isolated_session.write_text("{not json", encoding="utf-8")
    assert load_session() is None


def test_api_config_defaults():
    assert get_api_config() == (DEFAULT_API_URL, None)


def test_timeout_parsing(monkeypatch):
    assert get_timeout() == 30.0
    monkeypatch.setenv("FLUENTAI_TIMEOUT", "5")
    assert get_timeout() == 5.0
    monkeypatch.setenv("FLUENTAI_TIMEOUT", "soon")
    with pytest.raises(ConfigError):
        get_timeout()
    monkeypatch.setenv("FLUENTAI_TIMEOUT", "0")
    with pytest.raises(ConfigError):
        get_timeout()
