from __future__ import annotations

import logging

import pytest

from saturday.core.settings import Settings, load_settings


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)


def test_missing_session_secret_is_fatal(monkeypatch, caplog):
    monkeypatch.delenv("SESSION_SECRET", raising=False)
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with caplog.at_level(logging.CRITICAL):
        with pytest.raises(SystemExit) as excinfo:
            load_settings()
    assert excinfo.value.code == 1
    assert any(record.levelno == logging.CRITICAL for record in caplog.records)


def test_blank_session_secret_is_fatal(monkeypatch):
    monkeypatch.setenv("SESSION_SECRET", "   ")
    with pytest.raises(SystemExit):
        load_settings()


def test_jwt_secret_alias(monkeypatch):
    monkeypatch.delenv("SESSION_SECRET", raising=False)
    monkeypatch.setenv("JWT_SECRET", "legacy-name")
    assert load_settings().session_secret == "legacy-name"


def test_defaults(monkeypatch):
    monkeypatch.setenv("SESSION_SECRET", "s3cret")
    monkeypatch.delenv("ACCESS_TOKEN_EXPIRE_MINUTES", raising=False)
    monkeypatch.delenv("AUTH_COOKIE_NAME", raising=False)
    loaded = Settings()
    assert loaded.access_token_expire_minutes == 10080
    assert loaded.access_token_max_age_seconds == 604800
    assert loaded.auth_cookie_name == "auth_token"
    assert loaded.algorithm == "HS256"


def test_comma_separated_origins(monkeypatch):
    monkeypatch.setenv("SESSION_SECRET", "s3cret")
    monkeypatch.setenv("ALLOW_ORIGINS", "https://a.example.com, https://b.example.com")
    assert Settings().allow_origins == ["https://a.example.com", "https://b.example.com"]


def test_production_flag(monkeypatch):
    monkeypatch.setenv("SESSION_SECRET", "s3cret")
    monkeypatch.setenv("ENVIRONMENT", "production")
    assert Settings().is_production
