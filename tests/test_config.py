from __future__ import annotations

import pytest

from pubmed_api.config import load_settings
from pubmed_api.db.sa import _to_sqlalchemy_async_dsn


def test_defaults():
    settings = load_settings({})
    assert settings.port == 8080
    assert settings.data_path == "./data/sample_100_pubmed.jsonl"
    assert settings.database_url == "sqlite+aiosqlite:///:memory:"
    assert settings.log_level == "info"
    assert settings.logging_level == "INFO"
    assert settings.request_timeout_s == 30.0
    assert settings.root_path == ""


def test_overrides():
    settings = load_settings({
        "PORT": "9000",
        "DATA_PATH": "/srv/data.jsonl",
        "DATABASE_URL": "postgresql://u:p@db/pubmed",
        "LOG_LEVEL": "WARN",
        "REQUEST_TIMEOUT_S": "2.5",
        "ROOT_PATH": "/api",
    })
    assert settings.port == 9000
    assert settings.data_path == "/srv/data.jsonl"
    assert settings.database_url == "postgresql://u:p@db/pubmed"
    assert settings.logging_level == "WARNING"
    assert settings.request_timeout_s == 2.5
    assert settings.root_path == "/api"


def test_invalid_log_level_rejected():
    with pytest.raises(ValueError):
        load_settings({"LOG_LEVEL": "verbose"})


def test_zero_timeout_disables_deadline():
    assert load_settings({"REQUEST_TIMEOUT_S": "0"}).request_timeout_s is None


@pytest.mark.parametrize("dsn, expected", [
    ("postgres://u@h/db", "postgresql+asyncpg://u@h/db"),
    ("postgresql://u@h/db", "postgresql+asyncpg://u@h/db"),
    ("postgresql+asyncpg://u@h/db", "postgresql+asyncpg://u@h/db"),
    ("sqlite:///./pubmed.db", "sqlite+aiosqlite:///./pubmed.db"),
    ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
])
def test_dsn_rewritten_to_async_driver(dsn, expected):
    assert _to_sqlalchemy_async_dsn(dsn) == expected


def test_empty_dsn_rejected():
    with pytest.raises(RuntimeError):
        _to_sqlalchemy_async_dsn("")
