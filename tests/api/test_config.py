"""
Tests for API configuration loading.
"""

import pytest
from pydantic import ValidationError

from books_api.config import APIConfig


def test_defaults(monkeypatch):
    for name in ("MONGODB_URI", "MONGODB_DATABASE", "PORT", "BOOKS_PER_PAGE"):
        monkeypatch.delenv(name, raising=False)

    settings = APIConfig(_env_file=None)

    assert settings.mongodb_uri == "mongodb://localhost:27017"
    assert settings.mongodb_database == "bookstore"
    assert settings.mongodb_collection == "books"
    assert settings.port == 3000
    assert settings.books_per_page == 4


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MONGODB_URI", "mongodb://db.internal:27017")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "CONSOLE")

    settings = APIConfig(_env_file=None)

    assert settings.mongodb_uri == "mongodb://db.internal:27017"
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "console"


@pytest.mark.parametrize("name,value", [
    ("LOG_LEVEL", "VERBOSE"),
    ("LOG_FORMAT", "xml"),
    ("BOOKS_PER_PAGE", "0"),
])
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        APIConfig(_env_file=None)
