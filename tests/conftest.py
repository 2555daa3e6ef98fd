"""Shared test fixtures and configuration."""

import os

import pytest


TEST_ENV = {
    "JSON_FIELD_LOG_LEVEL": "info",
    "JSON_FIELD_LOG_JSON": "true",
    "JSON_FIELD_MAX_DEPTH": "1000",
    "JSON_FIELD_TRACING_ENABLED": "false",
}


for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset settings-related environment and the cached settings for each test."""
    from json_field_mapper.config import get_settings

    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
