"""Unit tests for operator settings."""

import pytest
from shipyard.types import settings
from shipyard.types.settings import Settings


class TestGetenv:
    """Tests for environment lookups."""

    def test_boolean_coercion(self, monkeypatch):
        monkeypatch.setenv("SHIPYARD_TEST_FLAG", "yes")
        assert settings._getenv("SHIPYARD_TEST_FLAG", False) is True
        monkeypatch.setenv("SHIPYARD_TEST_FLAG", "0")
        assert settings._getenv("SHIPYARD_TEST_FLAG", True) is False

    def test_plain_value(self, monkeypatch):
        monkeypatch.setenv("SHIPYARD_TEST_VALUE", "Background")
        assert settings._getenv("SHIPYARD_TEST_VALUE", "Foreground") == "Background"

    def test_default_and_missing(self, monkeypatch):
        monkeypatch.delenv("SHIPYARD_TEST_MISSING", raising=False)
        assert settings._getenv("SHIPYARD_TEST_MISSING", 15) == 15
        with pytest.raises(KeyError):
            settings._getenv("SHIPYARD_TEST_MISSING")


class TestSettings:
    """Tests for Settings overrides."""

    def test_defaults(self):
        conf = Settings()
        assert conf.watch_backoff_cap_seconds == settings.WATCH_BACKOFF_CAP_SECONDS
        assert conf.delete_propagation_policy == settings.DELETE_PROPAGATION_POLICY

    def test_prefixes_are_split(self):
        conf = Settings(image_allowed_prefixes="a.example.com, b.example.com,,")
        assert conf.image_allowed_prefixes == ["a.example.com", "b.example.com"]

    def test_overrides_do_not_leak(self):
        Settings(watch_backoff_cap_seconds=3)
        assert Settings().watch_backoff_cap_seconds == settings.WATCH_BACKOFF_CAP_SECONDS
