"""
Unit tests for settings and logging setup.
"""

import logging

from joblock.config import Settings
from joblock.observability.logging import setup_logging


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        """Test lock defaults keep the unbounded, two-step behaviour."""
        monkeypatch.delenv("LOCK_DEFAULT_TTL_SECONDS", raising=False)
        monkeypatch.delenv("LOCK_ATOMIC_EXPIRY", raising=False)

        settings = Settings(_env_file=None)

        assert settings.lock_default_ttl_seconds is None
        assert settings.lock_atomic_expiry is False
        assert settings.lock_sentinel == "true"

    def test_env_override(self, monkeypatch):
        """Test values are read from the environment."""
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379/2")
        monkeypatch.setenv("LOCK_DEFAULT_TTL_SECONDS", "300")
        monkeypatch.setenv("LOCK_ATOMIC_EXPIRY", "true")

        settings = Settings(_env_file=None)

        assert settings.redis_url == "redis://cache:6379/2"
        assert settings.lock_default_ttl_seconds == 300
        assert settings.lock_atomic_expiry is True


class TestLoggingSetup:
    """Tests for structured logging setup."""

    def test_setup_installs_single_handler(self):
        """Test the root logger gets one structlog-formatted handler."""
        setup_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
