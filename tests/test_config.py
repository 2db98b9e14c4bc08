"""Tests for settings and logging configuration."""

import logging

from namerec.repocache import DEFAULT_LIFETIME
from namerec.repocache import RepoCacheSettings
from namerec.repocache import configure_logging


def test_settings_defaults(monkeypatch):
    """Defaults apply when environment is empty."""
    monkeypatch.delenv('REPOCACHE_LIFETIME', raising=False)
    settings = RepoCacheSettings()
    assert settings.lifetime == DEFAULT_LIFETIME
    assert settings.key_prefix == 'repocache:'


def test_settings_from_environment(monkeypatch):
    """Lifetime is overridable per deployment."""
    monkeypatch.setenv('REPOCACHE_LIFETIME', '90')
    monkeypatch.setenv('REPOCACHE_REDIS_URL', 'redis://cache:6379/1')

    settings = RepoCacheSettings()
    assert settings.lifetime == 90
    assert settings.redis_url == 'redis://cache:6379/1'


def test_configure_logging():
    """Package logger gets a single handler at the requested level."""
    configure_logging('DEBUG')

    package_logger = logging.getLogger('namerec.repocache')
    assert package_logger.level == logging.DEBUG
    assert len(package_logger.handlers) == 1
    assert package_logger.propagate is False

    # Restore defaults for other tests
    package_logger.handlers = []
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
