"""
Unit tests for configuration and logging setup.
"""

import logging

import pytest

from webcore import WebConfig, configure_logging


class TestWebConfig:
    """Tests for WebConfig."""

    def test_defaults_valid(self):
        WebConfig().validate()

    def test_cookie_defaults(self):
        assert WebConfig().cookie_defaults() == {
            "path": "/",
            "domain": "",
            "secure": False,
            "http_only": True,
        }

    def test_from_env(self, monkeypatch):
        """Test reading settings from the environment."""
        monkeypatch.setenv("WEB_SESSION_NAME", "APPSESSID")
        monkeypatch.setenv("WEB_CHARSET", "ISO-8859-1")
        monkeypatch.setenv("WEB_COOKIE_DOMAIN", "example.com")
        monkeypatch.setenv("WEB_COOKIE_SECURE", "yes")
        monkeypatch.setenv("WEB_COOKIE_HTTPONLY", "0")
        monkeypatch.setenv("WEB_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("WEB_SERVER_NAME", "edge/2.1")

        config = WebConfig.from_env()

        assert config.server_name == "edge/2.1"
        assert config.session_name == "APPSESSID"
        assert config.default_charset == "ISO-8859-1"
        assert config.cookie_domain == "example.com"
        assert config.cookie_secure is True
        assert config.cookie_http_only is False
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("WEB_SESSION_NAME", "WEB_COOKIE_SECURE", "WEB_COOKIE_HTTPONLY"):
            monkeypatch.delenv(name, raising=False)

        config = WebConfig.from_env()

        assert config.session_name == "PYSESSID"
        assert config.cookie_secure is False
        assert config.cookie_http_only is True

    @pytest.mark.parametrize("kwargs", [
        {"session_name": ""},
        {"default_charset": ""},
        {"cookie_path": "admin"},
        {"log_level": "LOUD"},
    ])
    def test_validate_rejects(self, kwargs):
        with pytest.raises(ValueError):
            WebConfig(**kwargs).validate()


class TestConfigureLogging:
    """Tests for logging setup."""

    def test_sets_package_level(self):
        package_logger = configure_logging(WebConfig(log_level="debug"))

        assert package_logger.name == "webcore"
        assert package_logger.level == logging.DEBUG

        configure_logging(WebConfig(log_level="WARNING"))
        assert logging.getLogger("webcore").level == logging.WARNING
