"""Tests for configuration loading."""

import pytest

from tarjouspalvelu.core.config.loader import ConfigError, load_app_config
from tarjouspalvelu.core.config.models import AppConfig, CredentialsConfig, LoggingConfig, PortalConfig
from tarjouspalvelu.core.models import Language


class TestLoadAppConfig:
    def test_full_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PORTAL_PASSWORD", "hunter2")
        monkeypatch.delenv("LOG_DIR", raising=False)
        config_file = tmp_path / "tarjouspalvelu.yaml"
        config_file.write_text(
            """
portal:
  base_url: https://tarjouspalvelu.fi/
  timeout_seconds: 10
  language: sv-SE
credentials:
  username: user@example.com
  password: ${PORTAL_PASSWORD}
logging:
  level: debug
  file: ${LOG_DIR:-logs}/portal.log
""",
            encoding="utf-8",
        )

        config = load_app_config(config_file)

        assert config.portal.base_url == "https://tarjouspalvelu.fi"
        assert config.portal.timeout_seconds == 10
        assert config.portal.language is Language.SV
        assert config.credentials.username == "user@example.com"
        assert config.credentials.password == "hunter2"
        assert config.credentials.is_complete
        assert config.logging.level == "DEBUG"
        assert str(config.logging.file) == "logs/portal.log"

    def test_env_expansion_disabled(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PORTAL_PASSWORD", "hunter2")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("credentials:\n  password: ${PORTAL_PASSWORD}\n", encoding="utf-8")

        config = load_app_config(config_file, expand_env=False)

        assert config.credentials.password == "${PORTAL_PASSWORD}"

    def test_missing_default_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("TARJOUSPALVELU_CONFIG", raising=False)

        config = load_app_config()

        assert config.portal.base_url == "https://tarjouspalvelu.fi"
        assert config.portal.language is None

    def test_path_from_environment(self, tmp_path, monkeypatch):
        config_file = tmp_path / "elsewhere.yaml"
        config_file.write_text("portal:\n  timeout_seconds: 5\n", encoding="utf-8")
        monkeypatch.setenv("TARJOUSPALVELU_CONFIG", str(config_file))

        assert load_app_config().portal.timeout_seconds == 5

    def test_missing_file_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TARJOUSPALVELU_CONFIG", str(tmp_path / "missing.yaml"))

        with pytest.raises(ConfigError):
            load_app_config()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_app_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")

        assert isinstance(load_app_config(config_file), AppConfig)

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("portal: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_app_config(config_file)

    def test_not_a_mapping(self, tmp_path):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_app_config(config_file)

    def test_invalid_values(self, tmp_path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("portal:\n  language: de-DE\n", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            load_app_config(config_file)

        assert "language" in exc_info.value.details


class TestModels:
    def test_base_url_must_be_http(self):
        with pytest.raises(ValueError):
            PortalConfig(base_url="ftp://tarjouspalvelu.fi")

    def test_unknown_log_level(self):
        with pytest.raises(ValueError):
            LoggingConfig(level="LOUD")

    def test_credentials_from_environment(self, monkeypatch):
        monkeypatch.setenv("TP_USERNAME", "env-user")
        monkeypatch.setenv("TP_PASSWORD", "env-pass")

        credentials = CredentialsConfig()

        assert credentials.username == "env-user"
        assert credentials.password == "env-pass"
        assert "env-pass" not in repr(credentials)

    def test_incomplete_credentials(self, monkeypatch):
        monkeypatch.delenv("TP_USERNAME", raising=False)
        monkeypatch.delenv("TP_PASSWORD", raising=False)

        assert not CredentialsConfig(username="user").is_complete
