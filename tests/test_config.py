from pathlib import Path

import pytest

from studio_cms.utils.config import DEV_JWT_SECRET, ConfigManager
from studio_cms.utils.exceptions import ConfigError


def test_defaults_without_environment(tmp_path: Path, monkeypatch):
    for name in ("JWT_SECRET", "ADMIN_USERNAME", "UPLOAD_ALLOWED_TYPES", "CORS_ORIGINS", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)

    settings = ConfigManager(tmp_path / "missing.yaml").load_settings()

    assert settings.auth.jwt_secret == DEV_JWT_SECRET
    assert settings.auth.admin_username == "admin"
    assert settings.auth.token_ttl_hours == 24
    assert settings.upload.max_size == 10485760
    assert "image/webp" in settings.upload.allowed_types
    assert settings.rate_limit.auth_max == 5
    assert settings.rate_limit.api_max == 100
    assert not settings.is_production


def test_environment_overrides(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "from-env")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.test, https://b.test")
    monkeypatch.setenv("UPLOAD_MAX_SIZE", "2048")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
    monkeypatch.setenv("ENVIRONMENT", "production")

    settings = ConfigManager(tmp_path / "missing.yaml").load_settings()

    assert settings.auth.jwt_secret == "from-env"
    assert settings.cors.origins == ["https://a.test", "https://b.test"]
    assert settings.upload.max_size == 2048
    assert settings.rate_limit.enabled is False
    assert settings.is_production


def test_yaml_overlay(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("DATA_PATH", raising=False)
    monkeypatch.delenv("STATIC_FILES_PATH", raising=False)
    overlay = tmp_path / "settings.yaml"
    overlay.write_text(
        "storage:\n"
        "  data_path: ${DATA_PATH:/srv/content}\n"
        "logging:\n"
        "  level: DEBUG\n",
        encoding="utf-8",
    )

    settings = ConfigManager(overlay).load_settings()

    assert settings.storage.data_path == "/srv/content"
    assert settings.logging.level == "DEBUG"
    # Untouched sections keep their template values
    assert settings.storage.public_path == "./public"


def test_invalid_overlay_raises(tmp_path: Path):
    overlay = tmp_path / "settings.yaml"
    overlay.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        ConfigManager(overlay).load_settings()


def test_invalid_value_raises(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("BCRYPT_ROUNDS", "2")

    with pytest.raises(ConfigError):
        ConfigManager(tmp_path / "missing.yaml").load_settings()


def test_mail_settings_from_environment(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_USER", "studio@example.com")
    monkeypatch.setenv("SMTP_PASS", "secret")
    monkeypatch.setenv("SMTP_SECURE", "true")
    for name in ("SMTP_PORT", "CONTACT_EMAIL"):
        monkeypatch.delenv(name, raising=False)

    mail = ConfigManager(tmp_path / "missing.yaml").load_settings().mail

    assert mail.configured is True
    assert mail.use_ssl is True
    assert mail.port == 587
    assert mail.contact_email == "hello@studiopickens.com"


def test_mail_unconfigured_by_default(tmp_path: Path, monkeypatch):
    for name in ("SMTP_HOST", "SMTP_USER", "SMTP_PASS"):
        monkeypatch.delenv(name, raising=False)

    assert ConfigManager(tmp_path / "missing.yaml").load_settings().mail.configured is False
