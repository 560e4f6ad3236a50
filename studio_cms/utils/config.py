"""
Configuration management with schema validation.

Settings come from an in-code template whose values are ``${ENV_VAR:default}``
expressions, optionally overlaid by a YAML file, then validated with pydantic.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigError
from .logger import get_logger

logger = get_logger(__name__)

# Load environment variables
load_dotenv()

SETTINGS_FILE = Path(os.getenv("CMS_SETTINGS_FILE", "config/settings.yaml"))

DEV_JWT_SECRET = "studio-pickens-secret-key-change-in-production"
DEFAULT_ALLOWED_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"]


def _split_csv(value: Any) -> Any:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class AppSettings(BaseModel):
    name: str = "Studio Content API"
    version: str = "1.0.0"
    environment: str = "development"


class AuthSettings(BaseModel):
    jwt_secret: str = DEV_JWT_SECRET
    token_ttl_hours: int = 24
    admin_username: str = "admin"
    admin_password: str = "admin123"
    admin_email: str = "admin@studiopickens.com"
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    min_password_length: int = 6


class StorageSettings(BaseModel):
    data_path: str = "./data"
    public_path: str = "./public"

    @property
    def images_dir(self) -> Path:
        return Path(self.public_path) / "images"

    @property
    def uploads_dir(self) -> Path:
        return self.images_dir / "uploads"


class UploadSettings(BaseModel):
    max_size: int = 10485760
    allowed_types: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_TYPES))

    @field_validator("allowed_types", mode="before")
    @classmethod
    def split_types(cls, value: Any) -> Any:
        return _split_csv(value)


class CorsSettings(BaseModel):
    origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    @field_validator("origins", mode="before")
    @classmethod
    def split_origins(cls, value: Any) -> Any:
        return _split_csv(value)


class RateLimitSettings(BaseModel):
    enabled: bool = True
    window_seconds: int = 15 * 60
    auth_max: int = 5
    api_max: int = 100


class MailSettings(BaseModel):
    host: Optional[str] = None
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    use_ssl: bool = False
    contact_email: str = "hello@studiopickens.com"
    timeout_seconds: float = 10

    @field_validator("host", "username", "password", mode="before")
    @classmethod
    def empty_is_none(cls, value: Any) -> Any:
        return value or None

    @property
    def configured(self) -> bool:
        return bool(self.host and self.username and self.password)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "json"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5

    @field_validator("file_path", mode="before")
    @classmethod
    def empty_path_is_none(cls, value: Any) -> Any:
        return value or None


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    mail: MailSettings = Field(default_factory=MailSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_production(self) -> bool:
        return self.app.environment.lower() == "production"


SETTINGS_TEMPLATE: Dict[str, Any] = {
    "app": {
        "environment": "${ENVIRONMENT:development}",
    },
    "auth": {
        "jwt_secret": "${JWT_SECRET:" + DEV_JWT_SECRET + "}",
        "token_ttl_hours": "${TOKEN_TTL_HOURS:24}",
        "admin_username": "${ADMIN_USERNAME:admin}",
        "admin_password": "${ADMIN_PASSWORD:admin123}",
        "admin_email": "${ADMIN_EMAIL:admin@studiopickens.com}",
        "bcrypt_rounds": "${BCRYPT_ROUNDS:12}",
    },
    "storage": {
        "data_path": "${DATA_PATH:./data}",
        "public_path": "${STATIC_FILES_PATH:./public}",
    },
    "upload": {
        "max_size": "${UPLOAD_MAX_SIZE:10485760}",
        "allowed_types": "${UPLOAD_ALLOWED_TYPES:" + ",".join(DEFAULT_ALLOWED_TYPES) + "}",
    },
    "cors": {
        "origins": "${CORS_ORIGINS:http://localhost:3000}",
    },
    "rate_limit": {
        "enabled": "${RATE_LIMIT_ENABLED:true}",
        "window_seconds": "${RATE_LIMIT_WINDOW_SECONDS:900}",
        "auth_max": "${AUTH_RATE_LIMIT_MAX:5}",
        "api_max": "${API_RATE_LIMIT_MAX:100}",
    },
    "mail": {
        "host": "${SMTP_HOST:}",
        "port": "${SMTP_PORT:587}",
        "username": "${SMTP_USER:}",
        "password": "${SMTP_PASS:}",
        "use_ssl": "${SMTP_SECURE:false}",
        "contact_email": "${CONTACT_EMAIL:hello@studiopickens.com}",
    },
    "logging": {
        "level": "${LOG_LEVEL:INFO}",
        "format": "${LOG_FORMAT:json}",
        "file_path": "${LOG_FILE:}",
    },
}


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Loads Settings from the environment and an optional YAML overlay"""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else SETTINGS_FILE
        self._settings: Optional[Settings] = None

    def _substitute_env_vars(self, value: Any) -> Any:
        """Recursively substitute environment variables"""
        if isinstance(value, str):
            if value.startswith("${") and value.endswith("}"):
                var_expr = value[2:-1]
                if ":" in var_expr:
                    var_name, default = var_expr.split(":", 1)
                    return os.getenv(var_name.strip(), default.strip())
                else:
                    return os.getenv(var_expr, value)
        elif isinstance(value, dict):
            return {k: self._substitute_env_vars(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [self._substitute_env_vars(item) for item in value]
        return value

    def _load_overlay(self) -> Dict[str, Any]:
        if not self.settings_path.exists():
            return {}
        try:
            with open(self.settings_path, "r", encoding="utf-8") as f:
                raw_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read settings file {self.settings_path}: {e}")
        if not isinstance(raw_data, dict):
            raise ConfigError(f"Settings file {self.settings_path} must contain a mapping")
        logger.info("Settings overlay loaded", path=str(self.settings_path))
        return raw_data

    def load_settings(self) -> Settings:
        """Build and validate the effective settings"""
        raw_data = _deep_merge(SETTINGS_TEMPLATE, self._load_overlay())
        processed_data = self._substitute_env_vars(raw_data)
        try:
            self._settings = Settings(**processed_data)
        except ValueError as e:
            raise ConfigError(f"Invalid settings: {e}")
        return self._settings
