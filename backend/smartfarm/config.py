"""Smart Farm upload service configuration.

Loads settings from two YAML files:
  * smartfarm.settings.yaml  - non-secret configuration
  * smartfarm.secrets.yaml   - secrets (never committed)

A relative ``upload.root_dir`` is resolved against the directory of the
settings file, so the same YAML works no matter where the server is started.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("smartfarm.settings.yaml")
SECRETS_FILE  = Path("smartfarm.secrets.yaml")

# 5 MiB
DEFAULT_MAX_FILE_SIZE_BYTES = 5 * 1024 * 1024

DEFAULT_ALLOWED_MIME_TYPES = [
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
]


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


# ---------------------------------------------------------------------------
# Secrets models
# ---------------------------------------------------------------------------


class JWTSecrets(BaseModel):
    secret_key: str = "change-me-in-production"
    algorithm:  str = "HS256"


class Secrets(BaseModel):
    jwt: JWTSecrets = Field(default_factory=JWTSecrets)


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class ServerSettings(BaseModel):
    host:            str       = "0.0.0.0"
    port:            int       = 3001
    allowed_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])


class LoggingSettings(BaseModel):
    level: str = "info"


class UploadSettings(BaseModel):
    """Where uploaded images live and what is accepted."""
    root_dir:            str       = "uploads"
    url_prefix:          str       = "/uploads"
    folders:             List[str] = Field(default_factory=lambda: ["images", "activities", "plots"])
    default_folder:      str       = "images"
    max_file_size_bytes: int       = DEFAULT_MAX_FILE_SIZE_BYTES
    max_files:           int       = 10
    allowed_mime_types:  List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_MIME_TYPES))

    @field_validator("url_prefix")
    @classmethod
    def _normalize_prefix(cls, v: str) -> str:
        return "/" + v.strip("/")

    @field_validator("max_file_size_bytes", "max_files")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v


class AppConfig(BaseModel):
    server:  ServerSettings  = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    upload:  UploadSettings  = Field(default_factory=UploadSettings)
    secrets: Secrets         = Field(default_factory=Secrets)


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(
    settings_path: Optional[Path] = None,
    secrets_path: Optional[Path] = None,
) -> AppConfig:
    """Load and merge settings + secrets into a single *AppConfig* object."""
    settings_path = Path(settings_path) if settings_path else SETTINGS_FILE
    secrets_path = Path(secrets_path) if secrets_path else settings_path.with_name(SECRETS_FILE.name)

    settings_data = _load_yaml(settings_path)
    secrets_data  = _load_yaml(secrets_path)

    # Merge: secrets live under the "secrets" key in AppConfig
    settings_data["secrets"] = secrets_data

    config = AppConfig(**settings_data)

    root = Path(config.upload.root_dir)
    if not root.is_absolute():
        config.upload.root_dir = str(settings_path.resolve().parent / root)

    logger.info(
        "Config loaded (server=%s:%s, upload.root_dir=%s, folders=%s)",
        config.server.host,
        config.server.port,
        config.upload.root_dir,
        ",".join(config.upload.folders),
    )
    return config


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the process-wide config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[AppConfig]) -> None:
    """Replace the cached config (``None`` forces a reload on next access)."""
    global _config
    _config = config
