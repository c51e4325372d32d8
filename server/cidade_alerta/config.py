"""Server configuration.

Loads from config.yaml if present, with environment variable overrides.
Environment variables use the pattern: CIDADE_<SECTION>_<KEY> (uppercase).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    env: str = "dev"  # "dev" or "prod"


@dataclass
class StorageConfig:
    backend: str = "file"  # "file" or "memory"
    base_dir: str = "data"


@dataclass
class AuthConfig:
    jwt_secret: str = "dev-secret-change-me-before-deploying!"
    jwt_algorithm: str = "HS256"


@dataclass
class GeoConfig:
    nearby_radius_m: float = 300.0
    query_radius_m: float = 5000.0
    bucket_size_deg: float = 0.005
    recent_limit: int = 10


@dataclass
class LoggingConfig:
    level: str = "info"
    format: str = "console"  # "console" or "json"
    file: str = ""


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    geo: GeoConfig = field(default_factory=GeoConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS = ("server", "storage", "auth", "geo", "logging")


def _apply_env_overrides(config: AppConfig) -> None:
    """Override config values from environment variables."""
    mapping = {
        "CIDADE_SERVER_HOST": lambda v: setattr(config.server, "host", v),
        "CIDADE_SERVER_PORT": lambda v: setattr(config.server, "port", int(v)),
        "CIDADE_SERVER_ENV": lambda v: setattr(config.server, "env", v),
        "CIDADE_STORAGE_BACKEND": lambda v: setattr(config.storage, "backend", v),
        "CIDADE_STORAGE_BASE_DIR": lambda v: setattr(config.storage, "base_dir", v),
        "CIDADE_AUTH_JWT_SECRET": lambda v: setattr(config.auth, "jwt_secret", v),
        "CIDADE_AUTH_JWT_ALGORITHM": lambda v: setattr(config.auth, "jwt_algorithm", v),
        "CIDADE_GEO_NEARBY_RADIUS_M": lambda v: setattr(config.geo, "nearby_radius_m", float(v)),
        "CIDADE_GEO_QUERY_RADIUS_M": lambda v: setattr(config.geo, "query_radius_m", float(v)),
        "CIDADE_GEO_BUCKET_SIZE_DEG": lambda v: setattr(config.geo, "bucket_size_deg", float(v)),
        "CIDADE_GEO_RECENT_LIMIT": lambda v: setattr(config.geo, "recent_limit", int(v)),
        "CIDADE_LOG_LEVEL": lambda v: setattr(config.logging, "level", v),
        "CIDADE_LOG_FORMAT": lambda v: setattr(config.logging, "format", v),
        "CIDADE_LOG_FILE": lambda v: setattr(config.logging, "file", v),
    }
    for env_key, setter in mapping.items():
        val = os.environ.get(env_key)
        if val is not None:
            setter(val)


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load configuration from YAML file + environment overrides."""
    config = AppConfig()

    # Try to load YAML
    if config_path is None:
        config_path = Path(os.environ.get("CIDADE_CONFIG", "config.yaml"))
    else:
        config_path = Path(config_path)

    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        for section_name in _SECTIONS:
            section = getattr(config, section_name)
            for k, v in (raw.get(section_name) or {}).items():
                if hasattr(section, k):
                    setattr(section, k, v)

    # Environment overrides always win
    _apply_env_overrides(config)
    return config
