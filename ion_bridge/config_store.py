from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
from dotenv import load_dotenv

from .constants import DEFAULT_SERVER_URL, ROOT_DIR

logger = structlog.get_logger(__name__)

# Load project-root .env defaults once; process env still takes precedence.
load_dotenv(dotenv_path=ROOT_DIR.parent / ".env", override=False)

DEFAULT_CONFIG: dict[str, Any] = {
    "access_token": "",
    "server_url": DEFAULT_SERVER_URL,
}

_SECRET_FIELDS = {"access_token"}


@dataclass
class IonConfig:
    """Default access token and server url used when a call does not override them."""

    default_access_token: str | None = None
    default_server_url: str = DEFAULT_SERVER_URL

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "IonConfig":
        normalized = normalize_config(raw)
        return cls(
            default_access_token=normalized["access_token"] or None,
            default_server_url=normalized["server_url"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.default_access_token or "",
            "server_url": self.default_server_url,
        }


def config_path() -> Path:
    override = os.getenv("ION_BRIDGE_CONFIG_PATH", "").strip()
    if override:
        return Path(override)
    return ROOT_DIR / "config.json"


def _read_file_config() -> dict[str, Any]:
    path = config_path()
    if not path.exists():
        return {}
    try:
        loaded = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as error:
        logger.warning("ion_config_unreadable", path=str(path), error=str(error))
        return {}
    if isinstance(loaded, dict):
        return loaded
    return {}


def _normalize_string(value: Any) -> str:
    return str(value or "").strip()


def normalize_config(config: dict[str, Any]) -> dict[str, Any]:
    server_url = _normalize_string(config.get("server_url", DEFAULT_CONFIG["server_url"]))
    return {
        "access_token": _normalize_string(config.get("access_token", DEFAULT_CONFIG["access_token"])),
        "server_url": server_url or DEFAULT_CONFIG["server_url"],
    }


def _env_config() -> dict[str, Any]:
    return normalize_config(
        {
            "access_token": os.getenv("ION_ACCESS_TOKEN", DEFAULT_CONFIG["access_token"]),
            "server_url": os.getenv("ION_SERVER_URL", DEFAULT_CONFIG["server_url"]),
        }
    )


def load_effective_config() -> IonConfig:
    loaded = _read_file_config()
    if loaded:
        # Config file exists: use config only.
        return IonConfig.from_dict({**DEFAULT_CONFIG, **loaded})

    # No config file: fall back to environment.
    return IonConfig.from_dict(_env_config())


def redact_config(config: dict[str, Any]) -> dict[str, Any]:
    redacted = json.loads(json.dumps(config))
    for field in _SECRET_FIELDS:
        if redacted.get(field):
            redacted[field] = "***"
    return redacted


def validate_config(config: dict[str, Any]) -> None:
    server_url = _normalize_string(config.get("server_url"))
    if not server_url:
        raise ValueError("server_url must not be empty")
    if not server_url.startswith(("http://", "https://")):
        raise ValueError("server_url must be an http:// or https:// url")


def save_file_config(config: dict[str, Any]) -> dict[str, Any]:
    # Merge incoming with FILE config only (never env fallback values).
    file_current_raw = _read_file_config()
    file_current = normalize_config(file_current_raw) if file_current_raw else normalize_config(DEFAULT_CONFIG)

    merged = {
        "access_token": config.get("access_token", file_current["access_token"]),
        "server_url": config.get("server_url", file_current["server_url"]),
    }

    normalized = normalize_config(merged)
    validate_config(normalized)

    path = config_path()
    path.write_text(json.dumps(normalized, indent=2, sort_keys=True), encoding="utf-8")
    logger.info("ion_config_saved", path=str(path), config=redact_config(normalized))
    return normalized


defaults = IonConfig()


def load_defaults() -> IonConfig:
    """Copy the file/environment configuration into the process-wide defaults."""
    effective = load_effective_config()
    defaults.default_access_token = effective.default_access_token
    defaults.default_server_url = effective.default_server_url
    return defaults
