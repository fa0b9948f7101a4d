from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .api import MCPHTTPError

DEFAULT_BASE_URL = "https://art19.com"
DEFAULT_CONFIG_PATH = Path("~/.config/art19/config.yaml")
DEFAULT_TIMEOUT = 30.0
DEFAULT_HOST = "127.0.0.1"
DEFAULT_SESSION_TTL = 86400.0
DEFAULT_MAX_SESSIONS = 10000


class Art19ConfigError(MCPHTTPError):
    ...


def load_secret(name: str, default: Optional[str] = None, environ: Mapping[str, str] | None = None) -> Optional[str]:
    """Load a secret from ``NAME`` or ``NAME_FILE`` environment variables."""
    env = os.environ if environ is None else environ
    file_var = env.get(f"{name}_FILE")
    if file_var:
        path = Path(file_var)
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    value = env.get(name)
    if value is not None and value.strip():
        return value.strip()
    return default


def load_base_url(name: str, default: str, environ: Mapping[str, str] | None = None) -> str:
    env = os.environ if environ is None else environ
    return (env.get(name) or default).rstrip("/")


def load_float(name: str, default: float, environ: Mapping[str, str] | None = None) -> float:
    env = os.environ if environ is None else environ
    raw = env.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_int(name: str, default: int, environ: Mapping[str, str] | None = None) -> int:
    env = os.environ if environ is None else environ
    raw = env.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_config_file(path: Path) -> Dict[str, Any]:
    """Read the YAML credentials file; a missing file is an empty config."""
    path = path.expanduser()
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise Art19ConfigError(f"Could not parse {path}: {exc}", status_code=None) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise Art19ConfigError(f"{path} must contain a mapping", status_code=None)
    return data


@dataclass(frozen=True)
class Settings:
    api_token: Optional[str]
    api_credential: Optional[str]
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    host: str = DEFAULT_HOST
    port: int = 0
    session_ttl: float = DEFAULT_SESSION_TTL
    max_sessions: int = DEFAULT_MAX_SESSIONS
    log_level: str = "INFO"

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_token and self.api_credential)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        config_path: Path | None = None,
    ) -> "Settings":
        """Environment first, then the local config file."""
        env = os.environ if environ is None else environ
        token = load_secret("ART19_API_TOKEN", environ=env)
        credential = load_secret("ART19_API_CREDENTIAL", environ=env)

        if not (token and credential):
            if config_path is None:
                config_path = Path(env.get("ART19_CONFIG_FILE") or DEFAULT_CONFIG_PATH)
            file_config = load_config_file(config_path)
            token = token or _file_value(file_config, "api_token", "token")
            credential = credential or _file_value(file_config, "api_credential", "credential")

        return cls(
            api_token=token,
            api_credential=credential,
            base_url=load_base_url("ART19_BASE_URL", DEFAULT_BASE_URL, environ=env),
            timeout=load_float("ART19_HTTP_TIMEOUT", DEFAULT_TIMEOUT, environ=env),
            host=env.get("ART19_MCP_HOST") or DEFAULT_HOST,
            port=load_int("ART19_MCP_PORT", 0, environ=env),
            session_ttl=load_float("ART19_MCP_SESSION_TTL", DEFAULT_SESSION_TTL, environ=env),
            max_sessions=load_int("ART19_MCP_MAX_SESSIONS", DEFAULT_MAX_SESSIONS, environ=env),
            log_level=(env.get("ART19_MCP_LOG_LEVEL") or "INFO").upper(),
        )


def _file_value(config: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = config.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None
