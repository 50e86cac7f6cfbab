"""Central configuration.

Both halves of version-watch are configured from environment variables. A
``config.env`` file in the working directory (or the path named by
``VERSION_WATCH_CONFIG_FILE``) is loaded first so local runs can keep their
settings out of the shell.

Server env vars:
  SERVER_VERSION   - override the reported version (defaults to the package version)
  SERVER_HOST      - bind address (default 0.0.0.0)
  SERVER_PORT      - bind port (default 8080)
  LOG_LEVEL        - logging level name (default INFO)

Client env vars:
  SERVER_URL             - info endpoint to poll (default http://localhost:8080/info)
  SUPPORTED_VERSIONS     - accepted version range (default >=0.1.0)
  POLL_INTERVAL_SECONDS  - seconds between polls (default 10)
  FETCH_TIMEOUT_SECONDS  - per-request timeout (default 5)
  DOCKER                 - remap localhost targets to host.docker.internal
"""
from __future__ import annotations

import logging
import math
import os
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel

from version_watch import __version__
from version_watch.core.errors import ConfigError
from version_watch.utils.url_helpers import dockerize_localhost, is_http_url

_log = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://localhost:8080/info"
DEFAULT_VERSION_RANGE = ">=0.1.0"
DEFAULT_POLL_INTERVAL = 10.0
DEFAULT_FETCH_TIMEOUT = 5.0
DEFAULT_SERVER_PORT = 8080

ENV_SERVER_URL = "SERVER_URL"
ENV_SUPPORTED_VERSIONS = "SUPPORTED_VERSIONS"
ENV_POLL_INTERVAL = "POLL_INTERVAL_SECONDS"
ENV_FETCH_TIMEOUT = "FETCH_TIMEOUT_SECONDS"


def load_env_file() -> Path | None:
    candidates: list[Path] = []
    override = os.getenv('VERSION_WATCH_CONFIG_FILE')
    if override:
        candidates.append(Path(override))
    candidates.append(Path.cwd() / 'config.env')
    for path in candidates:
        if path.is_file():
            # Real environment variables win over the file.
            load_dotenv(str(path), override=False)
            return path
    return None


load_env_file()


def _env_str(environ: Mapping[str, str], name: str, default: str) -> str:
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_flag(environ: Mapping[str, str], name: str, default: bool = False) -> bool:
    value = environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_seconds(environ: Mapping[str, str], name: str, default: float) -> float:
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        seconds = float(value.strip())
    except ValueError:
        seconds = -1.0
    if not math.isfinite(seconds) or seconds <= 0:
        _log.warning("Invalid value %r for %s, using default %s", value, name, default)
        return default
    return seconds


def _env_port(environ: Mapping[str, str], name: str, default: int) -> int:
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        port = int(value.strip())
    except ValueError:
        port = 0
    if not 0 < port < 65536:
        _log.warning("Invalid value %r for %s, using default %s", value, name, default)
        return default
    return port


class Settings(BaseModel):
    app_name: str = 'version-watch server'
    version: str = __version__
    host: str = '0.0.0.0'
    port: int = DEFAULT_SERVER_PORT
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            version=_env_str(env, 'SERVER_VERSION', __version__),
            host=_env_str(env, 'SERVER_HOST', '0.0.0.0'),
            port=_env_port(env, 'SERVER_PORT', DEFAULT_SERVER_PORT),
            log_level=_env_str(env, 'LOG_LEVEL', 'INFO'),
        )


class ClientSettings(BaseModel):
    """Client configuration, built once at startup and handed to the poller."""

    server_url: str = DEFAULT_SERVER_URL
    supported_versions: str = DEFAULT_VERSION_RANGE
    poll_interval: float = DEFAULT_POLL_INTERVAL
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    log_level: str = 'INFO'
    docker_mode: bool = False

    @property
    def target_url(self) -> str:
        return dockerize_localhost(self.server_url, enabled=self.docker_mode) or self.server_url

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientSettings":
        env = os.environ if environ is None else environ
        server_url = _env_str(env, ENV_SERVER_URL, DEFAULT_SERVER_URL)
        if not is_http_url(server_url):
            raise ConfigError(f"{ENV_SERVER_URL} must be an http(s) URL, got {server_url!r}")
        return cls(
            server_url=server_url,
            supported_versions=_env_str(env, ENV_SUPPORTED_VERSIONS, DEFAULT_VERSION_RANGE),
            poll_interval=_env_seconds(env, ENV_POLL_INTERVAL, DEFAULT_POLL_INTERVAL),
            fetch_timeout=_env_seconds(env, ENV_FETCH_TIMEOUT, DEFAULT_FETCH_TIMEOUT),
            log_level=_env_str(env, 'LOG_LEVEL', 'INFO'),
            docker_mode=_env_flag(env, 'DOCKER'),
        )


settings = Settings.from_env()
