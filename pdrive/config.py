"""Configuration management for pdrive.

Settings live in a JSON file under the per-user config directory
(``appdirs.user_config_dir("pdrive")``). Environment variables override
individual fields after the file is read.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Tuple

from appdirs import user_config_dir

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "pdrive"
CONFIG_FILENAME = "config.json"

ENV_TOKEN = "PDRIVE_TOKEN"
ENV_API_URL = "PDRIVE_API_URL"
ENV_CONCURRENT_REQUESTS = "PDRIVE_CONCURRENT_REQUESTS"


@dataclass(frozen=True)
class Config:
    """Immutable configuration for one run."""
    token: str = "MISSING_TOKEN"
    api_url: str = "MISSING_API"
    concurrent_requests: int = 2

    def __post_init__(self):
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))
        if isinstance(self.concurrent_requests, bool) or not isinstance(
            self.concurrent_requests, int
        ):
            raise ConfigError(
                f"concurrent_requests must be an integer, got {self.concurrent_requests!r}"
            )
        if self.concurrent_requests < 1:
            raise ConfigError(
                f"concurrent_requests must be at least 1, got {self.concurrent_requests}"
            )

    def with_concurrency(self, concurrent_requests: Optional[int]) -> "Config":
        if concurrent_requests is None:
            return self
        return replace(self, concurrent_requests=concurrent_requests)

    def absolute_url(self, location: str) -> str:
        """Join a server-returned relative location onto the API URL."""
        return f"{self.api_url}/{location}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def default_config_path() -> Path:
    return Path(user_config_dir(APP_NAME)) / CONFIG_FILENAME


def default_env_file() -> Optional[Path]:
    candidate = Path(".env")
    return candidate if candidate.is_file() else None


def _parse_env_line(line: str) -> Optional[Tuple[str, str]]:
    text = line.strip()
    if not text or text.startswith("#"):
        return None
    text = text.removeprefix("export ").lstrip()
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not name:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return name, value


def apply_env_file(
    path: Path,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Load NAME=value pairs from a dotenv file into the environment.

    Variables that are already set win over the file. Returns the pairs
    that were applied.
    """
    env = os.environ if environ is None else environ
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"could not read env file {path}: {exc}") from exc

    applied: Dict[str, str] = {}
    for line in content.splitlines():
        pair = _parse_env_line(line)
        if pair is None or pair[0] in env:
            continue
        env[pair[0]] = pair[1]
        applied[pair[0]] = pair[1]
    if applied:
        logger.debug("Applied %s from %s", ", ".join(sorted(applied)), path)
    return applied


def _parse_concurrency(value: Any, source: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ConfigError(f"invalid concurrent_requests in {source}: {value!r}") from exc
    raise ConfigError(f"concurrent_requests in {source} must be an integer, got {value!r}")


def _read_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        defaults = Config().to_dict()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(defaults, indent=2), encoding="utf-8")
            logger.info("Wrote default configuration to %s", path)
        except OSError as exc:
            logger.warning("Could not write default configuration to %s: %s", path, exc)
        return defaults

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"config file {path} is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"could not read config file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")
    return data


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """
    Load configuration from file, creating defaults if necessary.

    Args:
        path: Config file path (defaults to the per-user settings location)
        environ: Environment mapping used for overrides (defaults to os.environ)

    Returns:
        Config value for this run
    """
    config_path = Path(path) if path is not None else default_config_path()
    env = os.environ if environ is None else environ

    data = _read_file(config_path)
    defaults = Config()
    token = data.get("token", defaults.token)
    api_url = data.get("api_url", defaults.api_url)
    concurrency = _parse_concurrency(
        data.get("concurrent_requests", defaults.concurrent_requests),
        str(config_path),
    )

    if env.get(ENV_TOKEN):
        token = env[ENV_TOKEN]
    if env.get(ENV_API_URL):
        api_url = env[ENV_API_URL]
    if env.get(ENV_CONCURRENT_REQUESTS):
        concurrency = _parse_concurrency(env[ENV_CONCURRENT_REQUESTS], ENV_CONCURRENT_REQUESTS)

    config = Config(token=str(token), api_url=str(api_url), concurrent_requests=concurrency)
    logger.debug(
        "Loaded config from %s: api_url=%s concurrent_requests=%d",
        config_path,
        config.api_url,
        config.concurrent_requests,
    )
    return config
