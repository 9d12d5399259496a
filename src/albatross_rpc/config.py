"""
Connection settings for an Albatross node.

Settings come from the environment, optionally seeded from
~/.albatross/.env. Variables already set in the environment win over
the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

from .errors import ConfigurationError
from .transport import DEFAULT_TIMEOUT, BasicAuth, HttpClient

# Default config directory
ALBATROSS_DIR = Path.home() / ".albatross"
ALBATROSS_ENV = ALBATROSS_DIR / ".env"

DEFAULT_RPC_URL = "http://127.0.0.1:8648"

ENV_URL = "ALBATROSS_RPC_URL"
ENV_USERNAME = "ALBATROSS_RPC_USERNAME"
ENV_PASSWORD = "ALBATROSS_RPC_PASSWORD"
ENV_TIMEOUT = "ALBATROSS_RPC_TIMEOUT"
ENV_HTTP_METHOD = "ALBATROSS_RPC_HTTP_METHOD"


@dataclass(frozen=True)
class RpcSettings:
    url: str = DEFAULT_RPC_URL
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    timeout: float = DEFAULT_TIMEOUT
    http_method: str = "POST"

    def build_client(self) -> HttpClient:
        auth = BasicAuth(self.username, self.password or "") if self.username else None
        return HttpClient(
            self.url,
            auth=auth,
            http_method=self.http_method,
            timeout=self.timeout,
        )


def load_settings(
    env_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RpcSettings:
    """
    Load RPC settings from a .env file and the environment.

    Args:
        env_path: Path to .env file (default: ~/.albatross/.env)
        environ: Environment mapping (default: os.environ)

    Raises:
        ConfigurationError: If the timeout is not a positive number
    """
    env_path = env_path or ALBATROSS_ENV
    environ = os.environ if environ is None else environ

    values: dict[str, Optional[str]] = {}
    if env_path.exists():
        values.update(dotenv_values(env_path))
    values.update({k: v for k, v in environ.items() if k.startswith("ALBATROSS_RPC_")})

    raw_timeout = values.get(ENV_TIMEOUT) or str(DEFAULT_TIMEOUT)
    try:
        timeout = float(raw_timeout)
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_TIMEOUT} must be a number, got {raw_timeout!r}") from exc
    if timeout <= 0:
        raise ConfigurationError(f"{ENV_TIMEOUT} must be positive, got {raw_timeout!r}")

    return RpcSettings(
        url=values.get(ENV_URL) or DEFAULT_RPC_URL,
        username=values.get(ENV_USERNAME) or None,
        password=values.get(ENV_PASSWORD),
        timeout=timeout,
        http_method=values.get(ENV_HTTP_METHOD) or "POST",
    )
