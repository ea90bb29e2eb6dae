from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

CONFIG_ENV = "PAGEWIRE_CONFIG"
BIND_ENV = "PAGEWIRE_BIND"
PORT_ENV = "PAGEWIRE_PORT"


class NetworkConfig(BaseModel):
    bind_host: str = Field(default="127.0.0.1")
    port: int = Field(default=7860, ge=0, le=65535)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    file: str | None = Field(
        default=None,
        description="Optional log file; when set, a rotating file handler is attached.",
    )
    max_size_mb: int = Field(
        default=10, ge=1, description="Max size of a log file in MB before rolling."
    )
    backup_count: int = Field(default=5, ge=1, description="Number of log archives to keep.")


class UiConfig(BaseModel):
    enabled: bool = Field(default=True, description="Serve the server-rendered page at '/'.")
    page_title: str | None = Field(
        default=None,
        description="Browser title; defaults to the title of the first page.",
    )


class ServerConfig(BaseModel):
    version: str = Field(default="1")
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    ui: UiConfig = Field(default_factory=UiConfig)


def _read_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_config(path: Path | None) -> ServerConfig:
    """Load server config from a JSON file.

    - If ``path`` is None or missing: returns defaults.
    - Validation is performed by Pydantic.
    """

    if path is None or not path.exists():
        return ServerConfig()

    raw = _read_json(path)
    return ServerConfig.model_validate(raw)


def resolve_config(environ: dict[str, str] | None = None) -> ServerConfig:
    """Load the config named by PAGEWIRE_CONFIG and apply bind/port overrides."""

    env = os.environ if environ is None else environ

    raw_path = (env.get(CONFIG_ENV) or "").strip()
    config = load_config(Path(raw_path).expanduser() if raw_path else None)

    network = config.network
    host = (env.get(BIND_ENV) or "").strip()
    if host:
        network = network.model_copy(update={"bind_host": host})
    port = (env.get(PORT_ENV) or "").strip()
    if port:
        network = NetworkConfig.model_validate({**network.model_dump(), "port": port})

    if network is config.network:
        return config
    return config.model_copy(update={"network": network})
