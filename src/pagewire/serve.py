from __future__ import annotations

import logging
from collections.abc import Callable

import uvicorn

from pagewire.app import LOG_FORMAT, create_app
from pagewire.builder import AppBuilder, build_app
from pagewire.config import ServerConfig, resolve_config
from pagewire.schema import PagewireApp


def run_app(
    app: PagewireApp | Callable[[AppBuilder], None],
    *,
    host: str | None = None,
    port: int | None = None,
    config: ServerConfig | None = None,
) -> None:
    """Build (if needed) and serve an app until the process is stopped.

    Explicit ``host``/``port`` win over config, which is resolved from
    PAGEWIRE_CONFIG / PAGEWIRE_BIND / PAGEWIRE_PORT when not given.
    """

    config = config or resolve_config()
    logging.basicConfig(level=config.logging.level.upper(), format=LOG_FORMAT)

    app_def = app if isinstance(app, PagewireApp) else build_app(app)

    uvicorn.run(
        create_app(app_def, config),
        host=host or config.network.bind_host,
        port=config.network.port if port is None else port,
    )
