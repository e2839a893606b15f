"""Herald runtime entrypoint.

This module provides the ASGI application factory used by Granian
(``herald.runtime:create_app``) and a ``main()`` that starts the server.

When ``HERALD_GITHUB_OWNER`` is set, the runtime loads the full
``RelayConfig`` and builds the release channel so ``POST /payload`` is
served. Otherwise it starts in health-only mode.

Configuration is driven by environment variables:

- ``HERALD_HOST``: Bind address (default ``0.0.0.0``)
- ``HERALD_PORT``: Listen port (default ``8080``)
- ``HERALD_LOG_LEVEL``: Log level (default ``INFO``)
- ``HERALD_GITHUB_OWNER`` / ``HERALD_GITHUB_REPO`` and the other
  ``HERALD_*`` relay settings described in :mod:`herald.config`

Run the service directly with ``python -m herald.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from herald.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
    except ValueError:
        port = None

    if port is None or not (_MIN_PORT <= port <= _MAX_PORT):
        log_error(
            logger,
            "Invalid HERALD_PORT value: %r (must be %d-%d)",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
        )
        raise SystemExit(1)
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from the environment.

    Returns
    -------
    falcon.asgi.App
        The relay app when ``HERALD_GITHUB_OWNER`` is set, otherwise a
        health-only app.

    """
    from herald.api.app import AppDependencies
    from herald.api.app import create_app as _create_api_app

    if not os.environ.get("HERALD_GITHUB_OWNER"):
        log_warning(logger, "HERALD_GITHUB_OWNER unset; starting in health-only mode")
        return _create_api_app()

    from herald.config import RelayConfig
    from herald.factory import build_channel

    config = RelayConfig.from_env()
    channel = build_channel(config)
    log_info(
        logger,
        "Relaying releases of %s to #%s and #%s",
        config.repo_filter.full_name,
        config.channels.all_releases,
        config.channels.breaking_changes,
    )
    return _create_api_app(
        AppDependencies(repo_filter=config.repo_filter, publisher=channel)
    )


def main() -> None:
    """Start the Herald runtime server using Granian.

    Reads ``HERALD_HOST``, ``HERALD_PORT``, and ``HERALD_LOG_LEVEL`` from
    the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("HERALD_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("HERALD_PORT", "8080"))
    log_level_str = os.environ.get("HERALD_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid HERALD_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting Herald runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "herald.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
