"""Dramatiq worker entrypoint.

Start workers with::

    dramatiq herald.worker

Importing this module configures the broker and declares the release
channel's subscriber actors, which is all the ``dramatiq`` CLI needs.
Configuration comes from the same ``HERALD_*`` environment variables as the
web runtime.
"""

from __future__ import annotations

import os

from herald.config import RelayConfig
from herald.factory import build_channel
from herald.logging import configure_logging, get_logger, log_info, log_warning

logger = get_logger(__name__)

_log_level = os.environ.get("HERALD_LOG_LEVEL", "INFO")
_normalized_level, _invalid_level = configure_logging(_log_level)
if _invalid_level:
    log_warning(
        logger,
        "Invalid HERALD_LOG_LEVEL %r, falling back to %s",
        _log_level,
        _normalized_level,
    )

config = RelayConfig.from_env()
channel = build_channel(config)

log_info(
    logger,
    "Herald worker ready for %s (subscribers=%s)",
    config.repo_filter.full_name,
    ",".join(channel.subscribers),
)

__all__ = ["channel", "config"]
