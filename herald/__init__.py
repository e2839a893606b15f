"""Herald: relay GitHub release webhooks to Slack."""

from __future__ import annotations

from herald.config import ConfigError, RelayConfig, RepoFilter, SlackChannels

__all__ = ["ConfigError", "RelayConfig", "RepoFilter", "SlackChannels"]
