"""Relay configuration loaded once at startup.

Usage
-----
Build a configuration explicitly:

>>> config = RelayConfig(repo_filter=RepoFilter(owner="acme", repo="widget"))
>>> config.repo_filter.full_name
'acme/widget'

Or load it from ``HERALD_*`` environment variables:

>>> config = RelayConfig.from_env()

"""

from __future__ import annotations

import dataclasses as dc
import os

_DEFAULT_ALL_RELEASES_CHANNEL = "releases"
_DEFAULT_BREAKING_CHANGES_CHANNEL = "breaking-changes"
_DEFAULT_TOKEN_REF = "env:HERALD_SLACK_TOKEN"
_DEFAULT_TIMEOUT_S = 10.0


class ConfigError(ValueError):
    """Raised when relay configuration is missing or invalid."""

    @classmethod
    def missing(cls, env_var: str) -> ConfigError:
        """Return an error for a required environment variable that is unset."""
        return cls(f"{env_var} is required")

    @classmethod
    def invalid(cls, env_var: str, raw: str, reason: str) -> ConfigError:
        """Return an error for an environment variable with a bad value."""
        return cls(f"{env_var} {reason}, got: {raw!r}")


@dc.dataclass(frozen=True, slots=True)
class RepoFilter:
    """The single GitHub repository whose releases an ingress accepts.

    Attributes
    ----------
    owner
        GitHub owner or organisation.
    repo
        Repository name.

    """

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        """Return the ``owner/repo`` form GitHub uses in webhook payloads."""
        return f"{self.owner}/{self.repo}"

    def matches(self, full_name: str) -> bool:
        """Return True when *full_name* names the configured repository."""
        return full_name == self.full_name


@dc.dataclass(frozen=True, slots=True)
class SlackChannels:
    """Destination Slack channels for release announcements."""

    all_releases: str = _DEFAULT_ALL_RELEASES_CHANNEL
    breaking_changes: str = _DEFAULT_BREAKING_CHANGES_CHANNEL


@dc.dataclass(frozen=True, slots=True)
class RelayConfig:
    """Everything the relay needs to filter, format and deliver releases.

    Attributes
    ----------
    repo_filter
        Repository whose ``released`` events are accepted.
    channels
        Slack channels receiving every release and breaking releases.
    slack_token_ref
        Secret reference resolved to the Slack bearer token at send time
        (see :mod:`herald.secrets`).
    slack_timeout_s
        Timeout applied to each outbound Slack request.

    """

    repo_filter: RepoFilter
    channels: SlackChannels = dc.field(default_factory=SlackChannels)
    slack_token_ref: str = _DEFAULT_TOKEN_REF
    slack_timeout_s: float = _DEFAULT_TIMEOUT_S

    @staticmethod
    def _require(env_var: str) -> str:
        value = os.environ.get(env_var, "").strip()
        if not value:
            raise ConfigError.missing(env_var)
        return value

    @staticmethod
    def _optional(env_var: str, default: str) -> str:
        value = os.environ.get(env_var, "").strip()
        return value or default

    @staticmethod
    def _parse_timeout(env_var: str, default: float) -> float:
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            raise ConfigError.invalid(env_var, raw, "must be a number") from exc
        if value <= 0:
            raise ConfigError.invalid(env_var, raw, "must be positive")
        return value

    @classmethod
    def from_env(cls) -> RelayConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``HERALD_GITHUB_OWNER`` and ``HERALD_GITHUB_REPO`` (required):
          the repository whose releases are relayed.
        - ``HERALD_ALL_RELEASES_CHANNEL``: channel for every release.
        - ``HERALD_BREAKING_CHANGES_CHANNEL``: channel for breaking releases.
        - ``HERALD_SLACK_TOKEN_REF``: secret reference for the Slack token.
        - ``HERALD_SLACK_TIMEOUT_S``: positive request timeout in seconds.

        Raises
        ------
        ConfigError
            If a required variable is unset or a value is invalid.

        """
        repo_filter = RepoFilter(
            owner=cls._require("HERALD_GITHUB_OWNER"),
            repo=cls._require("HERALD_GITHUB_REPO"),
        )
        channels = SlackChannels(
            all_releases=cls._optional(
                "HERALD_ALL_RELEASES_CHANNEL", _DEFAULT_ALL_RELEASES_CHANNEL
            ),
            breaking_changes=cls._optional(
                "HERALD_BREAKING_CHANGES_CHANNEL", _DEFAULT_BREAKING_CHANGES_CHANNEL
            ),
        )
        return cls(
            repo_filter=repo_filter,
            channels=channels,
            slack_token_ref=cls._optional("HERALD_SLACK_TOKEN_REF", _DEFAULT_TOKEN_REF),
            slack_timeout_s=cls._parse_timeout(
                "HERALD_SLACK_TIMEOUT_S", _DEFAULT_TIMEOUT_S
            ),
        )


__all__ = ["ConfigError", "RelayConfig", "RepoFilter", "SlackChannels"]
