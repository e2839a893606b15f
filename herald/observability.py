"""Emit structured observability events for the release relay.

Every stage of the relay (webhook filtering, channel fan-out and Slack
delivery) reports through ``RelayEventLogger`` so operators can follow a
release from GitHub to Slack with one log query. Lines take the form
``[event.type] key=value ...``.

Usage
-----
>>> event_logger = RelayEventLogger()
>>> event_logger.log_webhook_skipped(reason="not_released", detail="created")

"""

from __future__ import annotations

import enum

from herald.logging import get_logger, log_debug, log_error, log_info

logger = get_logger(__name__)


class RelayEventType(enum.StrEnum):
    """Structured log event types for relay activity."""

    WEBHOOK_PING = "webhook.ping"
    WEBHOOK_SKIPPED = "webhook.skipped"
    WEBHOOK_PUBLISHED = "webhook.published"
    WEBHOOK_MALFORMED = "webhook.malformed"
    CHANNEL_PUBLISHED = "channel.published"
    CHANNEL_DELIVERY_FAILED = "channel.delivery.failed"
    SLACK_MESSAGE_SENT = "slack.message.sent"
    SLACK_MESSAGE_FAILED = "slack.message.failed"


class RelayEventLogger:
    """Emit structured relay events via femtologging."""

    def log_webhook_ping(self, *, hook_id: str | None) -> None:
        """Log a GitHub connectivity check."""
        log_info(logger, "[%s] hook_id=%s", RelayEventType.WEBHOOK_PING, hook_id)

    def log_webhook_skipped(self, *, reason: str, detail: str | None) -> None:
        """Log a delivery that was filtered out.

        Parameters
        ----------
        reason
            Short machine-readable reason (``not_released``, ``wrong_repo``).
        detail
            The action or repository that caused the skip.

        """
        log_info(
            logger,
            "[%s] reason=%s detail=%s",
            RelayEventType.WEBHOOK_SKIPPED,
            reason,
            detail,
        )

    def log_webhook_published(self, *, repo_slug: str, delivery_id: str | None) -> None:
        """Log a delivery accepted and published to the channel."""
        log_info(
            logger,
            "[%s] repo_slug=%s delivery_id=%s",
            RelayEventType.WEBHOOK_PUBLISHED,
            repo_slug,
            delivery_id,
        )

    def log_webhook_malformed(self, error: BaseException) -> None:
        """Log a delivery whose body could not be decoded."""
        log_error(
            logger,
            "[%s] error=%s",
            RelayEventType.WEBHOOK_MALFORMED,
            error,
            exc_info=error,
        )

    def log_channel_published(self, *, channel: str, subscribers: int) -> None:
        """Log a release event enqueued for every subscriber."""
        log_debug(
            logger,
            "[%s] channel=%s subscribers=%d",
            RelayEventType.CHANNEL_PUBLISHED,
            channel,
            subscribers,
        )

    def log_delivery_failed(self, *, subscriber: str, error: BaseException) -> None:
        """Log a subscriber that failed to process a release event."""
        log_error(
            logger,
            "[%s] subscriber=%s error_type=%s error=%s",
            RelayEventType.CHANNEL_DELIVERY_FAILED,
            subscriber,
            type(error).__name__,
            error,
            exc_info=error,
        )

    def log_slack_sent(self, *, channel: str, tag: str) -> None:
        """Log a release announcement accepted by Slack."""
        log_info(
            logger,
            "[%s] channel=%s tag=%s",
            RelayEventType.SLACK_MESSAGE_SENT,
            channel,
            tag,
        )

    def log_slack_failed(
        self,
        *,
        channel: str,
        payload: str,
        error: BaseException,
    ) -> None:
        """Log a Slack delivery failure with the message for diagnosis.

        Parameters
        ----------
        channel
            Slack channel the message was addressed to.
        payload
            JSON-encoded message that was being sent.
        error
            The failure; Slack API errors carry the raw response text.

        """
        log_error(
            logger,
            "[%s] channel=%s error_type=%s error=%s payload=%s",
            RelayEventType.SLACK_MESSAGE_FAILED,
            channel,
            type(error).__name__,
            error,
            payload,
            exc_info=error,
        )


__all__ = ["RelayEventLogger", "RelayEventType"]
