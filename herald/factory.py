"""Assemble the release channel and its Slack subscriber from configuration.

Both the web process (which publishes) and the Dramatiq worker (which
delivers) call ``build_channel`` so they declare identically named actors
on the same broker.

Usage
-----
>>> channel = build_channel(RelayConfig.from_env())
>>> channel.subscribers
('slack',)

"""

from __future__ import annotations

import typing as typ

from herald.events.broker import ensure_broker_configured
from herald.events.channel import ReleaseEventChannel
from herald.observability import RelayEventLogger
from herald.slack.client import SlackClient, SlackConfig
from herald.slack.publisher import SlackReleasePublisher

if typ.TYPE_CHECKING:
    import dramatiq
    import httpx

    from herald.config import RelayConfig

__all__ = ["SLACK_SUBSCRIBER", "build_channel", "build_slack_publisher"]

SLACK_SUBSCRIBER = "slack"


def build_slack_publisher(
    config: RelayConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    event_logger: RelayEventLogger | None = None,
) -> SlackReleasePublisher:
    """Build the Slack publisher described by *config*."""
    client = SlackClient(
        SlackConfig(token_ref=config.slack_token_ref, timeout_s=config.slack_timeout_s),
        transport=transport,
    )
    return SlackReleasePublisher(
        client,
        config.channels,
        event_logger=event_logger,
    )


def build_channel(
    config: RelayConfig,
    *,
    broker: dramatiq.Broker | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ReleaseEventChannel:
    """Build the release channel with the Slack publisher subscribed.

    Parameters
    ----------
    config
        Relay configuration.
    broker
        Broker to declare actors on; defaults to the process-wide broker
        from :func:`herald.events.broker.ensure_broker_configured`.
    transport
        Optional httpx transport for the Slack client (tests).

    """
    event_logger = RelayEventLogger()
    channel = ReleaseEventChannel(
        broker if broker is not None else ensure_broker_configured(),
        event_logger=event_logger,
    )
    channel.subscribe(
        build_slack_publisher(config, transport=transport, event_logger=event_logger),
        name=SLACK_SUBSCRIBER,
    )
    return channel
