"""Fan-out of release events from the webhook to independent subscribers.

``ReleaseEventChannel`` declares one Dramatiq actor, on its own queue, for
each subscribed ``ReleaseHandler``. Publishing sends the serialized event
to every actor and returns without waiting; a Dramatiq worker later decodes
the event and runs the handler.

Delivery is at-least-once and unordered. Handlers must tolerate seeing the
same release twice. Actors are declared with ``max_retries=0``: a failed
delivery is dead-lettered, never retried.

Usage
-----
Subscribe a handler and publish a raw GitHub delivery:

>>> channel = ReleaseEventChannel(broker)
>>> channel.subscribe(publisher, name="slack")
>>> channel.publish(raw_body)

"""

from __future__ import annotations

import asyncio
import re
import typing as typ

import dramatiq

from herald.observability import RelayEventLogger

from .models import ReleaseEvent, decode_release_event

_DEFAULT_CHANNEL_NAME = "releases"
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@typ.runtime_checkable
class ReleaseHandler(typ.Protocol):
    """Protocol for release event subscribers.

    Implementations receive each published release once per delivery.
    The channel never inspects the concrete type, so publishers other
    than Slack can subscribe side by side.

    """

    async def handle(self, release: ReleaseEvent) -> None:
        """Process one release event."""
        ...


def _default_subscriber_name(handler: ReleaseHandler) -> str:
    return _CAMEL_BOUNDARY.sub("_", type(handler).__name__).lower()


class ReleaseEventChannel:
    """Dramatiq-backed publish/subscribe channel for release events."""

    def __init__(
        self,
        broker: dramatiq.Broker,
        *,
        name: str = _DEFAULT_CHANNEL_NAME,
        event_logger: RelayEventLogger | None = None,
    ) -> None:
        """Bind the channel to *broker*.

        Parameters
        ----------
        broker
            Broker on which subscriber actors are declared.
        name
            Prefix for actor and queue names (``<name>.<subscriber>``).
        event_logger
            Structured event logger; a default instance is used when omitted.

        """
        self._broker = broker
        self._name = name
        self._event_logger = event_logger or RelayEventLogger()
        self._handlers: dict[str, ReleaseHandler] = {}
        self._actors: dict[str, dramatiq.Actor] = {}

    @property
    def name(self) -> str:
        """Return the channel name used to prefix actors and queues."""
        return self._name

    @property
    def subscribers(self) -> tuple[str, ...]:
        """Return subscriber names in subscription order."""
        return tuple(self._actors)

    def actor_for(self, subscriber: str) -> dramatiq.Actor:
        """Return the Dramatiq actor delivering to *subscriber*."""
        return self._actors[subscriber]

    def subscribe(
        self,
        handler: ReleaseHandler,
        *,
        name: str | None = None,
    ) -> dramatiq.Actor:
        """Register *handler* and declare its delivery actor.

        Parameters
        ----------
        handler
            Subscriber invoked once per delivered event.
        name
            Subscriber name; defaults to the snake-cased handler class name.

        Returns
        -------
        dramatiq.Actor
            The actor that delivers events to *handler*.

        Raises
        ------
        ValueError
            If a subscriber with the same name is already registered.

        """
        subscriber = name or _default_subscriber_name(handler)
        if subscriber in self._handlers:
            msg = f"subscriber {subscriber!r} already registered on {self._name!r}"
            raise ValueError(msg)

        qualified = f"{self._name}.{subscriber}"

        def deliver(serialized_event: str) -> None:
            self.deliver(subscriber, serialized_event)

        actor = dramatiq.actor(
            deliver,
            actor_name=qualified,
            queue_name=qualified,
            broker=self._broker,
            max_retries=0,
        )
        self._handlers[subscriber] = handler
        self._actors[subscriber] = actor
        return actor

    def publish(self, serialized_event: str) -> list[dramatiq.Message]:
        """Enqueue *serialized_event* for every current subscriber.

        Returns as soon as the messages are enqueued; subscriber
        completion is never awaited.
        """
        messages = [actor.send(serialized_event) for actor in self._actors.values()]
        self._event_logger.log_channel_published(
            channel=self._name, subscribers=len(messages)
        )
        return messages

    def deliver(self, subscriber: str, serialized_event: str) -> None:
        """Decode *serialized_event* and run one subscriber to completion.

        Worker actors call this for every message; tests call it directly
        to replay duplicate or out-of-order deliveries deterministically.

        Raises
        ------
        KeyError
            If *subscriber* is not registered.
        ReleaseDecodeError
            If the event cannot be decoded.

        """
        handler = self._handlers[subscriber]
        try:
            release = decode_release_event(serialized_event)
            asyncio.run(handler.handle(release))
        except Exception as exc:
            self._event_logger.log_delivery_failed(subscriber=subscriber, error=exc)
            raise


__all__ = ["ReleaseEventChannel", "ReleaseHandler"]
