"""GitHub webhook ingress resource.

``WebhookResource`` terminates GitHub deliveries at ``POST /payload``,
answers GitHub's ``ping`` connectivity check, filters out everything that
is not a ``released`` action on the configured repository, and publishes
the accepted raw payload to the release channel.

Every filtered outcome answers ``200`` with a short plain-text reason:
GitHub redelivers on non-2xx, and a skipped event should not be retried.

Usage
-----
Register the ingress on a Falcon app::

    app.add_route("/payload", WebhookResource(repo_filter, channel))

"""

from __future__ import annotations

import asyncio
import typing as typ

import falcon

from herald.events.errors import WebhookPayloadError
from herald.events.models import decode_action, decode_repository_full_name
from herald.observability import RelayEventLogger

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from herald.config import RepoFilter

__all__ = [
    "PING_ACKNOWLEDGEMENT",
    "PUBLISHED_MESSAGE",
    "EventPublisher",
    "WebhookResource",
]

EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"
HOOK_ID_HEADER = "X-GitHub-Hook-ID"

PING_EVENT = "ping"
RELEASED_ACTION = "released"
PING_ACKNOWLEDGEMENT = "pong"
PUBLISHED_MESSAGE = "published release event"


class EventPublisher(typ.Protocol):
    """Destination for accepted deliveries (``ReleaseEventChannel``)."""

    def publish(self, serialized_event: str) -> object:
        """Enqueue *serialized_event* without waiting for subscribers."""
        ...


class WebhookResource:
    """Falcon resource filtering GitHub release deliveries.

    Parameters
    ----------
    repo_filter
        Repository whose releases are accepted.
    publisher
        Channel receiving accepted raw payloads.
    event_logger
        Structured event logger; a default instance is used when omitted.

    """

    def __init__(
        self,
        repo_filter: RepoFilter,
        publisher: EventPublisher,
        *,
        event_logger: RelayEventLogger | None = None,
    ) -> None:
        """Initialise the resource with its filter and publisher."""
        self._repo_filter = repo_filter
        self._publisher = publisher
        self._event_logger = event_logger or RelayEventLogger()

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /payload deliveries.

        Raises
        ------
        WebhookPayloadError
            If the body is not a UTF-8 JSON object, or (for ``released``
            actions) lacks ``repository.full_name``.

        """
        resp.status = falcon.HTTP_200
        resp.content_type = falcon.MEDIA_TEXT

        # Pings carry no release fields, so they are answered before parsing.
        if req.get_header(EVENT_HEADER) == PING_EVENT:
            self._event_logger.log_webhook_ping(hook_id=req.get_header(HOOK_ID_HEADER))
            resp.text = PING_ACKNOWLEDGEMENT
            return

        body = await req.stream.read()
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise WebhookPayloadError.invalid_encoding(exc) from exc

        action = decode_action(text)
        if action != RELEASED_ACTION:
            self._event_logger.log_webhook_skipped(reason="not_released", detail=action)
            resp.text = f"skipping event type with type '{action}'"
            return

        full_name = decode_repository_full_name(text)
        if not self._repo_filter.matches(full_name):
            self._event_logger.log_webhook_skipped(
                reason="wrong_repo", detail=full_name
            )
            resp.text = f"skipping release for repo '{full_name}'"
            return

        # Broker enqueue is blocking I/O.
        await asyncio.to_thread(self._publisher.publish, text)
        self._event_logger.log_webhook_published(
            repo_slug=full_name,
            delivery_id=req.get_header(DELIVERY_HEADER),
        )
        resp.text = PUBLISHED_MESSAGE
