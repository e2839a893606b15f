"""Falcon error handlers for the webhook API.

Usage
-----
Register the handler on the Falcon app::

    app.add_error_handler(WebhookPayloadError, handle_malformed_payload)

"""

from __future__ import annotations

import typing as typ

import falcon

from herald.events.errors import WebhookPayloadError
from herald.observability import RelayEventLogger

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["WebhookPayloadError", "handle_malformed_payload"]

_event_logger = RelayEventLogger()


async def handle_malformed_payload(
    _req: Request,
    resp: Response,
    ex: WebhookPayloadError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``WebhookPayloadError`` to an HTTP 500 plain-text response.

    Deliveries come from GitHub, a trusted source, so an undecodable body
    is treated as a per-request fault rather than a client error.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and body are set.
    ex
        The decoding failure.
    _params
        URI template parameters (unused).

    """
    _event_logger.log_webhook_malformed(ex)
    resp.status = falcon.HTTP_500
    resp.content_type = falcon.MEDIA_TEXT
    resp.text = str(ex)
