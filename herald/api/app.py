"""Application factory for the Herald Falcon ASGI application.

Usage
-----
Create a health-only app (no relay configuration)::

    app = create_app()

Create the full relay::

    from herald.api.app import AppDependencies, create_app

    deps = AppDependencies(repo_filter=config.repo_filter, publisher=channel)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from herald.api.errors import WebhookPayloadError, handle_malformed_payload
from herald.api.health import HealthResource, ReadyResource
from herald.api.webhook import WebhookResource

if typ.TYPE_CHECKING:
    from herald.api.webhook import EventPublisher
    from herald.config import RepoFilter
    from herald.observability import RelayEventLogger

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the webhook ingress.

    Attributes
    ----------
    repo_filter
        Repository whose releases are accepted.
    publisher
        Channel receiving accepted raw payloads.
    event_logger
        Optional structured event logger shared by the resources.

    """

    repo_filter: RepoFilter
    publisher: EventPublisher
    event_logger: RelayEventLogger | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    ``/health`` and ``/ready`` are always registered. ``POST /payload`` is
    registered only when *dependencies* are supplied.

    """
    app = falcon.asgi.App()

    app.add_route("/health", HealthResource())

    if dependencies is None:
        app.add_route("/ready", ReadyResource())
    else:
        app.add_route("/ready", ReadyResource(dependencies.repo_filter))
        app.add_route(
            "/payload",
            WebhookResource(
                dependencies.repo_filter,
                dependencies.publisher,
                event_logger=dependencies.event_logger,
            ),
        )

    app.add_error_handler(WebhookPayloadError, handle_malformed_payload)

    return app
