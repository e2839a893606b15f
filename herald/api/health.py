"""Liveness and readiness probes.

Usage
-----
Register the probes on the Falcon app::

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(config.repo_filter))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from herald.config import RepoFilter

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe reporting which repository the relay serves.

    Without a repository filter the app runs in health-only mode and the
    probe reports ``{"status": "ready"}`` alone.

    """

    def __init__(self, repo_filter: RepoFilter | None = None) -> None:
        """Initialise the probe with the optional repository filter."""
        self._repo_filter = repo_filter

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests."""
        media: dict[str, str] = {"status": "ready"}
        if self._repo_filter is not None:
            media["repository"] = self._repo_filter.full_name
        resp.media = media
        resp.status = HTTPStatus.OK
