"""Herald HTTP API layer.

This package provides the Falcon ASGI application that receives GitHub
webhook deliveries, plus health probes.

Usage
-----
Create and run the application::

    from herald.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # relay mode with POST /payload

"""

from herald.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
