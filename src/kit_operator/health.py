"""Health check and metrics endpoint for the operator."""

from __future__ import annotations

import threading
from typing import Any, Callable

from prometheus_client import make_wsgi_app
from werkzeug.serving import BaseWSGIServer, make_server
from werkzeug.wrappers import Response


def create_combined_wsgi_app(ready_check: Callable[[], bool] | None = None) -> Any:
    """Create a WSGI app that serves /healthz, /readyz and delegates the rest to prometheus.

    Args:
        ready_check: Callable reporting whether the operator can take work

    Returns:
        Combined WSGI application
    """
    metrics_app = make_wsgi_app()

    def combined_app(environ: dict[str, Any], start_response: Any) -> Any:
        path = environ.get("PATH_INFO", "")

        if path == "/healthz":
            response = Response('{"status":"ok"}', mimetype="application/json", status=200)
            return response(environ, start_response)
        if path == "/readyz":
            if ready_check is None or ready_check():
                response = Response('{"status":"ready"}', mimetype="application/json", status=200)
            else:
                response = Response('{"status":"not ready"}', mimetype="application/json", status=503)
            return response(environ, start_response)
        return metrics_app(environ, start_response)

    return combined_app


def start_health_server(port: int, ready_check: Callable[[], bool] | None = None) -> BaseWSGIServer:
    """Serve metrics and health endpoints from a background thread."""
    server = make_server("", port, create_combined_wsgi_app(ready_check), threaded=True)
    thread = threading.Thread(target=server.serve_forever, name="health-server", daemon=True)
    thread.start()
    return server
