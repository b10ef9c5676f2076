"""Health check endpoints for the operator."""

from typing import Any, Callable

from prometheus_client import make_wsgi_app
from werkzeug.wrappers import Response


def _healthz() -> Response:
    return Response('{"status":"ok"}', mimetype="application/json", status=200)


def _readyz(ready: bool) -> Response:
    if ready:
        return Response('{"status":"ready"}', mimetype="application/json", status=200)
    return Response('{"status":"shutting down"}', mimetype="application/json", status=503)


def create_combined_wsgi_app(is_ready: Callable[[], bool] = lambda: True) -> Any:
    """Create a WSGI app that combines metrics and health check endpoints.

    /healthz reports liveness, /readyz reports readiness (503 once the
    operator is shutting down) and every other path is served by the
    Prometheus exporter.

    Args:
        is_ready: Callable reporting readiness for /readyz

    Returns:
        Combined WSGI application
    """
    metrics_app = make_wsgi_app()

    def combined_app(environ: dict[str, Any], start_response: Any) -> list[bytes]:
        path = environ.get("PATH_INFO", "")

        if path == "/healthz":
            return _healthz()(environ, start_response)
        if path == "/readyz":
            return _readyz(is_ready())(environ, start_response)
        return metrics_app(environ, start_response)

    return combined_app
