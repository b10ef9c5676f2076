"""Main entry point for the OCI KMS Operator.

Run with ``kopf run -m oci_kms_operator.main``.
"""

from __future__ import annotations

import threading
from typing import Any

import kopf
from werkzeug.serving import make_server

from . import handlers  # noqa: F401
from . import health
from . import logging as structured_logging
from .config import load_config
from .handlers.shared import shutdown_event
from .tracing import initialize_tracing


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure the operator."""
    config = load_config()

    # Set up structured JSON logging
    structured_logging.setup_structured_logging()
    initialize_tracing()

    # Use AnnotationsProgressStorage to avoid conflicts with status updates
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = 0
    settings.networking.request_timeout = 30.0
    settings.execution.max_workers = config.max_workers

    # Start metrics HTTP server with health check endpoints
    combined_app = health.create_combined_wsgi_app(is_ready=lambda: not shutdown_event.is_set())
    server = make_server("", config.metrics_port, combined_app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()


@kopf.on.cleanup()
def shutdown(**_: Any) -> None:
    """Interrupt lifecycle polling so handlers return promptly."""
    shutdown_event.set()
