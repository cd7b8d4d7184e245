"""Azure Functions entry point: KML Viewer analysis service.

This module registers the HTTP functions using the Python v2
programming model.

All business logic lives in the kml_viewer package. This file is purely
the wiring layer between Azure Functions bindings and application code.
"""

from __future__ import annotations

import json
import logging
import uuid

import azure.functions as func

from kml_viewer import __version__
from kml_viewer.core.config import ViewerConfig
from kml_viewer.core.constants import UPLOAD_FAILURE_MESSAGE
from kml_viewer.core.exceptions import PipelineError
from kml_viewer.orchestrators.upload_pipeline import process_upload

app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)

logger = logging.getLogger("kml_viewer.function_app")

# Fail fast on bad settings when the host loads the app.
CONFIG = ViewerConfig.from_env()

JSON_MIMETYPE = "application/json"


# ---------------------------------------------------------------------------
# HTTP: Analyze an uploaded KML document
# ---------------------------------------------------------------------------


def analyze_kml_upload(
    req: func.HttpRequest, config: ViewerConfig | None = None
) -> func.HttpResponse:
    """Run the upload pipeline for one request and build the HTTP response.

    The request body is the raw KML document; the original filename is
    taken from the ``filename`` query parameter (or ``X-Filename``
    header).

    Returns:
        200 with the ``DocumentReport`` JSON, or 422 with a structured
        error payload when the document cannot be displayed.
    """
    config = config or CONFIG
    filename = req.params.get("filename") or req.headers.get("x-filename") or ""
    correlation_id = req.headers.get("x-correlation-id") or str(uuid.uuid4())

    logger.info(
        "analyze_kml request received | file=%s | correlation_id=%s",
        filename,
        correlation_id,
    )

    try:
        report = process_upload(
            req.get_body(),
            source_filename=filename,
            config=config,
            correlation_id=correlation_id,
        )
    except PipelineError as exc:
        body = {"error": UPLOAD_FAILURE_MESSAGE, "detail": exc.to_error_dict()}
        return func.HttpResponse(
            json.dumps(body),
            status_code=422,
            mimetype=JSON_MIMETYPE,
            headers={"x-correlation-id": correlation_id},
        )

    return func.HttpResponse(
        report.to_json(),
        status_code=200,
        mimetype=JSON_MIMETYPE,
        headers={"x-correlation-id": correlation_id},
    )


@app.function_name("analyze_kml")
@app.route(route="kml/analyze", methods=["POST"])
def analyze_kml(req: func.HttpRequest) -> func.HttpResponse:
    """Analyse an uploaded KML document: summary, details, and GeoJSON."""
    return analyze_kml_upload(req)


# ---------------------------------------------------------------------------
# HTTP: Health probe
# ---------------------------------------------------------------------------


def health_status() -> func.HttpResponse:
    """Build the health probe response."""
    return func.HttpResponse(
        json.dumps({"status": "ok", "version": __version__}),
        status_code=200,
        mimetype=JSON_MIMETYPE,
    )


@app.function_name("health")
@app.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health(req: func.HttpRequest) -> func.HttpResponse:
    """Liveness probe for load balancers and local debugging."""
    return health_status()
