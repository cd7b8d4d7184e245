"""Upload pipeline for a single KML document.

Runs the steps for one upload, synchronously and to completion:

1. Ingress checks: filename extension, body size
2. Convert KML (activity): document -> FeatureCollection
3. Analyze features (activity): summary + detail rows
4. Build the ``DocumentReport`` handed to the presentation layer

Nothing is retained between uploads: each call builds a fresh
collection and report, and a failure at any step produces no report.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_viewer.activities.analyze_features import analyze_features
from kml_viewer.activities.convert_kml import convert_kml
from kml_viewer.core.config import ViewerConfig
from kml_viewer.core.exceptions import PipelineError
from kml_viewer.core.ingress import decode_document, read_upload_body, validate_upload_name
from kml_viewer.models.report import build_document_report

if TYPE_CHECKING:
    from kml_viewer.models.report import DocumentReport

logger = logging.getLogger("kml_viewer.orchestrators.upload_pipeline")


def process_upload(
    content: bytes | str,
    *,
    source_filename: str = "",
    config: ViewerConfig | None = None,
    correlation_id: str = "",
) -> DocumentReport:
    """Convert and analyse one uploaded document.

    Args:
        content: Raw KML document.
        source_filename: Original filename, checked against the accepted
            extensions when non-empty.
        config: Viewer configuration (defaults apply when omitted).
        correlation_id: Request identifier attached to logs and errors.

    Returns:
        The ``DocumentReport`` for the document.

    Raises:
        UploadRejected: If the filename or body fails ingress checks.
        ParseFailure: If the document is not well-formed KML.
        InvalidFeature: If a converted feature has no geometry type.
    """
    config = config or ViewerConfig()

    try:
        filename = validate_upload_name(source_filename, config)
        document = read_upload_body(decode_document(content, config), config)

        collection = convert_kml(document, source_filename=filename)
        analysis = analyze_features(collection)
    except PipelineError as exc:
        if not exc.correlation_id:
            exc.correlation_id = correlation_id
        logger.warning(
            "Upload failed | file=%s | code=%s | stage=%s | correlation_id=%s | %s",
            source_filename,
            exc.code,
            exc.stage,
            correlation_id,
            exc.message,
        )
        raise

    logger.info(
        "Upload analysed | file=%s | features=%d | types=%d | correlation_id=%s",
        filename,
        analysis.summary.total,
        len(analysis.summary.counts),
        correlation_id,
    )
    return build_document_report(collection, analysis)
