"""Thin ingress boundary helpers for the HTTP entrypoint.

Centralises the transport concerns so that ``function_app.py`` contains
only trigger bindings and handoff:

- **validate_upload_name**: checks the uploaded filename's extension.
- **read_upload_body**: enforces the non-empty and maximum-size rules
  on the raw request body.
- **decode_document**: normalises ``str`` or ``bytes`` input to bytes
  for the XML parser.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_viewer.core.exceptions import ValidationError

if TYPE_CHECKING:
    from kml_viewer.core.config import ViewerConfig

logger = logging.getLogger("kml_viewer.core.ingress")


class UploadRejected(ValidationError):
    """Raised when an upload is refused before conversion."""

    default_stage = "ingress"
    default_code = "UPLOAD_REJECTED"


# ---------------------------------------------------------------------------
# Filename
# ---------------------------------------------------------------------------


def validate_upload_name(filename: str, config: ViewerConfig) -> str:
    """Validate the uploaded filename against the accepted extensions.

    An empty filename is allowed (the client did not send one); any other
    name must end with an accepted extension, case-insensitively.

    Returns:
        The stripped filename.

    Raises:
        UploadRejected: If the extension is not accepted.
    """
    name = filename.strip()
    if not name:
        return name

    if not name.lower().endswith(config.accepted_extensions):
        msg = (
            f"File '{name}' is not an accepted document type "
            f"(expected {', '.join(config.accepted_extensions)})"
        )
        raise UploadRejected(msg, code="UNSUPPORTED_EXTENSION")
    return name


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------


def read_upload_body(body: bytes | None, config: ViewerConfig) -> bytes:
    """Return the request body after size checks.

    Raises:
        UploadRejected: If the body is empty or exceeds
            ``config.max_upload_bytes``.
    """
    if not body:
        msg = "Upload body is empty"
        raise UploadRejected(msg, code="EMPTY_UPLOAD")

    if len(body) > config.max_upload_bytes:
        msg = (
            f"Upload of {len(body)} bytes exceeds the limit of "
            f"{config.max_upload_bytes} bytes"
        )
        raise UploadRejected(msg, code="UPLOAD_TOO_LARGE")

    logger.debug("Upload body accepted | bytes=%d", len(body))
    return body


def decode_document(content: bytes | str, config: ViewerConfig) -> bytes:
    """Normalise document content to bytes for the XML parser.

    ``str`` content is encoded with ``config.encoding``; ``bytes`` pass
    through unchanged so the XML declaration keeps control of decoding.
    """
    if isinstance(content, str):
        return content.encode(config.encoding)
    return content
