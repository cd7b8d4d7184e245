"""Viewer configuration loaded from environment variables.

All configuration values have sensible defaults. Azure Functions app
settings (or ``local.settings.json`` for local dev) are the source of
truth.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range, so a bad setting is caught at startup instead of
    on the first upload.
"""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass

from kml_viewer.core.constants import (
    DEFAULT_ACCEPTED_EXTENSIONS,
    DEFAULT_MAX_UPLOAD_BYTES,
    DEFAULT_TEXT_ENCODING,
)
from kml_viewer.core.exceptions import PipelineError


class ConfigValidationError(PipelineError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        self.message = message
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ViewerConfig:
    """Immutable viewer configuration.

    Loaded once at function startup and passed to the upload pipeline.

    Attributes:
        max_upload_bytes: Largest accepted request body, in bytes.
        accepted_extensions: Lower-case filename suffixes accepted for upload.
        encoding: Codec used to encode documents handed over as ``str``.
    """

    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    accepted_extensions: tuple[str, ...] = DEFAULT_ACCEPTED_EXTENSIONS
    encoding: str = DEFAULT_TEXT_ENCODING

    @classmethod
    def from_env(cls) -> ViewerConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or empty.
            ValueError: If ``KML_MAX_UPLOAD_BYTES`` cannot be parsed as
                an integer (e.g. ``KML_MAX_UPLOAD_BYTES=abc``).
        """
        config = cls(
            max_upload_bytes=int(
                os.getenv("KML_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))
            ),
            accepted_extensions=_parse_extensions(
                os.getenv("KML_ACCEPTED_EXTENSIONS", ",".join(DEFAULT_ACCEPTED_EXTENSIONS))
            ),
            encoding=os.getenv("KML_TEXT_ENCODING", DEFAULT_TEXT_ENCODING),
        )
        _validate(config)
        return config


def _parse_extensions(raw: str) -> tuple[str, ...]:
    """Split a comma-separated extension list, normalising case and blanks."""
    return tuple(part.strip().lower() for part in raw.split(",") if part.strip())


def _validate(config: ViewerConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.max_upload_bytes <= 0:
        raise ConfigValidationError(
            "KML_MAX_UPLOAD_BYTES",
            config.max_upload_bytes,
            "must be > 0 (bytes)",
        )

    if not config.accepted_extensions:
        raise ConfigValidationError(
            "KML_ACCEPTED_EXTENSIONS",
            config.accepted_extensions,
            "must list at least one extension",
        )

    for ext in config.accepted_extensions:
        if not ext.startswith(".") or len(ext) < 2:
            raise ConfigValidationError(
                "KML_ACCEPTED_EXTENSIONS",
                ext,
                "each extension must start with '.' (e.g. '.kml')",
            )

    if not config.encoding:
        raise ConfigValidationError(
            "KML_TEXT_ENCODING",
            config.encoding,
            "must not be empty",
        )

    try:
        codecs.lookup(config.encoding)
    except LookupError as exc:
        raise ConfigValidationError(
            "KML_TEXT_ENCODING",
            config.encoding,
            "must name a known text codec",
        ) from exc
