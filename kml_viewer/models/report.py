"""Pydantic report model returned for each analysed upload.

The report is what the presentation layer consumes: the summary table,
the detail table, and the unmodified GeoJSON feature collection for the
map overlay.

The schema is split into three sections:
- **summary**: counts per geometry type and the total
- **details**: one row per feature, in document order
- **feature_collection**: GeoJSON ``FeatureCollection`` for map rendering
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from kml_viewer.models.analysis import FeatureAnalysis
    from kml_viewer.models.feature import FeatureCollection

# Schema version for forward compatibility
SCHEMA_VERSION = "kml-report-v1"


class SummarySection(BaseModel):
    """Summary section of the report.

    Attributes:
        counts: Geometry type -> occurrence count, first-seen order.
        total: Number of features in the document.
    """

    counts: dict[str, int] = Field(default_factory=dict)
    total: int = 0


class DetailSection(BaseModel):
    """One detail row of the report."""

    type: str
    name: str
    length: str


class DocumentReport(BaseModel):
    """Complete analysis report for one uploaded KML document.

    Attributes:
        schema_version: Report schema identifier.
        source_file: Uploaded filename (may be empty).
        analysed_at: UTC timestamp of the analysis.
        summary: Aggregate counts.
        details: Per-feature rows in document order.
        feature_collection: GeoJSON for the map overlay.
    """

    schema_version: str = SCHEMA_VERSION
    source_file: str = ""
    analysed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    summary: SummarySection = Field(default_factory=SummarySection)
    details: list[DetailSection] = Field(default_factory=list)
    feature_collection: dict[str, Any] = Field(
        default_factory=lambda: {"type": "FeatureCollection", "features": []}
    )

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise to a JSON string for the HTTP response body."""
        return self.model_dump_json(indent=indent)


def build_document_report(
    collection: FeatureCollection,
    analysis: FeatureAnalysis,
    *,
    analysed_at: datetime | None = None,
) -> DocumentReport:
    """Assemble a ``DocumentReport`` from a collection and its analysis."""
    report = DocumentReport(
        source_file=collection.source_file,
        summary=SummarySection(
            counts=dict(analysis.summary.counts),
            total=analysis.summary.total,
        ),
        details=[DetailSection(**row.to_dict()) for row in analysis.details],
        feature_collection=collection.to_dict(),
    )
    if analysed_at is not None:
        report.analysed_at = analysed_at
    return report
