"""Data models and schemas.

Defines the data structures used throughout the pipeline:
- Feature / FeatureCollection: GeoJSON-shaped output of the KML converter
- SummaryResult / DetailRow: derived views produced by the analyzer
- DocumentReport: serialisable response handed to the presentation layer
"""

from kml_viewer.models.analysis import DetailRow, FeatureAnalysis, SummaryResult
from kml_viewer.models.feature import Feature, FeatureCollection, Geometry
from kml_viewer.models.report import DocumentReport, build_document_report

__all__ = [
    "DetailRow",
    "DocumentReport",
    "Feature",
    "FeatureAnalysis",
    "FeatureCollection",
    "Geometry",
    "SummaryResult",
    "build_document_report",
]
