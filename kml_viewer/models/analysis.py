"""Derived analysis results for one converted document.

- SummaryResult: occurrence count per geometry type plus the total
- DetailRow: one display row per feature (type, name, formatted length)
- FeatureAnalysis: the summary together with the ordered detail rows

These are recomputed in full for every upload and owned by the caller;
nothing here is shared between documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SummaryResult:
    """Aggregate count of features per geometry type.

    Attributes:
        counts: Geometry type -> number of features, in first-seen order.
            Only observed types appear; there are no zero entries.
        total: Number of features analysed. Always equals
            ``sum(counts.values())``.
    """

    counts: dict[str, int] = field(default_factory=dict)
    total: int = 0

    def merge(self, other: SummaryResult) -> SummaryResult:
        """Combine two partial summaries by summing matching keys.

        Keys of ``self`` keep their order; keys only present in
        ``other`` follow in ``other``'s order.
        """
        counts = dict(self.counts)
        for geometry_type, count in other.counts.items():
            counts[geometry_type] = counts.get(geometry_type, 0) + count
        return SummaryResult(counts=counts, total=self.total + other.total)

    def to_dict(self) -> dict[str, object]:
        return {"counts": dict(self.counts), "total": self.total}


@dataclass(frozen=True, slots=True)
class DetailRow:
    """One row of the per-feature detail listing.

    Attributes:
        type: Geometry type label, as classified.
        name: Feature name, or ``"Unnamed"``.
        length: Two-decimal planar length for line geometries, ``"N/A"``
            for everything else.
    """

    type: str
    name: str
    length: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "name": self.name, "length": self.length}


@dataclass(frozen=True, slots=True)
class FeatureAnalysis:
    """Summary and detail listing produced by a single analysis pass."""

    summary: SummaryResult
    details: tuple[DetailRow, ...] = ()
