"""KML Viewer analysis service.

Converts uploaded KML documents into GeoJSON-shaped feature collections
and derives a count-by-geometry-type summary plus a per-feature detail
listing with planar line lengths.
"""

__version__ = "0.1.0"
