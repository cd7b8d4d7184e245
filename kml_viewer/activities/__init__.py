"""Pipeline activities.

Each activity performs a single unit of work for one uploaded document:
- convert_kml: Convert KML markup into a feature collection
- analyze_features: Classify features, compute line lengths, summarise
"""
