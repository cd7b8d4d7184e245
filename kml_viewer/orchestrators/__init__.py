"""Pipeline orchestration.

- upload_pipeline: convert -> analyze -> report for a single upload
"""
