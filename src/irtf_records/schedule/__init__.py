"""
irtf_records.schedule

Schedule upload helpers: delete queries, staged bulk-load files, ingest requests.
"""

# Package marker.
