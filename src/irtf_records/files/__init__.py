"""
irtf_records.files

Filesystem collaborator used by the schedule ingest (existence + stat metadata).
"""

# Package marker.
