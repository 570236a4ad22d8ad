"""
irtf_records.db.readers

Read-side queries built on the shared query executor.
"""

# Package marker.
