"""
irtf_records.db.writers

Record writers: one per table, each composed from a `TableSpec`.
"""

# Package marker; writers are imported directly from submodules.
