"""
irtf_records.services

Service layer package.

Responsibilities:
- Orchestrate multi-table writes (feedback transaction, schedule ingest).
- Own the transaction and failure policy of each workflow.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The two services differ on purpose: feedback is all-or-nothing, the schedule
# ingest is per-table best effort because schedule data can be rebuilt from files.
