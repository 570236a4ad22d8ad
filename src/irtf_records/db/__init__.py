"""
irtf_records.db

Persistence package (SQLAlchemy async).

Responsibilities:
- ORM models and engine/session setup for the feedback and troublelog databases.
- The storage core: driver, query executor, transaction manager, record writers.
"""

# Package marker.
