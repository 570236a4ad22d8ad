"""
irtf_records.api.routers

HTTP routers (health, feedback, schedule).
"""

# Package marker.
