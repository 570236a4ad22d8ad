"""
irtf_records

Top-level package for the observatory records service (feedback + schedule upload).

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"


# --- Module Notes -----------------------------------------------------------
# Keep this file minimal; importing the package must not open database connections.
