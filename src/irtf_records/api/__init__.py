"""
irtf_records.api

API package for the records service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring and request/response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers stay thin: request validation + delegation to the services.
