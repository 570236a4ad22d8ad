"""
irtf_records.observability

Observability package.

Responsibilities:
- Structured logging configuration and the diagnostic sink contract.
- Request context propagation for consistent log enrichment.
"""

# Package marker.
