"""
identity_probe.observability

Observability package.

Responsibilities:
- Structured logging setup shared by the store and the probe.
"""

# Package marker.
