"""
identity_probe.db

Persistence package (SQLAlchemy async over SQLite).

Responsibilities:
- Provide the ORM model, the intercepted connection factory, engine/session setup,
  and repositories.
"""

# Package marker.
