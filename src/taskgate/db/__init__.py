"""
taskgate.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories that implement
  the credential and principal stores.
"""

# Package marker.
