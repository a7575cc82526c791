"""
taskgate.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for the persistence layer.
- `UserRepo` and `TokenRepo` double as the gate's principal and credential stores.
"""

# Package marker; repositories are imported directly from submodules.
