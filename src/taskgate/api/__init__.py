"""
taskgate.api

HTTP API package (FastAPI).

Responsibilities:
- App factory and composition root.
- Request-scoped dependencies (settings, DB session, stores, clock).
- Routers for auth, tasks, users and admin maintenance.
"""

# Package marker.
