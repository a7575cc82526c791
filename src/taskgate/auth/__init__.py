"""
taskgate.auth

Authentication/authorization package.

Responsibilities:
- Roles, principals and token records (domain types).
- Token issuance (JWT minting + credential store write).
- The authorization gate: a pure access evaluator plus the FastAPI dependency
  factory that wires it to the stores.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only `deps.py` knows about FastAPI; everything else here is framework-free.
