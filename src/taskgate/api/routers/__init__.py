"""
taskgate.api.routers

Route modules. Each declares its role policy at registration via `authorize(...)`.
"""
