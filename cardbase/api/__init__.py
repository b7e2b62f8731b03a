"""
HTTP API layer.

System role: FastAPI application, routers and dependency wiring
"""
