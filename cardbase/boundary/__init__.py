"""
Boundary layer for external system integrations.

Handles all interactions with external systems (metadata database, vector
indexes, embedding API). Provides adapters and clients for infrastructure
dependencies.
"""
