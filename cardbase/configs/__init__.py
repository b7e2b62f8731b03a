"""
Cardbase configuration.

One pydantic-settings group per concern (database, vector store,
embeddings, card rules, identity, worker pool), aggregated by Settings.
"""

from cardbase.configs.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
