"""
Card corpus service.

Deduplicated card ingestion with hybrid (full-text + vector) retrieval over a
relational metadata store and a similarity index kept coherent by explicit
write ordering.
"""

__version__ = "0.1.0"
