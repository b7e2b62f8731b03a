"""
Core domain layer.

Pure card rules (similarity thresholds, content validation), the point
reference variant linking metadata rows to vector entries, dedup outcomes,
the exception hierarchy and the bounded worker pool.
"""
