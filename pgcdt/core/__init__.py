"""
Core utilities shared across the pgcdt service.

This package hosts configuration helpers (env vars), logging setup and the
exception taxonomy. Routers, repositories and codecs depend on these
primitives instead of reading os.environ directly.
"""
