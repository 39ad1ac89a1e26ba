"""
Persistence adapters.

Routers depend on these repositories instead of opening sessions or writing
SQL themselves.
"""
