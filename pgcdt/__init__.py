"""Composite-type and JSON column demo service (FastAPI + SQLAlchemy)."""
