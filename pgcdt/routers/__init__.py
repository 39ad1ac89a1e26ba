"""
FastAPI routers grouped by resource (persons, contacts).

Each module exposes an APIRouter that the application factory includes.
"""
