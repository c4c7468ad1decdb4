"""
FastAPI routers grouped by domain (users, diaries).

Each file inside this package exposes an APIRouter that app.py includes.
"""
