# receipt_desk/__init__.py
"""
Package entrypoint for the FastAPI application.

This lets us run:
    uvicorn receipt_desk:app --reload
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
