"""HTTP service package (FastAPI)."""

from .app import build_components, create_app

__all__ = ["create_app", "build_components"]
