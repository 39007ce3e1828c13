"""API package exports."""

from src.api.middleware import build_pipeline
from src.api.routes import router

__all__ = ["build_pipeline", "router"]
