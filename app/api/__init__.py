"""API layer package exposing the trade journal FastAPI application factory."""

from .application import create_api_application

__all__ = ["create_api_application"]
