"""Simulated HTTP backend: request router, fault injection and FastAPI app."""

from .api import create_app
from .router import RequestRouter, RouterResponse

__all__ = ["RequestRouter", "RouterResponse", "create_app"]
