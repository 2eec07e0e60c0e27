"""
HTTP Adapter - FastAPI Interface

This package exposes the exchange rate service over HTTP.
"""

from tomanrate.adapters.http.api import create_app, router

__all__ = [
    "create_app",
    "router",
]
