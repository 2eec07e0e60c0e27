"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (Navasan API)
- HTTP (FastAPI interface)
- Persistence (append-only logs)
- Formatting (response payloads)
"""

__all__ = []
