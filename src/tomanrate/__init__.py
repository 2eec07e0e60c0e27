# src/tomanrate/__init__.py
"""
TomanRate - Quota-Aware USD/Toman Exchange Rate Service

A small HTTP service that wraps the rate-limited Navasan API, decides when
a refresh is worth one of the month's calls, persists every fetched rate,
and always serves some usable rate once one has been fetched.
"""

__version__ = "1.0.0"
