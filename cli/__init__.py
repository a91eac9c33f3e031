"""CLI package for the Lux API client

Provides the ``lux`` command: login, logout, status, refresh and raw
authenticated requests against the Lux backend.
"""

from cli.main import main

__all__ = [
    "main",
]
