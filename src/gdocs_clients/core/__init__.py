"""
Core utilities package for gdocs-clients.

This package provides shared configuration.
"""

from .config import AuthConfig

__all__ = ["AuthConfig"]
