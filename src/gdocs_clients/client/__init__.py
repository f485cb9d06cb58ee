"""Google API client package."""
from .base import GoogleDocsClient

__all__ = ['GoogleDocsClient']
