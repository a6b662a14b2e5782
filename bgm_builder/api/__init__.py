"""
Remote Feed Layer.

This package handles all communication with the public BGM catalog and build
feeds.
"""

from .client import FeedClient

__all__ = ["FeedClient"]
