"""
Data Models Layer.

This package contains the Pydantic models and dataclasses that define the core
data structures: configuration, catalog and output records, and build statistics.
"""

from .bgm import BgmRecord, MapEntry, MapString, TrackMetadata
from .config import BuildConfig
from .stats import BuildStats

__all__ = [
    "BgmRecord",
    "BuildConfig",
    "BuildStats",
    "MapEntry",
    "MapString",
    "TrackMetadata",
]
