"""
Dataclass for tracking build statistics.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class BuildStats:
    """Summary of a single dataset build."""

    tracks: int = 0
    tracks_with_maps: int = 0
    downloadable_tracks: int = 0
    maps_located: int = 0
    maps_assigned: int = 0
    maps_without_track: int = 0
    maps_dropped: int = 0
    output_path: Optional[Path] = None
    output_size: int = 0
    duration_seconds: float = 0.0

    @property
    def maps_in_output(self) -> int:
        return self.maps_assigned - self.maps_without_track - self.maps_dropped
