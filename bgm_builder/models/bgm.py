"""
Pydantic models for the BGM catalog feed and the merged output records.

Catalog models allow extra fields so that every field of an upstream record is
carried into the output. Only the fields forming the track key are typed
strictly; descriptive fields pass through as the feed sends them. Dump with
`exclude_unset=True` to keep absent optional fields absent.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

MapId = str
TrackKey = str


class MapString(BaseModel):
    """Display names of a map. Both default to an empty string."""

    street: str = ""
    map: str = ""


class MapEntry(BaseModel):
    """A map that plays a given track."""

    id: MapId
    street: str = ""
    map: str = ""


class TrackInfo(BaseModel):
    """Descriptive metadata of a track."""

    model_config = ConfigDict(extra="allow")

    albumArtist: Any = None
    artist: Any = None
    title: Any = None
    year: Any = None
    titleAlt: Any = None


class TrackSource(BaseModel):
    """Where a track was first found in the game data."""

    model_config = ConfigDict(extra="allow")

    structure: str
    client: Any = None
    date: Any = None
    version: Any = None


class TrackMetadata(BaseModel):
    """A record of the remote BGM catalog."""

    model_config = ConfigDict(extra="allow")

    description: Any = None
    filename: str
    mark: Any = None
    metadata: Optional[TrackInfo] = None
    source: TrackSource
    youtube: Any = None

    @property
    def track_key(self) -> TrackKey:
        """The '<structure>/<filename>' key shared by every data source."""
        return f"{self.source.structure}/{self.filename}"


class BgmRecord(TrackMetadata):
    """A catalog record enriched with the maps using it and its availability."""

    maps: list[MapEntry] = Field(default_factory=list)
    downloadable: bool = False

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True)
