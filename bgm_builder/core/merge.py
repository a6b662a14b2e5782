"""
Joins the archive tables with the remote feeds into the final record set.

The join is driven by the catalog: every catalog record yields one output
record, and maps whose track is absent from the catalog are not emitted.
"""

from collections import defaultdict
from collections.abc import Collection, Iterable, Mapping, Sequence

from bgm_builder.models.bgm import (
    BgmRecord,
    MapEntry,
    MapId,
    MapString,
    TrackKey,
    TrackMetadata,
)


def group_maps_by_track(
    assignments: Mapping[MapId, TrackKey],
) -> dict[TrackKey, list[MapId]]:
    """Groups map IDs by their track key, skipping maps with no track."""
    groups: dict[TrackKey, list[MapId]] = defaultdict(list)
    for map_id, track_key in assignments.items():
        if track_key:
            groups[track_key].append(map_id)
    return dict(groups)


def merge_bgm_data(
    locations: Mapping[MapId, MapString],
    assignments: Mapping[MapId, TrackKey],
    catalog: Sequence[TrackMetadata],
    downloadable: Collection[TrackKey],
) -> list[BgmRecord]:
    """
    Builds one output record per catalog record, in catalog order.

    Maps without a location entry get empty street and map names.
    """
    maps_by_track = group_maps_by_track(assignments)
    empty = MapString()
    records = []

    for track in catalog:
        key = track.track_key
        maps = []
        for map_id in maps_by_track.get(key, []):
            names = locations.get(map_id, empty)
            maps.append(MapEntry(id=map_id, street=names.street, map=names.map))

        records.append(
            BgmRecord.model_validate(
                {
                    **track.model_dump(exclude_unset=True),
                    "maps": maps,
                    "downloadable": key in downloadable,
                }
            )
        )
    return records


def find_orphaned_assignments(
    assignments: Mapping[MapId, TrackKey],
    catalog: Iterable[TrackMetadata],
) -> dict[MapId, TrackKey]:
    """Returns the assigned maps whose track key has no catalog record."""
    known = {track.track_key for track in catalog}
    return {
        map_id: key
        for map_id, key in assignments.items()
        if key and key not in known
    }
