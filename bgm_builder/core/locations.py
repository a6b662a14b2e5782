"""
Extracts map display names from the String archive.

The `Map.img` image holds one container per region; each region holds one
container per map whose first two values are the street and map names.
"""

import logging

from bgm_builder.archive import ContainerNode, DirectoryNode
from bgm_builder.models.bgm import MapId, MapString
from bgm_builder.utils.fan_out import FanOut, fan_out
from bgm_builder.utils.path import normalize_map_id

log = logging.getLogger(__name__)

MAP_STRING_IMAGE = "Map.img"
STREET_INDEX = 0
MAP_NAME_INDEX = 1


def _as_text(value) -> str:
    return "" if value is None else str(value)


async def _region_maps(region: ContainerNode) -> list[ContainerNode]:
    await region.resolve()
    return region.containers()


async def _map_string(record: ContainerNode) -> tuple[MapId, MapString]:
    map_id = normalize_map_id(record.name)
    await record.resolve()
    return map_id, MapString(
        street=_as_text(record.value_at(STREET_INDEX)),
        map=_as_text(record.value_at(MAP_NAME_INDEX)),
    )


async def extract_location_names(
    root: DirectoryNode,
    image_name: str = MAP_STRING_IMAGE,
    region_policy: FanOut = FanOut.PARALLEL,
    map_policy: FanOut = FanOut.PARALLEL,
) -> dict[MapId, MapString]:
    """
    Builds the map ID -> display names table.

    Args:
        root: Root directory of the String archive.
        image_name: Image holding the map names.
        region_policy: How region containers are expanded.
        map_policy: How map records (across all regions) are expanded.

    Raises:
        ArchiveStructureError: If the image is missing.
        MapIdError: If a map record name is not numeric.
    """
    image = await root.image(image_name).load()
    regions = image.containers()
    log.debug(f"Expanding {len(regions)} regions of {image_name}")

    per_region = await fan_out(regions, _region_maps, region_policy)
    records = [record for maps in per_region for record in maps]

    entries = await fan_out(records, _map_string, map_policy)
    locations = dict(entries)
    log.info(f"Found names for [cyan]{len(locations)}[/cyan] maps.")
    return locations
