"""
Extracts the track played by each map from the Map archive.

Map images live in `Map/Map0`, `Map/Map1`, ... and every image has an `info`
container whose `bgm` value is the track key.
"""

import logging

from bgm_builder.archive import DirectoryNode, ImageEntry
from bgm_builder.models.bgm import MapId, TrackKey
from bgm_builder.utils.fan_out import FanOut, fan_out
from bgm_builder.utils.path import normalize_map_id

log = logging.getLogger(__name__)

MAP_DIRECTORY = "Map"
REGION_PREFIX = "Map"
IMAGE_SUFFIX = ".img"
INFO_NODE = "info"
BGM_NODE = "bgm"


async def _map_track(entry: ImageEntry) -> tuple[MapId, TrackKey]:
    map_id = normalize_map_id(entry.name, IMAGE_SUFFIX)
    image = await entry.load()
    info = await image.container(INFO_NODE).resolve()
    bgm = info.value_of(BGM_NODE)
    return map_id, "" if bgm is None else str(bgm)


async def extract_track_assignments(
    root: DirectoryNode,
    directory_policy: FanOut = FanOut.SEQUENTIAL,
    image_policy: FanOut = FanOut.PARALLEL,
) -> dict[MapId, TrackKey]:
    """
    Builds the map ID -> track key table. Maps without a `bgm` value map to ''.

    Args:
        root: Root directory of the Map archive.
        directory_policy: How the `Map*` directories are processed relative to
            each other.
        image_policy: How the images inside one directory are loaded.

    Raises:
        ArchiveStructureError: If the `Map` directory or an `info` node is missing.
        MapIdError: If an image name is not numeric.
    """
    directories = root.directory(MAP_DIRECTORY).find_directories(REGION_PREFIX)
    assignments: dict[MapId, TrackKey] = {}

    async def process_directory(directory: DirectoryNode) -> None:
        partial = await fan_out(directory.images, _map_track, image_policy)
        assignments.update(partial)
        log.debug(f"Read {len(partial)} maps from {directory.name}")

    await fan_out(directories, process_directory, directory_policy)
    log.info(
        f"Found track assignments for [cyan]{len(assignments)}[/cyan] maps "
        f"in {len(directories)} directories."
    )
    return assignments
