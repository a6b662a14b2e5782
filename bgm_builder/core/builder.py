"""
The orchestrator for a dataset build: fetches the feeds, walks both archives,
merges the results and writes the output file.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Optional, Protocol, TypeVar

from bgm_builder.archive import open_archive
from bgm_builder.cli.progress_manager import ProgressManager
from bgm_builder.models.bgm import BgmRecord, MapId, MapString, TrackKey, TrackMetadata
from bgm_builder.models.config import BuildConfig
from bgm_builder.models.stats import BuildStats
from bgm_builder.storage.output import prepare_output_dir, write_records
from bgm_builder.utils.formatting import format_count, format_size

from .locations import extract_location_names
from .merge import find_orphaned_assignments, merge_bgm_data
from .tracks import extract_track_assignments

log = logging.getLogger(__name__)

R = TypeVar("R")


class FeedSource(Protocol):
    """The remote feeds consumed by a build."""

    async def fetch_downloadable_ids(self) -> frozenset[TrackKey]: ...

    async def fetch_track_catalog(self) -> list[TrackMetadata]: ...


class BgmDataBuilder:
    """Runs one complete build for a configuration."""

    def __init__(
        self,
        config: BuildConfig,
        feeds: FeedSource,
        progress: Optional[ProgressManager] = None,
    ):
        self.config = config
        self.feeds = feeds
        self.progress = progress
        self.stats = BuildStats()

    async def _stage(
        self,
        description: str,
        work: Callable[[], Awaitable[R]],
        summarize: Callable[[R], str],
    ) -> R:
        """Runs one stage, reporting it on the progress display if present."""
        task_id = self.progress.start_stage(description) if self.progress else None
        try:
            result = await work()
        except Exception:
            if self.progress:
                self.progress.fail_stage(task_id, f"{description} failed")
            raise
        if self.progress:
            self.progress.finish_stage(task_id, summarize(result))
        return result

    async def _locations(self) -> dict[MapId, MapString]:
        root = await open_archive(self.config.string_archive_path)
        return await extract_location_names(root)

    async def _assignments(self) -> dict[MapId, TrackKey]:
        root = await open_archive(self.config.map_archive_path)
        return await extract_track_assignments(root)

    async def collect(
        self,
    ) -> tuple[
        frozenset[TrackKey],
        list[TrackMetadata],
        dict[MapId, TrackKey],
        dict[MapId, MapString],
    ]:
        """Fetches both feeds and walks both archives concurrently."""
        results = await asyncio.gather(
            self._stage(
                "Fetching downloadable track list",
                self.feeds.fetch_downloadable_ids,
                lambda ids: f"{format_count(len(ids), 'downloadable track')} listed",
            ),
            self._stage(
                "Fetching track catalog",
                self.feeds.fetch_track_catalog,
                lambda tracks: f"{format_count(len(tracks), 'track')} in catalog",
            ),
            self._stage(
                f"Reading track assignments from {self.config.map_archive}",
                self._assignments,
                lambda table: f"{format_count(len(table), 'map')} with track data",
            ),
            self._stage(
                f"Reading map names from {self.config.string_archive}",
                self._locations,
                lambda table: f"{format_count(len(table), 'map')} with names",
            ),
        )
        return tuple(results)

    def _record_stats(
        self,
        records: list[BgmRecord],
        locations: dict[MapId, MapString],
        assignments: dict[MapId, TrackKey],
        catalog: list[TrackMetadata],
    ) -> None:
        orphaned = find_orphaned_assignments(assignments, catalog)
        if orphaned:
            log.warning(
                f"[yellow]{format_count(len(orphaned), 'map')} use tracks missing "
                f"from the catalog and are left out of the output.[/yellow]"
            )
            for map_id, key in sorted(orphaned.items()):
                log.debug(f"Map {map_id} plays unknown track {key}")

        self.stats.tracks = len(records)
        self.stats.tracks_with_maps = sum(1 for r in records if r.maps)
        self.stats.downloadable_tracks = sum(1 for r in records if r.downloadable)
        self.stats.maps_located = len(locations)
        self.stats.maps_assigned = len(assignments)
        self.stats.maps_without_track = sum(1 for k in assignments.values() if not k)
        self.stats.maps_dropped = len(orphaned)

    async def build(self) -> list[BgmRecord]:
        """Collects every input and merges them into the output records."""
        downloadable, catalog, assignments, locations = await self.collect()
        records = merge_bgm_data(locations, assignments, catalog, downloadable)
        self._record_stats(records, locations, assignments, catalog)
        return records

    async def run(self) -> BuildStats:
        """
        Performs the full build and writes the output file.

        Nothing is written if any stage fails.
        """
        start_time = time.monotonic()
        await prepare_output_dir(self.config.dist_dir)

        records = await self.build()

        output_path = self.config.output_path
        self.stats.output_size = await self._stage(
            f"Writing {output_path}",
            lambda: write_records(records, output_path, self.config.indent),
            lambda size: f"Wrote {output_path} ({format_size(size)})",
        )
        self.stats.output_path = output_path
        self.stats.duration_seconds = time.monotonic() - start_time
        return self.stats
