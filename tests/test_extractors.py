"""Tests for the location-name and track-assignment extractors."""

import pytest

from bgm_builder.archive import open_archive
from bgm_builder.core.locations import extract_location_names
from bgm_builder.core.tracks import extract_track_assignments
from bgm_builder.exceptions import ArchiveStructureError, MapIdError
from bgm_builder.models.bgm import MapString
from bgm_builder.utils.fan_out import FanOut

from conftest import map_image_body, map_name_record, write_image


@pytest.mark.asyncio
async def test_location_names(archive_dir):
    root = await open_archive(archive_dir / "String.wz")
    locations = await extract_location_names(root)

    assert locations == {
        "100000000": MapString(street="Victoria Road", map="Henesys"),
        "100": MapString(street="Maple Road", map=""),
        "680000000": MapString(street="Amoria", map="Amorian Village"),
        "211000000": MapString(street="", map=""),
    }


@pytest.mark.asyncio
async def test_location_ids_are_numerals(archive_dir):
    root = await open_archive(archive_dir / "String.wz")
    locations = await extract_location_names(
        root, region_policy=FanOut.SEQUENTIAL, map_policy=FanOut.SEQUENTIAL
    )
    assert all(map_id and map_id.isdigit() for map_id in locations)


@pytest.mark.asyncio
async def test_location_duplicate_ids_overwrite(tmp_path):
    body = (
        '<imgdir name="a">' + map_name_record("0100", "Old", "Old") + "</imgdir>"
        '<imgdir name="b">' + map_name_record("100", "New", "New") + "</imgdir>"
    )
    write_image(tmp_path / "String.wz" / "Map.img.xml", body)
    root = await open_archive(tmp_path / "String.wz")

    locations = await extract_location_names(root)
    assert locations == {"100": MapString(street="New", map="New")}


@pytest.mark.asyncio
async def test_location_malformed_id_is_fatal(tmp_path):
    body = '<imgdir name="victoria">' + map_name_record("henesys", "a", "b") + "</imgdir>"
    write_image(tmp_path / "String.wz" / "Map.img.xml", body)
    root = await open_archive(tmp_path / "String.wz")

    with pytest.raises(MapIdError, match="henesys"):
        await extract_location_names(root)


@pytest.mark.asyncio
async def test_location_missing_image_is_fatal(tmp_path):
    write_image(tmp_path / "String.wz" / "Eqp.img.xml", "")
    root = await open_archive(tmp_path / "String.wz")

    with pytest.raises(ArchiveStructureError):
        await extract_location_names(root)


@pytest.mark.asyncio
async def test_track_assignments(archive_dir):
    root = await open_archive(archive_dir / "Map002.wz")
    assignments = await extract_track_assignments(root)

    assert assignments == {
        "100000000": "Bgm00/FloralLife",
        "680000000": "Bgm/Amoria.img",
        "680000001": "Bgm/Amoria.img",
        "900000000": "Bgm99/Unknown",
        "999999999": "",
    }


@pytest.mark.asyncio
async def test_track_assignments_policies_agree(archive_dir):
    root = await open_archive(archive_dir / "Map002.wz")
    default = await extract_track_assignments(root)
    parallel = await extract_track_assignments(
        root, directory_policy=FanOut.PARALLEL, image_policy=FanOut.PARALLEL
    )
    sequential = await extract_track_assignments(
        root, directory_policy=FanOut.SEQUENTIAL, image_policy=FanOut.SEQUENTIAL
    )
    assert default == parallel == sequential


@pytest.mark.asyncio
async def test_track_assignment_normalizes_ids(tmp_path):
    write_image(
        tmp_path / "Map002.wz" / "Map" / "Map0" / "000010000.img.xml",
        map_image_body("Bgm00/GoPicnic"),
    )
    root = await open_archive(tmp_path / "Map002.wz")
    assert await extract_track_assignments(root) == {"10000": "Bgm00/GoPicnic"}


@pytest.mark.asyncio
async def test_track_assignment_missing_info_is_fatal(tmp_path):
    write_image(
        tmp_path / "Map002.wz" / "Map" / "Map1" / "100000000.img.xml",
        '<imgdir name="back"></imgdir>',
    )
    root = await open_archive(tmp_path / "Map002.wz")

    with pytest.raises(ArchiveStructureError, match="info"):
        await extract_track_assignments(root)


@pytest.mark.asyncio
async def test_track_assignment_missing_map_directory_is_fatal(tmp_path):
    (tmp_path / "Map002.wz" / "Obj").mkdir(parents=True)
    root = await open_archive(tmp_path / "Map002.wz")

    with pytest.raises(ArchiveStructureError, match="'Map'"):
        await extract_track_assignments(root)
