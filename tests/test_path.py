"""Tests for path and asset-name helpers."""

import pytest

from bgm_builder.exceptions import ArchiveStructureError, MapIdError
from bgm_builder.utils.formatting import format_count, format_duration, format_size
from bgm_builder.utils.path import normalize_map_id, reset_dir


@pytest.mark.parametrize(
    "name, suffix, expected",
    [
        ("100000000", "", "100000000"),
        ("000100", "", "100"),
        ("0", "", "0"),
        ("100000000.img", ".img", "100000000"),
        ("009000000.img", ".img", "9000000"),
    ],
)
def test_normalize_map_id(name, suffix, expected):
    assert normalize_map_id(name, suffix) == expected


@pytest.mark.parametrize("name", ["", "Map.img", "henesys", "1e5", "12.5"])
def test_normalize_map_id_rejects_non_numeric(name):
    with pytest.raises(MapIdError):
        normalize_map_id(name, ".img")


def test_map_id_error_is_an_archive_error():
    assert issubclass(MapIdError, ArchiveStructureError)


def test_reset_dir(tmp_path):
    target = tmp_path / "dist"
    (target / "old").mkdir(parents=True)
    (target / "old" / "bgm.json").write_text("[]", encoding="utf-8")

    reset_dir(target)
    assert target.is_dir()
    assert list(target.iterdir()) == []

    reset_dir(tmp_path / "fresh" / "dist")
    assert (tmp_path / "fresh" / "dist").is_dir()


def test_formatting():
    assert format_count(1, "map") == "1 map"
    assert format_count(1200, "track") == "1,200 tracks"
    assert format_size(0) == "0 B"
    assert format_size(2048) == "2.0 KB"
    assert format_duration(75) == "1m 15s"
