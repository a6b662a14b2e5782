"""Shared test fixtures: small archive exports written to a temporary folder."""

from pathlib import Path

import pytest

from bgm_builder.models.bgm import TrackMetadata

XML_HEADER = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'


def image_xml(name: str, body: str) -> str:
    return f'{XML_HEADER}<imgdir name="{name}">\n{body}\n</imgdir>\n'


def write_image(path: Path, body: str) -> Path:
    """Writes `<name>.img.xml` at `path` (which must end in '.img.xml')."""
    path.parent.mkdir(parents=True, exist_ok=True)
    name = path.name.removesuffix(".xml")
    path.write_text(image_xml(name, body), encoding="utf-8")
    return path


def map_name_record(map_id: str, street: str | None, map_name: str | None) -> str:
    leaves = ""
    if street is not None:
        leaves += f'<string name="streetName" value="{street}"/>'
    if map_name is not None:
        leaves += f'<string name="mapName" value="{map_name}"/>'
    return f'<imgdir name="{map_id}">{leaves}</imgdir>'


def map_image_body(bgm: str | None) -> str:
    bgm_leaf = f'<string name="bgm" value="{bgm}"/>' if bgm is not None else ""
    return (
        '<imgdir name="info">'
        '<int name="version" value="10"/>'
        '<int name="cloud" value="0"/>'
        f"{bgm_leaf}"
        '<float name="mobRate" value="1.5"/>'
        "</imgdir>"
        '<imgdir name="back"><imgdir name="0"><int name="no" value="1"/></imgdir></imgdir>'
    )


def make_string_archive(archive_dir: Path) -> Path:
    root = archive_dir / "String.wz"
    body = (
        '<imgdir name="victoria">'
        + map_name_record("100000000", "Victoria Road", "Henesys")
        + map_name_record("000100", "Maple Road", None)
        + "</imgdir>"
        + '<imgdir name="ossyria">'
        + map_name_record("680000000", "Amoria", "Amorian Village")
        + map_name_record("211000000", None, None)
        + "</imgdir>"
    )
    write_image(root / "Map.img.xml", body)
    write_image(root / "Eqp.img.xml", '<imgdir name="Eqp"></imgdir>')
    return root


def make_map_archive(archive_dir: Path) -> Path:
    root = archive_dir / "Map002.wz"
    maps = root / "Map"
    write_image(maps / "Map1" / "100000000.img.xml", map_image_body("Bgm00/FloralLife"))
    write_image(maps / "Map6" / "680000000.img.xml", map_image_body("Bgm/Amoria.img"))
    write_image(maps / "Map6" / "680000001.img.xml", map_image_body("Bgm/Amoria.img"))
    write_image(maps / "Map9" / "999999999.img.xml", map_image_body(None))
    write_image(maps / "Map9" / "900000000.img.xml", map_image_body("Bgm99/Unknown"))
    # Not a map region folder; would fail to parse as a map if visited.
    write_image(maps / "Obj" / "acc1.img.xml", '<int name="x" value="1"/>')
    (root / "Back").mkdir(parents=True)
    return root


@pytest.fixture
def archive_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "wz"
    make_string_archive(directory)
    make_map_archive(directory)
    return directory


def catalog_record(structure: str, filename: str, **extra) -> dict:
    record = {
        "description": "",
        "filename": filename,
        "mark": "",
        "metadata": {
            "albumArtist": "Wizet",
            "artist": "Wizet",
            "title": filename.removesuffix(".img"),
            "year": "2005",
        },
        "source": {"client": "GMS", "structure": structure, "version": "v0.10"},
        "youtube": "",
    }
    record.update(extra)
    return record


@pytest.fixture
def catalog_payload() -> list[dict]:
    return [
        catalog_record("Bgm", "Amoria.img", mark="Amoria", youtube="abc123"),
        catalog_record("Bgm00", "FloralLife"),
        catalog_record("Bgm50", "NoMapsHere", featured=True),
    ]


@pytest.fixture
def catalog(catalog_payload) -> list[TrackMetadata]:
    return [TrackMetadata.model_validate(r) for r in catalog_payload]


class FakeFeeds:
    """In-memory stand-in for FeedClient."""

    def __init__(self, catalog_payload, done_ids, fail_with: Exception | None = None):
        self.catalog_payload = catalog_payload
        self.done_ids = done_ids
        self.fail_with = fail_with

    async def fetch_downloadable_ids(self):
        if self.fail_with:
            raise self.fail_with
        return frozenset(self.done_ids)

    async def fetch_track_catalog(self):
        return [TrackMetadata.model_validate(r) for r in self.catalog_payload]
