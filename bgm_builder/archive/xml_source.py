"""
Reads archives from their XML export.

Each archive is exported as a folder (e.g. `String.wz/`) mirroring its directory
tree, with one `<image>.img.xml` document per image. Documents use `imgdir`,
`canvas` and `convex` elements for containers and typed elements such as
`string`, `int` or `vector` for values.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

import aiofiles
from bs4 import BeautifulSoup, Tag

from bgm_builder.exceptions import ArchiveStructureError

from .nodes import ContainerNode, DirectoryNode, ImageEntry, LeafNode, Node

log = logging.getLogger(__name__)

IMAGE_FILE_SUFFIX = ".xml"

_CONTAINER_TAGS = frozenset({"imgdir", "canvas", "convex", "extended"})
_INT_TAGS = frozenset({"int", "short", "long"})
_FLOAT_TAGS = frozenset({"float", "double"})


def _leaf_value(tag: Tag) -> Any:
    """Converts a value element into a Python scalar."""
    kind = tag.name
    raw = tag.get("value")

    if kind == "null":
        return None
    if kind == "vector":
        return (int(tag.get("x", 0)), int(tag.get("y", 0)))
    if raw is None:
        return None
    if kind in _INT_TAGS:
        return int(raw)
    if kind in _FLOAT_TAGS:
        return float(raw)
    return raw


def _to_node(tag: Tag) -> Node:
    name = tag.get("name", "")
    if tag.name in _CONTAINER_TAGS:

        async def load_children() -> list[Node]:
            return _element_children(tag)

        return ContainerNode(name, load_children)
    return LeafNode(name, _leaf_value(tag))


def _element_children(tag: Tag) -> list[Node]:
    return [_to_node(child) for child in tag.find_all(recursive=False)]


def _parse_image(data: bytes, source: str) -> list[Node]:
    soup = BeautifulSoup(data, "xml")
    root = soup.find("imgdir")
    if root is None:
        raise ArchiveStructureError(f"Image '{source}' has no root 'imgdir' element.")
    return _element_children(root)


async def load_image_children(path: Path, name: str) -> list[Node]:
    """Reads one image document and returns the nodes under its root."""
    try:
        async with aiofiles.open(path, "rb") as f:
            data = await f.read()
    except OSError as e:
        raise ArchiveStructureError(f"Could not read image '{name}': {e}") from e

    return await asyncio.to_thread(_parse_image, data, name)


def _scan_directory(path: Path) -> DirectoryNode:
    directories = []
    images = []
    for entry in sorted(path.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            directories.append(_scan_directory(entry))
        elif entry.name.endswith(".img" + IMAGE_FILE_SUFFIX):
            image_name = entry.name.removesuffix(IMAGE_FILE_SUFFIX)
            images.append(ImageEntry(image_name, entry, load_image_children))
    return DirectoryNode(path.name, directories, images)


async def open_archive(path: Path) -> DirectoryNode:
    """
    Opens an exported archive folder and returns its root directory.

    Raises:
        ArchiveStructureError: If the folder does not exist.
    """
    if not path.is_dir():
        raise ArchiveStructureError(f"Archive folder not found at '{path}'.")

    root = await asyncio.to_thread(_scan_directory, path)
    log.debug(
        f"Opened archive {path.name}: {len(root.directories)} directories, "
        f"{len(root.images)} images at top level."
    )
    return root


def parse_image_text(text: str, name: str = "image") -> ContainerNode:
    """Builds an unresolved image root from an in-memory XML document."""

    async def load_children() -> list[Node]:
        return _parse_image(text.encode("utf-8"), name)

    return ContainerNode(name, load_children)
