"""
Archive Layer.

This package exposes the game archive as a typed node tree and reads it from
its XML export.
"""

from .nodes import ContainerNode, DirectoryNode, ImageEntry, LeafNode, Node
from .xml_source import open_archive, parse_image_text

__all__ = [
    "ContainerNode",
    "DirectoryNode",
    "ImageEntry",
    "LeafNode",
    "Node",
    "open_archive",
    "parse_image_text",
]
