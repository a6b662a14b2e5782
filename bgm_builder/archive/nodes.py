"""
Typed node tree for archive contents.

A node is either a `LeafNode` holding a scalar value or a `ContainerNode` whose
children are produced by a loader. Container children stay hidden until the
container has been resolved, mirroring the encoded sub-images of the archive.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from bgm_builder.exceptions import ArchiveStructureError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeafNode:
    """A named scalar value (string, number, vector, or None)."""

    name: str
    value: Any = None


class ContainerNode:
    """
    A named node with lazily loaded children.

    Call `await resolve()` before reading `children`; the loader runs once and
    its result is kept for subsequent lookups.
    """

    def __init__(
        self,
        name: str,
        loader: Callable[[], Awaitable[list["Node"]]],
    ):
        self.name = name
        self._loader = loader
        self._children: Optional[list[Node]] = None

    def __repr__(self) -> str:
        state = "resolved" if self.is_resolved else "unresolved"
        return f"ContainerNode(name={self.name!r}, {state})"

    @property
    def is_resolved(self) -> bool:
        return self._children is not None

    async def resolve(self) -> "ContainerNode":
        """Loads the children if needed and returns the container itself."""
        if self._children is None:
            self._children = list(await self._loader())
        return self

    @property
    def children(self) -> list["Node"]:
        if self._children is None:
            raise ArchiveStructureError(
                f"Container '{self.name}' must be resolved before its children are read."
            )
        return self._children

    def find(self, name: str) -> Optional["Node"]:
        """Returns the first child with the given name, or None."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def child(self, name: str) -> "Node":
        """Returns the child with the given name, raising if it is absent."""
        node = self.find(name)
        if node is None:
            raise ArchiveStructureError(f"Node '{self.name}' has no child '{name}'.")
        return node

    def container(self, name: str) -> "ContainerNode":
        """Returns the child container with the given name."""
        node = self.child(name)
        if not isinstance(node, ContainerNode):
            raise ArchiveStructureError(
                f"Child '{name}' of '{self.name}' is a value, not a container."
            )
        return node

    def containers(self) -> list["ContainerNode"]:
        return [c for c in self.children if isinstance(c, ContainerNode)]

    def value_at(self, index: int) -> Optional[Any]:
        """
        Returns the value of the leaf at a child position.

        Returns None when the position is out of range or holds a container.
        """
        if index >= len(self.children):
            return None
        node = self.children[index]
        return node.value if isinstance(node, LeafNode) else None

    def value_of(self, name: str) -> Optional[Any]:
        """Returns the value of the named leaf child, or None when absent."""
        node = self.find(name)
        return node.value if isinstance(node, LeafNode) else None


Node = Union[LeafNode, ContainerNode]


@dataclass
class ImageEntry:
    """A single image file inside an archive directory."""

    name: str
    path: Path
    loader: Callable[[Path, str], Awaitable[list[Node]]] = field(repr=False)

    def node(self) -> ContainerNode:
        """Returns the unresolved image root."""
        return ContainerNode(self.name, lambda: self.loader(self.path, self.name))

    async def load(self) -> ContainerNode:
        """Parses the image file and returns its resolved root container."""
        log.debug(f"Loading image {self.path}")
        return await self.node().resolve()


@dataclass
class DirectoryNode:
    """A directory of an archive, holding sub-directories and image files."""

    name: str
    directories: list["DirectoryNode"] = field(default_factory=list)
    images: list[ImageEntry] = field(default_factory=list)

    def directory(self, name: str) -> "DirectoryNode":
        for directory in self.directories:
            if directory.name == name:
                return directory
        raise ArchiveStructureError(
            f"Directory '{self.name}' has no sub-directory '{name}'."
        )

    def image(self, name: str) -> ImageEntry:
        for image in self.images:
            if image.name == name:
                return image
        raise ArchiveStructureError(f"Directory '{self.name}' has no image '{name}'.")

    def find_directories(self, prefix: str) -> list["DirectoryNode"]:
        """Returns the sub-directories whose name starts with the prefix."""
        return [d for d in self.directories if d.name.startswith(prefix)]
