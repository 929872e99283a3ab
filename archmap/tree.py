"""Hierarchical view of the flat file id list."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple, Union

from .config import ConfigError


@dataclass(frozen=True)
class FileNode:
    name: str
    rel_path: str
    extension: str


@dataclass(frozen=True)
class SubtreeStats:
    """Aggregates for everything beneath a directory."""

    files: int = 0
    subdirs: int = 0
    risky: int = 0


@dataclass(frozen=True)
class StubNode:
    """Placeholder for collapsed directory contents."""

    stats: SubtreeStats


@dataclass(frozen=True)
class DirNode:
    name: str
    rel_path: str
    children: Tuple["TreeNode", ...] = ()


TreeNode = Union[DirNode, FileNode, StubNode]


def build_tree(files: Sequence[str]) -> DirNode:
    """Build the directory tree for ``files``.

    Children of every directory are ordered by name in code-point order, with
    directories and files interleaved in that single order.
    """
    root: Dict[str, object] = {}
    seen = set()
    for file_id in files:
        if file_id in seen:
            raise ConfigError(f"Duplicate file id: {file_id}")
        seen.add(file_id)
        parts = file_id.split("/")
        cursor = root
        for index, part in enumerate(parts[:-1]):
            child = cursor.setdefault(part, {})
            if not isinstance(child, dict):
                prefix = "/".join(parts[: index + 1])
                raise ConfigError(f"Path is both a file and a directory: {prefix}")
            cursor = child
        leaf = parts[-1]
        if isinstance(cursor.get(leaf), dict):
            raise ConfigError(f"Path is both a file and a directory: {file_id}")
        cursor[leaf] = file_id

    return DirNode(name="", rel_path="", children=_freeze(root, ""))


def _freeze(entries: Dict[str, object], prefix: str) -> Tuple[TreeNode, ...]:
    children = []
    for name in sorted(entries):
        value = entries[name]
        rel_path = f"{prefix}/{name}" if prefix else name
        if isinstance(value, dict):
            children.append(DirNode(name=name, rel_path=rel_path, children=_freeze(value, rel_path)))
        else:
            children.append(
                FileNode(name=name, rel_path=rel_path, extension=posixpath.splitext(name)[1])
            )
    return tuple(children)


def find_node(root: DirNode, rel_path: str) -> TreeNode | None:
    """Return the node at ``rel_path`` (a directory path may end with ``/``)."""
    target = rel_path.strip("/")
    if not target:
        return root
    node: TreeNode = root
    for part in target.split("/"):
        if not isinstance(node, DirNode):
            return None
        for child in node.children:
            if isinstance(child, (DirNode, FileNode)) and child.name == part:
                node = child
                break
        else:
            return None
    return node


__all__ = [
    "DirNode",
    "FileNode",
    "StubNode",
    "SubtreeStats",
    "TreeNode",
    "build_tree",
    "find_node",
]
