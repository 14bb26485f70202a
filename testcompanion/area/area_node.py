"""AreaNode - hierarchical coverage taxonomy loaded from pipe-delimited text."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", ";")

# Used when no coverage file can be found or the file yields no paths
DEFAULT_TAXONOMY = """\
Web | Authentication | Login
Web | Authentication | Logout
Web | Authentication | OAuth | Google
Web | Authentication | OAuth | GitHub
Web | Dashboard | Widgets
Web | Dashboard | Settings
Web | Profile | Edit
Web | Profile | Avatar
API | REST | GET
API | REST | POST
API | REST | PUT
API | REST | DELETE
API | GraphQL | Queries
API | GraphQL | Mutations
Mobile | iOS | Navigation
Mobile | iOS | Push Notifications
Mobile | Android | Navigation
Mobile | Android | Push Notifications
Database | Queries | Performance
Database | Migrations
"""


@dataclass
class AreaNode:
    """
    A single named node in the coverage taxonomy.

    Children keep first-seen order. Nodes are built once at load time and
    only read afterwards.
    """

    name: str
    children: list[AreaNode] = field(default_factory=list)

    def find_child(self, name: str) -> AreaNode | None:
        """Return the child with a case-insensitive matching name."""
        return _find_node(self.children, name)

    def __str__(self) -> str:
        return self.name


def _find_node(nodes: list[AreaNode], name: str) -> AreaNode | None:
    folded = name.casefold()
    for node in nodes:
        if node.name.casefold() == folded:
            return node
    return None


def _add_path(roots: list[AreaNode], parts: list[str]) -> None:
    """Insert one root-to-leaf path, reusing existing siblings."""
    nodes = roots
    for name in parts:
        existing = _find_node(nodes, name)
        if existing is None:
            existing = AreaNode(name=name)
            nodes.append(existing)
        nodes = existing.children


def parse_taxonomy(content: str) -> list[AreaNode]:
    """
    Parse coverage text into a forest of AreaNodes.

    Each non-comment line is a path such as ``Web | Dashboard | Widgets``.
    Lines starting with ``#`` or ``;`` are comments. Blank lines and lines
    with no non-empty segments are skipped.

    Args:
        content: Raw taxonomy text

    Returns:
        Root nodes in first-seen order (possibly empty)
    """
    roots: list[AreaNode] = []

    for raw_line in content.split("\n"):
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue

        parts = [part.strip() for part in line.split("|")]
        parts = [part for part in parts if part]
        if not parts:
            continue

        _add_path(roots, parts)

    return roots


def load_taxonomy_file(path: Path | str) -> list[AreaNode]:
    """
    Load a taxonomy from a file.

    Returns an empty list if the file is missing or unreadable.
    """
    path = Path(path)
    if not path.exists():
        return []

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read coverage file {path}: {e}")
        return []

    return parse_taxonomy(content)


def load_taxonomy(candidates: Iterable[Path | str] = ()) -> list[AreaNode]:
    """
    Load the first candidate file that exists, else the built-in taxonomy.

    Args:
        candidates: Paths to try in order

    Returns:
        Non-empty list of root nodes
    """
    for candidate in candidates:
        path = Path(candidate)
        if not path.exists():
            continue
        roots = load_taxonomy_file(path)
        if roots:
            logger.debug(f"Loaded coverage taxonomy from {path}")
            return roots
        break

    logger.info("Using built-in coverage taxonomy")
    return parse_taxonomy(DEFAULT_TAXONOMY)


def format_tree(roots: list[AreaNode], indent: str = "  ") -> str:
    """Render the taxonomy as an indented outline."""
    lines: list[str] = []

    def _walk(nodes: list[AreaNode], depth: int) -> None:
        for node in nodes:
            lines.append(f"{indent * depth}{node.name}")
            _walk(node.children, depth + 1)

    _walk(roots, 0)
    return "\n".join(lines)


__all__ = [
    "AreaNode",
    "DEFAULT_TAXONOMY",
    "format_tree",
    "load_taxonomy",
    "load_taxonomy_file",
    "parse_taxonomy",
]
