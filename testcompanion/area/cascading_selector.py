"""CascadingSelector - dependent pick-one-of-N levels over the area taxonomy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .area_node import AreaNode

SelectionListener = Callable[["CascadingSelector"], None]


@dataclass
class AreaLevel:
    """One dropdown level: its options and the current choice."""

    options: list[AreaNode] = field(default_factory=list)
    selected_node: AreaNode | None = None


class CascadingSelector:
    """
    Sequence of dependent area levels.

    Level 0 offers the taxonomy roots. Selecting a node at level ``i`` drops
    every level after ``i`` and, if the node has children, appends a fresh
    unselected level offering them. For any two adjacent selected levels the
    deeper selection is always a child of the shallower one.

    Interactive changes go through ``select`` and notify listeners.
    ``restore`` rebuilds levels from saved names and notifies nobody.
    """

    def __init__(self, roots: list[AreaNode]):
        self._roots = list(roots)
        self._levels: list[AreaLevel] = [AreaLevel(options=list(self._roots))]
        self._listeners: list[SelectionListener] = []

    @property
    def roots(self) -> list[AreaNode]:
        return list(self._roots)

    @property
    def levels(self) -> list[AreaLevel]:
        """Snapshot of the current levels."""
        return list(self._levels)

    def add_listener(self, listener: SelectionListener) -> None:
        """Register a callback fired after each interactive selection."""
        self._listeners.append(listener)

    def select(self, level_index: int, node: AreaNode | None) -> None:
        """
        Select ``node`` at ``level_index`` and cascade.

        Args:
            level_index: Index of an existing level
            node: One of that level's options, or None to clear it

        Raises:
            IndexError: If the level does not exist
            ValueError: If node is not an option at that level
        """
        if not 0 <= level_index < len(self._levels):
            raise IndexError(f"No area level at index {level_index}")

        level = self._levels[level_index]
        if node is not None and not any(option is node for option in level.options):
            raise ValueError(f"'{node.name}' is not an option at level {level_index}")

        self._apply(level_index, node)

        for listener in self._listeners:
            listener(self)

    def select_by_name(self, level_index: int, name: str) -> AreaNode:
        """Select the option named ``name`` (case-insensitive) at a level."""
        if not 0 <= level_index < len(self._levels):
            raise IndexError(f"No area level at index {level_index}")

        folded = name.casefold()
        for option in self._levels[level_index].options:
            if option.name.casefold() == folded:
                self.select(level_index, option)
                return option
        raise ValueError(f"No area named '{name}' at level {level_index}")

    def _apply(self, level_index: int, node: AreaNode | None) -> None:
        del self._levels[level_index + 1:]
        self._levels[level_index].selected_node = node
        if node is not None and node.children:
            self._levels.append(AreaLevel(options=list(node.children)))

    def get_selections(self) -> list[str]:
        """Names of the selected nodes, stopping at the first unselected level."""
        selections: list[str] = []
        for level in self._levels:
            if level.selected_node is None:
                break
            selections.append(level.selected_node.name)
        return selections

    def restore(self, selections: list[str]) -> None:
        """
        Rebuild levels from a saved selection path without notifying listeners.

        Names must match options exactly. Restoring stops at the first name
        that has no match, keeping whatever matched before it.
        """
        self.reset()

        for index, name in enumerate(selections):
            if index >= len(self._levels):
                break
            match = next(
                (option for option in self._levels[index].options if option.name == name),
                None,
            )
            if match is None:
                break
            self._apply(index, match)

    def reset(self) -> None:
        """Drop back to a single unselected root level."""
        self._levels = [AreaLevel(options=list(self._roots))]


__all__ = ["AreaLevel", "CascadingSelector", "SelectionListener"]
