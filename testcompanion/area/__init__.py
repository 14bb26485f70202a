"""Area Layer - coverage taxonomy and cascading selection."""

from .area_node import AreaNode, DEFAULT_TAXONOMY, format_tree, load_taxonomy, load_taxonomy_file, parse_taxonomy
from .cascading_selector import AreaLevel, CascadingSelector

__all__ = [
    "AreaLevel",
    "AreaNode",
    "CascadingSelector",
    "DEFAULT_TAXONOMY",
    "format_tree",
    "load_taxonomy",
    "load_taxonomy_file",
    "parse_taxonomy",
]
