"""rootsgraph package initialization."""

from importlib.metadata import version, PackageNotFoundError

from .graph import find_relationship_path
from .layout import build_tree_structure, calculate_tree_statistics

__all__ = ["__version__", "build_tree_structure", "calculate_tree_statistics", "find_relationship_path"]

try:
    __version__ = version("rootsgraph")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"
