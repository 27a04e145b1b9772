from .core import BoxChars, Change, Palette
from .node import GraphNode
from .levels import LevelTable
from .store import Snapshot, SnapshotStore
from .builder import SnapshotBuilder
from .diff import DiffResult, NodeChange, diff
from .edge import Edge, collect_edges
from .dot import DotRenderer
from .canvas import Canvas
from .preview import AsciiPreview, render_preview

__all__ = [
    "BoxChars",
    "Change",
    "Palette",
    "GraphNode",
    "LevelTable",
    "Snapshot",
    "SnapshotStore",
    "SnapshotBuilder",
    "DiffResult",
    "NodeChange",
    "diff",
    "Edge",
    "collect_edges",
    "DotRenderer",
    "Canvas",
    "AsciiPreview",
    "render_preview",
]
