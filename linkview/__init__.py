from .accessor import AttributeAccessor, StructureAccessor, discover_accessor
from .engine import Rendering, SnapshotEngine
from .errors import *
from .graph_components import Change, DiffResult, Palette, render_preview
from .transcript import HtmlTranscript
from .view import ListView

__version__ = "0.1.0"
__all__ = [
    "ListView",
    "SnapshotEngine",
    "Rendering",
    "StructureAccessor",
    "AttributeAccessor",
    "discover_accessor",
    "HtmlTranscript",
    "Change",
    "DiffResult",
    "Palette",
    "render_preview",
    "LinkViewError",
    "ConfigurationError",
    "LayoutOverflowError",
    "RenderError",
    "AccessorError",
    "SinkError",
]
