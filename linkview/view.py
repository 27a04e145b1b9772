import logging
from pathlib import Path
from typing import IO, Any, Optional, Union

from rich.console import Console
from rich.markup import escape

from .accessor import StructureAccessor, discover_accessor
from .engine import Rendering, SnapshotEngine
from .errors import SinkError
from .graph_components.core import Palette
from .graph_components.preview import AsciiPreview
from .transcript import HtmlTranscript

logger = logging.getLogger(__name__)


class ListView:
    """Records the evolution of a linked list into an HTML transcript.

    Call :meth:`record` after every operation worth keeping. Mutating
    operations should pass ``diagram=True`` (the default) so the new state
    is drawn and diffed against the previous diagram; read-only operations
    pass ``diagram=False`` and only get a transcript line::

        with ListView(my_list, "transcript.html") as view:
            my_list.add("A")
            view.record("add(A)")
            my_list.size()
            view.record("size()", diagram=False)
    """

    def __init__(
        self,
        structure: Any,
        output: Union[str, Path, IO[str]],
        *,
        accessor: Optional[StructureAccessor] = None,
        node_type: Optional[type] = None,
        highlight_modifications: bool = True,
        palette: Optional[Union[str, Palette]] = None,
        rank_guides: bool = True,
        echo: bool = False,
        console: Optional[Console] = None,
    ) -> None:
        self.structure = structure
        self.accessor = accessor if accessor is not None else discover_accessor(structure, node_type)
        self.engine = SnapshotEngine(
            self.accessor,
            highlight_modifications=highlight_modifications,
            palette=palette,
            rank_guides=rank_guides,
        )
        self.echo = echo
        self.console = console if console is not None else Console()
        self.preview = AsciiPreview(palette=self.engine.palette)
        self.transcript = HtmlTranscript(output, palette=self.engine.palette)
        self.last_rendering: Optional[Rendering] = None
        try:
            self.record(f"{type(structure).__name__}()")
        except Exception:
            try:
                self.transcript.close()
            except SinkError as exc:
                logger.warning("Failed to close transcript after construction error: %s", exc)
            raise

    def record(self, operation: str, *, diagram: bool = True) -> Optional[Rendering]:
        if not diagram:
            self.transcript.write_operation(operation)
            logger.info("Logged operation %s", operation)
            return None

        rendering = self.engine.render(
            lambda dot: self.transcript.write_operation(operation, dot)
        )
        self.last_rendering = rendering
        logger.info("Logged operation %s", operation)
        if self.echo:
            self.console.rule(escape(operation))
            self.console.print(self.preview.render(rendering, include_markup=True))
        return rendering

    def close(self) -> None:
        self.transcript.close()

    def __enter__(self) -> "ListView":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
