import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .accessor import StructureAccessor
from .errors import AccessorError, ConfigurationError, RenderError, SinkError
from .graph_components.builder import SnapshotBuilder
from .graph_components.core import Palette
from .graph_components.diff import DiffResult, diff
from .graph_components.dot import DotRenderer
from .graph_components.store import Snapshot, SnapshotStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rendering:
    dot: str
    diff: DiffResult
    snapshot: Snapshot
    head_label: str
    tail_label: Optional[str] = None


class SnapshotEngine:
    """Renders one diagram per call and diffs it against the previous call.

    The engine owns its :class:`SnapshotStore`; two engines never share
    state. Renders must not overlap: each call runs to completion before the
    next one starts.
    """

    def __init__(
        self,
        accessor: StructureAccessor,
        *,
        highlight_modifications: bool = True,
        palette: Optional[Union[str, Palette]] = None,
        rank_guides: bool = True,
    ) -> None:
        if not isinstance(accessor, StructureAccessor):
            raise ConfigurationError("accessor must be a StructureAccessor instance.")
        if not isinstance(highlight_modifications, bool):
            raise ConfigurationError("highlight_modifications must be a boolean value.")
        if not isinstance(rank_guides, bool):
            raise ConfigurationError("rank_guides must be a boolean value.")

        if isinstance(palette, Palette):
            resolved = palette
        else:
            style_key = "default" if palette is None else palette
            if not isinstance(style_key, str):
                raise ConfigurationError("palette must be a string or Palette instance.")
            try:
                resolved = Palette.for_style(style_key)
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc
        if not highlight_modifications:
            resolved = Palette.for_style("none")

        self.accessor = accessor
        self.palette = resolved
        self.store = SnapshotStore()
        self.builder = SnapshotBuilder(accessor)
        self.renderer = DotRenderer(resolved, rank_guides=rank_guides)

    def render(self, emit: Optional[Callable[[str], object]] = None) -> Rendering:
        """Build, diff and emit one diagram.

        ``emit`` receives the finished dot text. The stored snapshot is only
        replaced once it returns, so a failed write leaves the next diff
        against the last diagram that was actually emitted.
        """
        try:
            snapshot = self.builder.build()
        except RenderError:
            logger.error("Render aborted while reading the list structure", exc_info=True)
            raise
        except Exception as exc:
            logger.error("Render aborted while reading the list structure", exc_info=True)
            raise AccessorError(f"Structure accessor failed: {exc}") from exc

        result = diff(snapshot, self.store.previous, has_tail=self.accessor.has_tail)
        text = self.renderer.render(
            snapshot,
            result,
            self.accessor.head_label,
            self.accessor.tail_label,
        )

        if emit is not None:
            try:
                emit(text)
            except OSError as exc:
                logger.error("Failed to write diagram: %s", exc)
                raise SinkError(f"Failed to write diagram: {exc}") from exc

        self.store.commit(snapshot)
        logger.debug(
            "Rendered generation %d: %d new, %d modified",
            self.store.generation,
            len(result.new_nodes()),
            len(result.modified_nodes()),
        )
        return Rendering(
            dot=text,
            diff=result,
            snapshot=snapshot,
            head_label=self.accessor.head_label,
            tail_label=self.accessor.tail_label,
        )

    def reset(self) -> None:
        self.store.reset()
