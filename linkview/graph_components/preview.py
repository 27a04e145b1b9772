from typing import Dict, List, Optional, Set, Tuple, TYPE_CHECKING

from rich.markup import escape

from ..errors import ConfigurationError
from .canvas import Canvas, glyph_width, text_width
from .core import BoxChars, Change, Palette
from .edge import Edge, collect_edges
from .node import GraphNode

if TYPE_CHECKING:
    from ..engine import Rendering


BOX_HEIGHT = 3
_STRENGTH = {None: 0, Change.UNCHANGED: 0, Change.MODIFIED: 1, Change.NEW: 2}


def _stronger(first: Optional[Change], second: Optional[Change]) -> Optional[Change]:
    return first if _STRENGTH[first] >= _STRENGTH[second] else second


class AsciiPreview:
    """Terminal rendering of a :class:`~linkview.engine.Rendering`.

    Levels become rows of boxes, top to bottom in rank order. Links between
    adjacent levels are drawn as connectors (``▼`` for ``next``, ``▲`` for
    ``prev``); sentinel references and links spanning more than one level
    are listed under the drawing.
    """

    def __init__(
        self,
        *,
        palette: Optional[Palette] = None,
        box_style: str = "rounded",
        max_box_width: int = 36,
        horizontal_spacing: int = 4,
        vertical_spacing: int = 3,
    ) -> None:
        for name, value in (
            ("max_box_width", max_box_width),
            ("horizontal_spacing", horizontal_spacing),
            ("vertical_spacing", vertical_spacing),
        ):
            if not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer.")
        if max_box_width < 10:
            raise ConfigurationError("max_box_width must be at least 10 characters.")
        if vertical_spacing < 3:
            raise ConfigurationError("vertical_spacing must be at least 3 rows.")
        try:
            self.chars = BoxChars.for_style(box_style)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        self.palette = palette if palette is not None else Palette()
        self.max_box_width = max_box_width
        self.h_spacing = max(1, horizontal_spacing)
        self.v_spacing = vertical_spacing

    def _label(self, node: GraphNode) -> str:
        if node.is_placeholder or node.data is None:
            text = "None"
        else:
            text = " ".join(str(node.data).splitlines()) or " "
        limit = self.max_box_width - 4
        if text_width(text) <= limit:
            return text
        kept: List[str] = []
        used = 0
        for char in text:
            width = glyph_width(char)
            if used + width > limit - 1:
                break
            kept.append(char)
            used += width
        return "".join(kept) + "…"

    def _layout(
        self, levels: List[List[GraphNode]], labels: Dict[str, str]
    ) -> Dict[str, Tuple[int, int, int]]:
        positions: Dict[str, Tuple[int, int, int]] = {}
        if not labels:
            return positions
        widths = {node_id: text_width(label) + 4 for node_id, label in labels.items()}
        cell_width = max(widths.values()) + max(4, self.h_spacing * 2)

        current_y = 0
        for level in levels:
            count = len(level)
            if count == 1:
                centers = [0.0]
            else:
                start_center = -((count - 1) * cell_width) / 2
                centers = [start_center + idx * cell_width for idx in range(count)]
            for center, node in zip(centers, level):
                width = widths[node.id]
                positions[node.id] = (int(round(center - width / 2)), current_y, width)
            current_y += BOX_HEIGHT + self.v_spacing

        min_x = min(x for x, _, _ in positions.values())
        if min_x < 0:
            positions = {
                node_id: (x - min_x, y, width) for node_id, (x, y, width) in positions.items()
            }
        return positions

    def _draw_box(
        self,
        canvas: Canvas,
        position: Tuple[int, int, int],
        label: str,
        border: Optional[str],
        text: Optional[str],
    ) -> None:
        x, y, width = position
        bottom = y + BOX_HEIGHT - 1
        canvas.set(x, y, self.chars.top_left)
        canvas.set(x + width - 1, y, self.chars.top_right)
        canvas.set(x, bottom, self.chars.bottom_left)
        canvas.set(x + width - 1, bottom, self.chars.bottom_right)
        for i in range(1, width - 1):
            canvas.set(x + i, y, self.chars.horizontal)
            canvas.set(x + i, bottom, self.chars.horizontal)
        canvas.set(x, y + 1, self.chars.vertical)
        canvas.set(x + width - 1, y + 1, self.chars.vertical)
        end = canvas.write_text(x + 2, y + 1, label)

        if border:
            for i in range(width):
                canvas.style(x + i, y, border)
                canvas.style(x + i, bottom, border)
            canvas.style(x, y + 1, border)
            canvas.style(x + width - 1, y + 1, border)
        if text:
            for cx in range(x + 2, end):
                if canvas.cell_widths[y + 1][cx]:
                    canvas.style(cx, y + 1, text)

    def _char_to_dirs(self, char: str) -> Set[str]:
        mapping = {
            self.chars.vertical: {"up", "down"},
            self.chars.horizontal: {"left", "right"},
            self.chars.top_left: {"down", "right"},
            self.chars.top_right: {"down", "left"},
            self.chars.bottom_left: {"up", "right"},
            self.chars.bottom_right: {"up", "left"},
            self.chars.cross: {"up", "down", "left", "right"},
            self.chars.tee_up: {"up", "left", "right"},
            self.chars.tee_down: {"down", "left", "right"},
            self.chars.tee_left: {"up", "down", "left"},
            self.chars.tee_right: {"up", "down", "right"},
        }
        return set(mapping.get(char, set()))

    def _dirs_to_char(self, dirs: Set[str]) -> str:
        key = frozenset(dirs)
        mapping = {
            frozenset({"up", "down"}): self.chars.vertical,
            frozenset({"left", "right"}): self.chars.horizontal,
            frozenset({"down", "right"}): self.chars.top_left,
            frozenset({"down", "left"}): self.chars.top_right,
            frozenset({"up", "right"}): self.chars.bottom_left,
            frozenset({"up", "left"}): self.chars.bottom_right,
            frozenset({"up", "down", "left", "right"}): self.chars.cross,
            frozenset({"up", "left", "right"}): self.chars.tee_up,
            frozenset({"down", "left", "right"}): self.chars.tee_down,
            frozenset({"up", "down", "left"}): self.chars.tee_left,
            frozenset({"up", "down", "right"}): self.chars.tee_right,
        }
        return mapping.get(key, self.chars.cross)

    def _trace(
        self,
        state: Dict[Tuple[int, int], Dict[str, object]],
        points: List[Tuple[int, int]],
        style: Optional[str],
    ) -> None:
        cells: List[Tuple[int, int]] = [points[0]]
        for (x0, y0), (x1, y1) in zip(points, points[1:]):
            step_x = (x1 > x0) - (x1 < x0)
            step_y = (y1 > y0) - (y1 < y0)
            x, y = x0, y0
            while (x, y) != (x1, y1):
                x, y = x + step_x, y + step_y
                cells.append((x, y))

        for index, cell in enumerate(cells):
            entry = state.setdefault(cell, {"dirs": set(), "style": None})
            if style and not entry["style"]:
                entry["style"] = style
            dirs = entry["dirs"]
            neighbours = []
            if index == 0:
                neighbours.append((cell[0], cell[1] - 1))
            else:
                neighbours.append(cells[index - 1])
            if index == len(cells) - 1:
                neighbours.append((cell[0], cell[1] + 1))
            else:
                neighbours.append(cells[index + 1])
            for nx, ny in neighbours:
                if nx > cell[0]:
                    dirs.add("right")
                elif nx < cell[0]:
                    dirs.add("left")
                elif ny > cell[1]:
                    dirs.add("down")
                elif ny < cell[1]:
                    dirs.add("up")

    def _draw_connectors(
        self,
        canvas: Canvas,
        edges: List[Edge],
        ranks: Dict[str, int],
        positions: Dict[str, Tuple[int, int, int]],
    ) -> List[Edge]:
        pairs: Dict[Tuple[str, str], Dict[str, Optional[Change]]] = {}
        leftover: List[Edge] = []
        for edge in edges:
            source_rank = ranks[edge.source.id]
            target_rank = ranks[edge.target.id]
            if abs(source_rank - target_rank) != 1:
                leftover.append(edge)
                continue
            if source_rank < target_rank:
                upper, lower, direction = edge.source, edge.target, "down"
            else:
                upper, lower, direction = edge.target, edge.source, "up"
            entry = pairs.setdefault((upper.id, lower.id), {"down": None, "up": None})
            entry[direction] = _stronger(edge.change, entry[direction])

        state: Dict[Tuple[int, int], Dict[str, object]] = {}
        arrows: List[Tuple[Tuple[int, int], str, Optional[str]]] = []
        for (upper_id, lower_id), directions in pairs.items():
            ux, uy, uw = positions[upper_id]
            lx, ly, lw = positions[lower_id]
            start = (ux + uw // 2, uy + BOX_HEIGHT)
            end = (lx + lw // 2, ly - 1)
            mid_y = start[1] + 1
            change = _stronger(directions["down"], directions["up"])
            style = self.palette.colour_for(change)
            self._trace(state, [start, (start[0], mid_y), (end[0], mid_y), end], style)
            if directions["down"] is not None:
                arrows.append((end, self.chars.arrow_down, self.palette.colour_for(directions["down"])))
            if directions["up"] is not None:
                arrows.append((start, self.chars.arrow_up, self.palette.colour_for(directions["up"])))

        for (x, y), entry in state.items():
            dirs = self._char_to_dirs(canvas.get(x, y)) | entry["dirs"]
            canvas.set(x, y, self._dirs_to_char(dirs))
            if entry["style"]:
                canvas.style(x, y, entry["style"])
        for (x, y), glyph, style in arrows:
            canvas.set(x, y, glyph)
            if style:
                canvas.style(x, y, style)
        return leftover

    def _styled(self, text: str, change: Optional[Change], include_markup: bool) -> str:
        if not include_markup:
            return text
        colour = self.palette.colour_for(change)
        text = escape(text)
        return f"[{colour}]{text}[/]" if colour else text

    def _footer(
        self,
        rendering: "Rendering",
        labels: Dict[str, str],
        leftover: List[Edge],
        include_markup: bool,
    ) -> List[str]:
        lines: List[str] = []
        snapshot = rendering.snapshot
        result = rendering.diff
        sentinels = [(rendering.head_label, snapshot.head, result.head_edge)]
        if rendering.tail_label is not None:
            sentinels.append((rendering.tail_label, snapshot.tail, result.tail_edge))
        for name, target, change in sentinels:
            target_label = labels[target.id] if target is not None else "∅"
            text = f"{name} ─► {target_label}"
            lines.append(self._styled(text, change, include_markup))
        for edge in leftover:
            text = f"{labels[edge.source.id]} ─{edge.kind}─► {labels[edge.target.id]}"
            lines.append(self._styled(text, edge.change, include_markup))
        return lines

    def render(self, rendering: "Rendering", include_markup: bool = False) -> str:
        snapshot = rendering.snapshot
        levels = list(snapshot.levels)
        labels = {node.id: self._label(node) for node in snapshot.levels.nodes()}
        positions = self._layout(levels, labels)

        leftover: List[Edge] = []
        drawing = ""
        if positions:
            width = max(x + w for x, _, w in positions.values()) + 1
            height = len(levels) * (BOX_HEIGHT + self.v_spacing)
            canvas = Canvas(width=width, height=height)
            for node in snapshot.levels.nodes():
                change = rendering.diff.for_node(node)
                self._draw_box(
                    canvas,
                    positions[node.id],
                    labels[node.id],
                    self.palette.colour_for(change.node),
                    self.palette.colour_for(
                        change.node if change.node is Change.NEW else change.data
                    ),
                )
            ranks = {node.id: snapshot.levels.rank_of(node) for node in snapshot.levels.nodes()}
            leftover = self._draw_connectors(
                canvas, collect_edges(snapshot, rendering.diff), ranks, positions
            )
            drawing = canvas.render(include_markup=include_markup)

        footer = self._footer(rendering, labels, leftover, include_markup)
        return "\n".join(part for part in [drawing, "\n".join(footer)] if part)


def render_preview(rendering: "Rendering", include_markup: bool = False, **kwargs) -> str:
    return AsciiPreview(**kwargs).render(rendering, include_markup=include_markup)
