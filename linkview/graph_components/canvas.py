from typing import Dict, List, Tuple

from wcwidth import wcwidth

from ..errors import LayoutOverflowError


def glyph_width(char: str) -> int:
    return max(wcwidth(char), 1)


def text_width(text: str) -> int:
    return sum(glyph_width(char) for char in text)


class Canvas:
    """Character grid for the terminal preview.

    A wide glyph occupies its own cell plus ``width - 1`` continuation cells
    of width 0. Rich markup is attached per cell as prefix/suffix tags and
    only emitted when rendering with ``include_markup``.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.grid = [[" " for _ in range(width)] for _ in range(height)]
        self.cell_widths = [[1 for _ in range(width)] for _ in range(height)]
        self.markup: Dict[Tuple[int, int], Dict[str, List[str]]] = {}

    def _check(self, x: int, y: int) -> None:
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise LayoutOverflowError(
                f"Preview content exceeds canvas bounds at ({x}, {y})."
            )

    def set(self, x: int, y: int, char: str, width: int = 1) -> None:
        width = max(width, 1)
        for i in range(width):
            self._check(x + i, y)

        self.markup.pop((x, y), None)
        self.grid[y][x] = char
        self.cell_widths[y][x] = width
        for i in range(1, width):
            self.grid[y][x + i] = " "
            self.cell_widths[y][x + i] = 0
            self.markup.pop((x + i, y), None)

    def get(self, x: int, y: int) -> str:
        if 0 <= y < self.height and 0 <= x < self.width:
            if self.cell_widths[y][x] == 0:
                return " "
            return self.grid[y][x]
        return " "

    def write_text(self, x: int, y: int, text: str) -> int:
        cursor = x
        for char in text:
            width = glyph_width(char)
            self.set(cursor, y, char, width=width)
            cursor += width
        return cursor

    def style(self, x: int, y: int, style: str) -> None:
        if not style:
            return
        cell = self.markup.setdefault((x, y), {"prefix": [], "suffix": []})
        cell["prefix"].append(f"[{style}]")
        cell["suffix"].append("[/]")

    def render(self, include_markup: bool = False) -> str:
        lines: List[str] = []
        for y in range(self.height):
            parts: List[str] = []
            for x in range(self.width):
                if self.cell_widths[y][x] == 0:
                    continue
                glyph = self.grid[y][x]
                markup_cell = self.markup.get((x, y)) if include_markup else None
                if include_markup and glyph == "[":
                    glyph = "\\["
                if markup_cell:
                    parts.extend(markup_cell["prefix"])
                parts.append(glyph)
                if markup_cell:
                    parts.extend(markup_cell["suffix"])
            lines.append("".join(parts).rstrip())
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines)
