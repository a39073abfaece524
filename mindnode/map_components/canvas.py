import unicodedata
from typing import Dict, List, Tuple

from wcwidth import wcwidth

from ..errors import CanvasOverflowError


def glyph_width(char: str) -> int:
    return max(wcwidth(char), 1)


def display_width(text: str) -> int:
    return sum(glyph_width(char) for char in text)


LINE_BREAK = "⏎"


def single_line(text: str) -> str:
    lines = [" ".join(line.split()) for line in text.splitlines()]
    lines = ["".join(char for char in line if unicodedata.category(char) != "Cc") for line in lines]
    return f" {LINE_BREAK} ".join(line for line in lines if line)


def truncate(text: str, limit: int, ellipsis: str = "…") -> str:
    if limit <= 0:
        return ""
    if display_width(text) <= limit:
        return text
    budget = limit - display_width(ellipsis)
    kept: List[str] = []
    used = 0
    for char in text:
        width = glyph_width(char)
        if used + width > budget:
            break
        kept.append(char)
        used += width
    return "".join(kept) + ellipsis


class Canvas:
    """Character grid for terminal output.

    Wide glyphs occupy their first cell and blank the following ones. Rich
    markup tags can be attached before or after any cell and are only emitted
    by ``render(include_markup=True)``.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.grid = [[" "] * width for _ in range(height)]
        self.cell_widths = [[1] * width for _ in range(height)]
        self.markup: Dict[Tuple[int, int], Dict[str, List[str]]] = {}
        self.min_x = width
        self.max_x = -1
        self.min_y = height
        self.max_y = -1

    def _check(self, x: int, y: int) -> None:
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise CanvasOverflowError(f"Mind map content exceeds canvas bounds at ({x}, {y}).")

    def set(self, x: int, y: int, char: str) -> int:
        width = glyph_width(char)
        for offset in range(width):
            self._check(x + offset, y)

        self.grid[y][x] = char
        self.cell_widths[y][x] = width
        for offset in range(1, width):
            self.grid[y][x + offset] = " "
            self.cell_widths[y][x + offset] = 0

        self.min_x = min(self.min_x, x)
        self.max_x = max(self.max_x, x + width - 1)
        self.min_y = min(self.min_y, y)
        self.max_y = max(self.max_y, y)
        return width

    def write(self, x: int, y: int, text: str) -> int:
        cursor = x
        for char in text:
            cursor += self.set(cursor, y, char)
        return cursor - x

    def get(self, x: int, y: int) -> str:
        if 0 <= y < self.height and 0 <= x < self.width and self.cell_widths[y][x]:
            return self.grid[y][x]
        return " "

    def insert_markup(self, x: int, y: int, markup: str, *, position: str = "prefix") -> None:
        if not markup:
            return
        if position not in {"prefix", "suffix"}:
            raise ValueError(f"Unknown markup position: {position}")
        cell = self.markup.setdefault((x, y), {"prefix": [], "suffix": []})
        cell[position].append(markup)

    def _render_row(self, y: int, x_range: range, include_markup: bool) -> str:
        parts: List[str] = []
        for x in x_range:
            if self.cell_widths[y][x] == 0:
                continue
            cell = self.markup.get((x, y)) if include_markup else None
            if cell:
                parts.extend(cell["prefix"])
            parts.append(self.grid[y][x])
            if cell:
                parts.extend(cell["suffix"])
        return "".join(parts).rstrip()

    def render(self, crop: bool = True, include_markup: bool = False) -> str:
        if crop:
            if self.max_x < 0:
                return ""
            rows = range(self.min_y, self.max_y + 1)
            columns = range(self.min_x, self.max_x + 1)
        else:
            rows = range(self.height)
            columns = range(self.width)
        return "\n".join(self._render_row(y, columns, include_markup) for y in rows)
