import math
from typing import Dict, FrozenSet, Optional, Set, Tuple, Union

from rich.console import Console
from rich.markup import escape

from ..errors import ConfigurationError
from .canvas import Canvas, display_width, single_line, truncate
from .core import BoxChars, NodeStyle
from .layout import LayoutResult, PositionedNode
from .session import MindMapSession

COLUMN_PX = 7.0
ROW_PX = 20.0

_Cell = Tuple[int, int]


def _cell(value: float, scale: float) -> int:
    return int(math.floor(value / scale + 0.5))


def _closing_tag(tag: str) -> str:
    return "[/]" if tag.startswith("[") else tag


class _BoxGeometry:

    __slots__ = ("left", "right", "row", "label")

    def __init__(self, node: PositionedNode, max_box_width: int) -> None:
        cells = max(_cell(node.width, COLUMN_PX), 6)
        cells = min(cells, max_box_width)
        self.label = truncate(single_line(node.label), cells - 4)
        center = _cell(node.x, COLUMN_PX)
        self.left = center - cells // 2
        self.right = self.left + cells - 1
        self.row = _cell(node.y, ROW_PX)

    def shift(self, dx: int, dy: int) -> None:
        self.left += dx
        self.right += dx
        self.row += dy


class TextRenderer:
    """Projects a layout onto a character grid.

    One column stands for ``COLUMN_PX`` layout units and one row for
    ``ROW_PX``. Boxes are three rows tall; connectors are drawn as elbows
    through one trunk column per parent, halfway between the parent and its
    nearest child, so sibling branches merge into tees.
    """

    def __init__(self, box_style: Union[str, BoxChars] = "rounded", max_box_width: int = 40) -> None:
        if isinstance(box_style, BoxChars):
            self.chars = box_style
        elif isinstance(box_style, str):
            self.chars = BoxChars.for_style(box_style)
        else:
            raise ConfigurationError("box_style must be a string or BoxChars instance.")
        if not isinstance(max_box_width, int) or max_box_width < 8:
            raise ConfigurationError("max_box_width must be an integer of at least 8.")
        self.max_box_width = max_box_width

    def render(self, result: LayoutResult, include_markup: bool = False) -> str:
        if result.is_empty:
            return ""

        boxes = {id(node): _BoxGeometry(node, self.max_box_width) for node in result.nodes}
        shift_x = max(0, -min(box.left for box in boxes.values()))
        shift_y = max(0, 1 - min(box.row for box in boxes.values()))
        for box in boxes.values():
            box.shift(shift_x, shift_y)
        width = max(_cell(result.width, COLUMN_PX) + shift_x, max(box.right for box in boxes.values()) + 2) + 1
        height = max(_cell(result.height, ROW_PX) + shift_y, max(box.row for box in boxes.values()) + 2) + 1
        canvas = Canvas(width, height)

        connectors: Dict[_Cell, Set[str]] = {}
        for node in result.nodes:
            if not node.children:
                continue
            source = boxes[id(node)]
            targets = [boxes[id(child)] for child in node.children]
            trunk_x = (source.right + 1 + min(target.left - 1 for target in targets)) // 2
            for target in targets:
                self._trace_edge(connectors, source, target, trunk_x)
        for (x, y), dirs in connectors.items():
            canvas.set(x, y, self.chars.connector(frozenset(dirs)))

        for node in result.nodes:
            self._draw_box(canvas, node, boxes[id(node)], include_markup)

        return canvas.render(crop=True, include_markup=include_markup)

    def _trace_edge(
        self, connectors: Dict[_Cell, Set[str]], source: _BoxGeometry, target: _BoxGeometry, trunk_x: int
    ) -> None:
        start_x, start_y = source.right + 1, source.row
        end_x, end_y = target.left - 1, target.row
        if end_x < start_x:
            return
        # one trunk column per parent so siblings of any width share it
        mid_x = min(max(trunk_x, start_x), end_x)

        def mark(x: int, y: int, dirs: FrozenSet[str]) -> None:
            connectors.setdefault((x, y), set()).update(dirs)

        for x in range(start_x, mid_x):
            mark(x, start_y, frozenset({"left", "right"}))
        for x in range(mid_x + 1, end_x + 1):
            mark(x, end_y, frozenset({"left", "right"}))

        if start_y == end_y:
            mark(mid_x, start_y, frozenset({"left", "right"}))
            return

        step = 1 if end_y > start_y else -1
        toward_end = "down" if step > 0 else "up"
        toward_start = "up" if step > 0 else "down"
        mark(mid_x, start_y, frozenset({"left", toward_end}))
        for y in range(start_y + step, end_y, step):
            mark(mid_x, y, frozenset({"up", "down"}))
        mark(mid_x, end_y, frozenset({toward_start, "right"}))

    def _draw_box(self, canvas: Canvas, node: PositionedNode, box: _BoxGeometry, include_markup: bool) -> None:
        chars = self.chars
        top, bottom = box.row - 1, box.row + 1
        inner = box.right - box.left - 1

        canvas.set(box.left, top, chars.top_left)
        canvas.set(box.left, bottom, chars.bottom_left)
        for x in range(box.left + 1, box.right):
            canvas.set(x, top, chars.horizontal)
            canvas.set(x, bottom, chars.horizontal)
            canvas.set(x, box.row, " ")
        canvas.set(box.right, top, chars.top_right)
        canvas.set(box.right, bottom, chars.bottom_right)
        canvas.set(box.left, box.row, chars.vertical)

        if node.has_children:
            glyph = chars.expand if node.is_collapsed else chars.collapse
        else:
            glyph = chars.vertical
        canvas.set(box.right, box.row, glyph)

        label = box.label
        if not label:
            return
        start = box.left + 1 + max((inner - display_width(label)) // 2, 0)
        tag = NodeStyle.for_kind(node.kind).markup if include_markup else None
        if tag:
            canvas.insert_markup(start, box.row, tag)

        cursor = last = start
        for index, char in enumerate(label):
            if include_markup and char == "[" and escape(label[index:]).startswith("\\"):
                canvas.insert_markup(cursor, box.row, "\\")
            last = cursor
            cursor += canvas.set(cursor, box.row, char)

        if tag:
            if label.endswith("\\"):
                canvas.insert_markup(last, box.row, "\\", position="suffix")
            canvas.insert_markup(last, box.row, _closing_tag(tag), position="suffix")


def render_text(
    result: LayoutResult,
    include_markup: bool = False,
    *,
    box_style: Union[str, BoxChars] = "rounded",
    max_box_width: int = 40,
) -> str:
    return TextRenderer(box_style=box_style, max_box_width=max_box_width).render(result, include_markup)


def print_map(
    source: Union[MindMapSession, LayoutResult],
    console: Optional[Console] = None,
    **render_kwargs,
) -> None:
    result = source.layout if isinstance(source, MindMapSession) else source
    console = console or Console()
    text = render_text(result, include_markup=True, **render_kwargs)
    console.print(text, highlight=False)
