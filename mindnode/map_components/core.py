from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Union

from ..errors import ConfigurationError, TreeFormatError


class NodeKind(Enum):

    ROOT = "root"
    CHILD = "child"
    CODE = "code"

    @classmethod
    def coerce(cls, value: Union[str, "NodeKind", None]) -> "NodeKind":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.CHILD
        if not isinstance(value, str):
            raise TreeFormatError(f"Node type must be a string, got {type(value).__name__}.")
        key = value.lower().strip()
        for member in cls:
            if member.value == key:
                return member
        raise TreeFormatError(f"Unknown node type: {value}")


class Palette:

    PRIMARY = "#6366f1"
    BACKGROUND = "#f8fafc"
    CARD = "#ffffff"
    CODE_BG = "#1e293b"
    CODE_TEXT = "#f1f5f9"
    LINE = "#cbd5e1"


@dataclass(frozen=True)
class NodeStyle:

    char_width: float
    corner_radius: int
    fill: str
    stroke: Optional[str]
    stroke_width: int
    text_color: str
    monospace: bool = False
    markup: Optional[str] = None

    @classmethod
    def for_kind(cls, kind: NodeKind) -> "NodeStyle":
        if kind is NodeKind.CODE:
            return _CODE_STYLE
        if kind is NodeKind.ROOT:
            return _ROOT_STYLE
        if kind is NodeKind.CHILD:
            return _CHILD_STYLE
        raise ValueError(f"Unknown node kind: {kind}")


_ROOT_STYLE = NodeStyle(
    char_width=7.0,
    corner_radius=12,
    fill=Palette.PRIMARY,
    stroke=None,
    stroke_width=0,
    text_color="#ffffff",
    markup="[bold #6366f1]",
)
_CHILD_STYLE = NodeStyle(
    char_width=7.0,
    corner_radius=12,
    fill=Palette.CARD,
    stroke=Palette.PRIMARY,
    stroke_width=2,
    text_color="#334155",
)
_CODE_STYLE = NodeStyle(
    char_width=7.5,
    corner_radius=4,
    fill=Palette.CODE_BG,
    stroke=Palette.CODE_TEXT,
    stroke_width=1,
    text_color=Palette.CODE_TEXT,
    monospace=True,
    markup="[bold #10b981]",
)


@dataclass(frozen=True)
class LayoutSettings:
    """Spacing and sizing constants shared by the sizing function and the layout engine.

    ``x_gap`` is the horizontal distance between depth columns and ``y_gap`` the
    height of one leaf slot. Offsets shift the whole map away from the canvas
    origin. The canvas never shrinks below ``min_canvas_width`` x
    ``min_canvas_height`` and always keeps ``canvas_margin`` past the furthest node.
    """

    x_gap: float = 300
    y_gap: float = 80
    x_offset: float = 100
    y_offset: float = 50
    node_height: float = 50
    min_node_width: float = 140
    node_padding: float = 30
    min_canvas_width: float = 800
    min_canvas_height: float = 600
    canvas_margin: float = 200

    def __post_init__(self) -> None:
        for name in (
            "x_gap",
            "y_gap",
            "x_offset",
            "y_offset",
            "node_height",
            "min_node_width",
            "node_padding",
            "min_canvas_width",
            "min_canvas_height",
            "canvas_margin",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name} must be a number.")
            if value != value or value in (float("inf"), float("-inf")):
                raise ConfigurationError(f"{name} must be finite.")

        for name in ("x_gap", "y_gap", "node_height", "min_node_width"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be greater than zero.")

        for name in ("x_offset", "y_offset", "node_padding", "canvas_margin", "min_canvas_width", "min_canvas_height"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative.")


DEFAULT_SETTINGS = LayoutSettings()


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class BoxChars:

    top_left: str = "╭"
    top_right: str = "╮"
    bottom_left: str = "╰"
    bottom_right: str = "╯"
    horizontal: str = "─"
    vertical: str = "│"
    tee_down: str = "┬"
    tee_up: str = "┴"
    tee_right: str = "├"
    tee_left: str = "┤"
    cross: str = "┼"
    expand: str = "+"
    collapse: str = "-"

    @classmethod
    def for_style(cls, style: str) -> "BoxChars":
        key = style.lower().strip()
        if key in {"rounded", "round"}:
            return cls()
        if key in {"square", "box"}:
            return cls(top_left="┌", top_right="┐", bottom_left="└", bottom_right="┘")
        if key in {"ascii", "plain"}:
            return cls(
                top_left="+",
                top_right="+",
                bottom_left="+",
                bottom_right="+",
                horizontal="-",
                vertical="|",
                tee_down="+",
                tee_up="+",
                tee_right="+",
                tee_left="+",
                cross="+",
            )
        raise ConfigurationError(f"Unknown box style: {style}")

    def connector(self, dirs: FrozenSet[str]) -> str:
        mapping = {
            frozenset({"up", "down"}): self.vertical,
            frozenset({"left", "right"}): self.horizontal,
            frozenset({"down", "right"}): self.top_left,
            frozenset({"down", "left"}): self.top_right,
            frozenset({"up", "right"}): self.bottom_left,
            frozenset({"up", "left"}): self.bottom_right,
            frozenset({"up", "left", "right"}): self.tee_up,
            frozenset({"down", "left", "right"}): self.tee_down,
            frozenset({"up", "down", "left"}): self.tee_left,
            frozenset({"up", "down", "right"}): self.tee_right,
            frozenset({"up"}): self.vertical,
            frozenset({"down"}): self.vertical,
            frozenset({"left"}): self.horizontal,
            frozenset({"right"}): self.horizontal,
        }
        if not dirs:
            return " "
        return mapping.get(frozenset(dirs), self.cross)
