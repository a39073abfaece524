from .core import BoxChars, LayoutSettings, NodeKind, NodeStyle, Palette
from .node import TreeNode, ensure_unique_ids
from .sizing import NODE_HEIGHT, half_width, node_width
from .layout import Edge, LayoutResult, PositionedNode, layout
from .collapse import CollapseState
from .session import MindMapSession
from .canvas import Canvas
from .svg import render_svg
from .terminal import TextRenderer, print_map, render_text

__all__ = [
    "BoxChars",
    "LayoutSettings",
    "NodeKind",
    "NodeStyle",
    "Palette",
    "TreeNode",
    "ensure_unique_ids",
    "NODE_HEIGHT",
    "half_width",
    "node_width",
    "Edge",
    "LayoutResult",
    "PositionedNode",
    "layout",
    "CollapseState",
    "MindMapSession",
    "Canvas",
    "render_svg",
    "TextRenderer",
    "print_map",
    "render_text",
]
