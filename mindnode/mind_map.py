from .agent import MindMapAnswer, answer_question, summarize
from .map_components import (
    CollapseState,
    Edge,
    LayoutResult,
    LayoutSettings,
    MindMapSession,
    NodeKind,
    PositionedNode,
    TreeNode,
    layout,
    node_width,
    print_map,
    render_svg,
    render_text,
)

__all__ = [
    "TreeNode",
    "NodeKind",
    "LayoutSettings",
    "PositionedNode",
    "Edge",
    "LayoutResult",
    "layout",
    "node_width",
    "CollapseState",
    "MindMapSession",
    "render_svg",
    "render_text",
    "print_map",
    "MindMapAnswer",
    "answer_question",
    "summarize",
]
