from .mind_map import *
from .errors import *

__version__ = "0.1.0"
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
    "MindMapError",
    "ConfigurationError",
    "TreeFormatError",
    "DuplicateNodeError",
    "GenerationError",
    "CanvasOverflowError",
]
