import logging
from dataclasses import dataclass, field
from typing import Container, Dict, List, Optional, Tuple

from .core import DEFAULT_SETTINGS, LayoutSettings, NodeKind, format_number
from .node import TreeNode
from .sizing import node_width

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionedNode:

    node: TreeNode
    depth: int
    x: float
    y: float
    width: float
    is_collapsed: bool
    children: Tuple["PositionedNode", ...] = ()

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def label(self) -> str:
        return self.node.label

    @property
    def kind(self) -> NodeKind:
        return self.node.kind

    @property
    def has_children(self) -> bool:
        return self.node.has_children

    @property
    def source_children(self) -> Tuple[TreeNode, ...]:
        return tuple(self.node.children)

    @property
    def half_width(self) -> float:
        return self.width / 2


@dataclass(frozen=True)
class Edge:

    x1: float
    y1: float
    x2: float
    y2: float
    source_id: str = ""
    target_id: str = ""

    @property
    def midpoint_x(self) -> float:
        return (self.x1 + self.x2) / 2

    def path_data(self) -> str:
        x1, y1, x2, y2 = (format_number(v) for v in (self.x1, self.y1, self.x2, self.y2))
        mid = format_number(self.midpoint_x)
        return f"M {x1} {y1} C {mid} {y1}, {mid} {y2}, {x2} {y2}"


@dataclass(frozen=True)
class LayoutResult:

    nodes: Tuple[PositionedNode, ...] = ()
    edges: Tuple[Edge, ...] = ()
    width: float = DEFAULT_SETTINGS.min_canvas_width
    height: float = DEFAULT_SETTINGS.min_canvas_height
    _index: Dict[str, PositionedNode] = field(default_factory=dict, repr=False, compare=False)

    @property
    def root(self) -> Optional[PositionedNode]:
        return self.nodes[0] if self.nodes else None

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node(self, node_id: str) -> Optional[PositionedNode]:
        return self._index.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index


class _Frame:

    __slots__ = ("node", "depth", "collapsed", "next_index", "placed")

    def __init__(self, node: TreeNode, depth: int, collapsed: bool) -> None:
        self.node = node
        self.depth = depth
        self.collapsed = collapsed
        self.next_index = 0
        self.placed: List[PositionedNode] = []

    @property
    def is_visual_leaf(self) -> bool:
        return self.collapsed or not self.node.children


def _assign_coordinates(
    root: TreeNode, collapsed: Container[str], settings: LayoutSettings
) -> PositionedNode:
    slot = 0
    result: Optional[PositionedNode] = None
    frames = [_Frame(root, 0, root.id in collapsed)]

    while frames:
        frame = frames[-1]
        node = frame.node

        if not frame.is_visual_leaf and frame.next_index < len(node.children):
            child = node.children[frame.next_index]
            frame.next_index += 1
            frames.append(_Frame(child, frame.depth + 1, child.id in collapsed))
            continue

        x = frame.depth * settings.x_gap + settings.x_offset
        if frame.is_visual_leaf:
            y = slot * settings.y_gap + settings.y_offset
            slot += 1
        else:
            # centered between first and last visible child, not the mean of all
            y = (frame.placed[0].y + frame.placed[-1].y) / 2

        positioned = PositionedNode(
            node=node,
            depth=frame.depth,
            x=x,
            y=y,
            width=node_width(node.label, node.kind, settings),
            is_collapsed=frame.collapsed,
            children=tuple(frame.placed),
        )
        frames.pop()
        if frames:
            frames[-1].placed.append(positioned)
        else:
            result = positioned

    assert result is not None
    return result


def _collect(root: PositionedNode) -> Tuple[List[PositionedNode], List[Edge]]:
    nodes: List[PositionedNode] = []
    edges: List[Edge] = []
    stack: List[Tuple[PositionedNode, Optional[PositionedNode]]] = [(root, None)]

    while stack:
        current, parent = stack.pop()
        if parent is not None:
            edges.append(
                Edge(
                    x1=parent.x + parent.half_width,
                    y1=parent.y,
                    x2=current.x - current.half_width,
                    y2=current.y,
                    source_id=parent.id,
                    target_id=current.id,
                )
            )
        nodes.append(current)
        if not current.is_collapsed:
            for child in reversed(current.children):
                stack.append((child, current))

    return nodes, edges


def layout(
    root: Optional[TreeNode],
    collapsed: Optional[Container[str]] = None,
    settings: LayoutSettings = DEFAULT_SETTINGS,
) -> LayoutResult:
    """Position every visible node of ``root`` left to right.

    Nodes whose id is in ``collapsed`` are drawn as leaves and hide their
    subtree. Leaves take one vertical slot each in depth-first order; a parent
    sits halfway between its first and last visible child. Edges run from a
    parent's right-center to each visible child's left-center.

    The function is pure: the tree is only read, and identical inputs give
    identical output. A missing root gives an empty result sized to the
    minimum canvas.
    """
    if root is None:
        return LayoutResult(width=settings.min_canvas_width, height=settings.min_canvas_height)
    if collapsed is None:
        collapsed = frozenset()

    positioned_root = _assign_coordinates(root, collapsed, settings)
    nodes, edges = _collect(positioned_root)

    max_x = max((node.x + node.half_width for node in nodes), default=0)
    max_y = max((node.y for node in nodes), default=0)
    width = max(settings.min_canvas_width, max_x + settings.canvas_margin)
    height = max(settings.min_canvas_height, max_y + settings.canvas_margin)

    logger.debug("Laid out %d nodes and %d edges on a %sx%s canvas", len(nodes), len(edges), width, height)

    index: Dict[str, PositionedNode] = {}
    for node in nodes:
        index.setdefault(node.id, node)

    return LayoutResult(
        nodes=tuple(nodes),
        edges=tuple(edges),
        width=width,
        height=height,
        _index=index,
    )
