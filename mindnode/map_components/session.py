import logging
from typing import Callable, List, Optional

from .collapse import CollapseState
from .core import DEFAULT_SETTINGS, LayoutSettings
from .layout import LayoutResult, layout
from .node import TreeNode, ensure_unique_ids

logger = logging.getLogger(__name__)

LayoutListener = Callable[[LayoutResult], None]


class MindMapSession:
    """Interactive state for one displayed mind map.

    Holds the current tree, its collapse state and the latest layout. Every
    change to the collapse state recomputes the full layout before listeners
    are notified.
    """

    def __init__(self, root: Optional[TreeNode] = None, settings: Optional[LayoutSettings] = None) -> None:
        self.settings = settings or DEFAULT_SETTINGS
        self.collapsed = CollapseState()
        self._root: Optional[TreeNode] = None
        self._layout = layout(None, settings=self.settings)
        self._listeners: List[LayoutListener] = []
        if root is not None:
            self.load(root)

    @property
    def root(self) -> Optional[TreeNode]:
        return self._root

    @property
    def layout(self) -> LayoutResult:
        return self._layout

    def load(self, root: Optional[TreeNode]) -> LayoutResult:
        ensure_unique_ids(root)
        self._root = root
        self.collapsed.seed(root)
        logger.debug("Loaded mind map rooted at %s", root.id if root is not None else None)
        return self.refresh()

    def on_toggle(self, node_id: str) -> bool:
        changed = self.collapsed.toggle(node_id)
        if changed:
            logger.debug("Toggled node %s (collapsed=%s)", node_id, self.collapsed.is_collapsed(node_id))
            self.refresh()
        return changed

    def expand_all(self) -> LayoutResult:
        self.collapsed.expand_all()
        return self.refresh()

    def collapse_all(self) -> LayoutResult:
        self.collapsed.collapse_all()
        return self.refresh()

    def refresh(self) -> LayoutResult:
        self._layout = layout(self._root, self.collapsed.snapshot(), self.settings)
        for listener in list(self._listeners):
            listener(self._layout)
        return self._layout

    def subscribe(self, listener: LayoutListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: LayoutListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass
