import logging
import threading
from typing import FrozenSet, Iterable, Iterator, Optional, Set

from .node import TreeNode

logger = logging.getLogger(__name__)


class CollapseState:
    """The set of node ids whose subtrees are hidden.

    ``seed`` replaces the whole set for a newly loaded tree and remembers which
    ids can be toggled (nodes that have children). Toggling any other id is a
    no-op. Writes are serialized by a lock, and ``snapshot`` hands the layout
    engine an immutable copy.
    """

    def __init__(self, collapsed: Iterable[str] = ()) -> None:
        self._collapsed: Set[str] = set(collapsed)
        self._toggleable: Optional[FrozenSet[str]] = None
        self._root_id: Optional[str] = None
        self._lock = threading.Lock()

    def seed(self, root: Optional[TreeNode]) -> None:
        collapsed: Set[str] = set()
        toggleable: Set[str] = set()
        if root is not None:
            for node in root.walk():
                if not node.children:
                    continue
                toggleable.add(node.id)
                if node.id != root.id:
                    collapsed.add(node.id)

        with self._lock:
            self._collapsed = collapsed
            self._toggleable = frozenset(toggleable)
            self._root_id = root.id if root is not None else None

        logger.debug("Seeded collapse state with %d collapsed nodes", len(collapsed))

    def can_toggle(self, node_id: str) -> bool:
        toggleable = self._toggleable
        return toggleable is None or node_id in toggleable

    def toggle(self, node_id: str) -> bool:
        with self._lock:
            if self._toggleable is not None and node_id not in self._toggleable:
                logger.debug("Ignoring toggle for node without children: %s", node_id)
                return False
            if node_id in self._collapsed:
                self._collapsed.discard(node_id)
            else:
                self._collapsed.add(node_id)
        return True

    def is_collapsed(self, node_id: str) -> bool:
        return node_id in self._collapsed

    def collapse_all(self) -> None:
        with self._lock:
            if self._toggleable is None:
                return
            self._collapsed = {node_id for node_id in self._toggleable if node_id != self._root_id}

    def expand_all(self) -> None:
        with self._lock:
            self._collapsed = set()

    def snapshot(self) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._collapsed)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._collapsed

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._collapsed)

    def __repr__(self) -> str:
        return f"CollapseState({sorted(self._collapsed)!r})"
