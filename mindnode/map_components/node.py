from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Set, Union

from ..errors import DuplicateNodeError, TreeFormatError
from .core import NodeKind


class TreeNode:
    """One labeled node of a mind map tree.

    The tree is owned by the caller. Layout and collapse handling only read it,
    so a tree can be laid out any number of times while it stays unchanged.
    Children keep their insertion order, which is the top-to-bottom order on
    screen.
    """

    def __init__(
        self,
        node_id: str,
        label: str = "",
        kind: Union[NodeKind, str] = NodeKind.CHILD,
        children: Optional[Sequence["TreeNode"]] = None,
    ) -> None:
        self.id = str(node_id)
        self.label = label if isinstance(label, str) else str(label)
        self.kind = NodeKind.coerce(kind)
        self.children: List["TreeNode"] = list(children or [])

    def add(
        self,
        label: str,
        kind: Union[NodeKind, str] = NodeKind.CHILD,
        *,
        node_id: Optional[str] = None,
    ) -> "TreeNode":
        if node_id is None:
            node_id = f"{self.id}.{len(self.children)}"
        child = TreeNode(node_id, label, kind)
        self.children.append(child)
        return child

    def add_code(self, label: str, *, node_id: Optional[str] = None) -> "TreeNode":
        return self.add(label, NodeKind.CODE, node_id=node_id)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def walk(self) -> Iterator["TreeNode"]:
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, node_id: str) -> Optional["TreeNode"]:
        for node in self.walk():
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.kind.value,
            "children": [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, object], *, default_id: str = "root") -> "TreeNode":
        root = cls._node_from_payload(payload, default_id)
        pending = [(root, payload)]
        while pending:
            node, data = pending.pop()
            children_payload = data.get("children")
            if children_payload is None:
                continue
            if not isinstance(children_payload, list):
                raise TreeFormatError(f"'children' of node '{node.id}' must be a list.")
            for index, child_payload in enumerate(children_payload):
                child = cls._node_from_payload(child_payload, f"{node.id}.{index}")
                node.children.append(child)
                pending.append((child, child_payload))
        return root

    @classmethod
    def _node_from_payload(cls, payload: object, default_id: str) -> "TreeNode":
        if not isinstance(payload, Mapping):
            raise TreeFormatError("Each mind map node must be a JSON object.")
        if "label" not in payload:
            raise TreeFormatError(f"Mind map node '{payload.get('id', default_id)}' must include 'label'.")
        label = payload["label"]
        if label is None:
            label = ""
        node_id = payload.get("id")
        if node_id is None or node_id == "":
            node_id = default_id
        return cls(str(node_id), str(label), NodeKind.coerce(payload.get("type")))

    def __repr__(self) -> str:
        return (
            f"TreeNode(id={self.id!r}, label={self.label!r}, kind={self.kind.value!r}, "
            f"children={len(self.children)})"
        )


def ensure_unique_ids(root: Optional[TreeNode]) -> None:
    if root is None:
        return
    seen: Set[str] = set()
    for node in root.walk():
        if node.id in seen:
            raise DuplicateNodeError(node.id)
        seen.add(node.id)
