import pytest

from mindnode import NodeKind, TreeNode
from mindnode.errors import DuplicateNodeError, TreeFormatError
from mindnode.map_components.node import ensure_unique_ids


def test_from_dict_preserves_order_and_kinds():
    payload = {
        "id": "root",
        "label": "Kerberos",
        "type": "root",
        "children": [
            {"id": "a", "label": "Rubeus", "type": "child", "children": [
                {"id": "a1", "label": "Rubeus.exe kerberoast /outfile:hashes.txt", "type": "code"},
            ]},
            {"id": "b", "label": "Mimikatz", "type": "CHILD", "children": []},
        ],
    }
    root = TreeNode.from_dict(payload)
    assert root.kind is NodeKind.ROOT
    assert [child.id for child in root.children] == ["a", "b"]
    assert root.children[0].children[0].kind is NodeKind.CODE
    assert root.children[1].kind is NodeKind.CHILD
    assert root.to_dict()["children"][0]["children"][0]["type"] == "code"


def test_missing_ids_are_derived_from_position():
    root = TreeNode.from_dict({"label": "Top", "children": [{"label": "x"}, {"label": "y", "children": [{"label": "z"}]}]})
    assert [node.id for node in root.walk()] == ["root", "root.0", "root.1", "root.1.0"]


@pytest.mark.parametrize(
    "payload",
    [
        {"id": "r"},
        {"id": "r", "label": "x", "children": "nope"},
        {"id": "r", "label": "x", "type": "diamond"},
        {"id": "r", "label": "x", "children": ["bad"]},
    ],
)
def test_malformed_payloads_raise(payload):
    with pytest.raises(TreeFormatError):
        TreeNode.from_dict(payload)


def test_add_builds_children_with_generated_ids():
    root = TreeNode("r", "Root", "root")
    first = root.add("one")
    code = first.add_code("ls -la")
    assert first.id == "r.0"
    assert code.id == "r.0.0"
    assert code.kind is NodeKind.CODE
    assert root.find("r.0.0") is code
    assert root.find("missing") is None


def test_walk_is_preorder(uneven):
    assert [node.id for node in uneven.walk()] == ["R", "C1", "C1.1", "C1.2", "C1.3", "C2", "C3"]


def test_ensure_unique_ids_detects_duplicates_across_subtrees():
    root = TreeNode("r", "Root")
    root.add("a", node_id="x").add("deep", node_id="shared")
    root.add("b", node_id="y").add("deep", node_id="shared")
    with pytest.raises(DuplicateNodeError):
        ensure_unique_ids(root)
    ensure_unique_ids(None)
