import os
import random
import sys

import pytest

_ROOT_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _ROOT_PATH not in sys.path:
    sys.path.insert(0, _ROOT_PATH)

from mindnode import NodeKind, TreeNode


def build_random_tree(seed: int, size: int = 40) -> TreeNode:
    rng = random.Random(seed)
    root = TreeNode("n0", "Root", NodeKind.ROOT)
    nodes = [root]
    for index in range(1, size):
        parent = rng.choice(nodes)
        kind = NodeKind.CODE if rng.random() < 0.2 else NodeKind.CHILD
        label = "x" * rng.randint(0, 50)
        nodes.append(parent.add(label, kind, node_id=f"n{index}"))
    return root


@pytest.fixture
def two_leaves() -> TreeNode:
    root = TreeNode("R", "Root", NodeKind.ROOT)
    root.add("Child 1", node_id="C1")
    root.add("Child 2", node_id="C2")
    return root


@pytest.fixture
def chain() -> TreeNode:
    root = TreeNode("R", "Root", NodeKind.ROOT)
    child = root.add("Child 1", node_id="C1")
    child.add("Grandchild", node_id="G1")
    return root


@pytest.fixture
def uneven() -> TreeNode:
    root = TreeNode("R", "Root", NodeKind.ROOT)
    branch = root.add("Branch", node_id="C1")
    for index in range(1, 4):
        branch.add(f"Leaf {index}", node_id=f"C1.{index}")
    root.add("Second", node_id="C2")
    root.add("Third", node_id="C3")
    return root


@pytest.fixture
def random_tree() -> TreeNode:
    return build_random_tree(seed=7)
