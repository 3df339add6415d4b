import pytest

from hublab.app.models.project import CapsuleInstance
from hublab.app.services.generators.base import CapsuleTreeError, TreeLimits, count_nodes, fold_tree


def _chain(length: int) -> CapsuleInstance:
    node = CapsuleInstance(id="leaf", capsule_id="text")
    for i in range(length - 1):
        node = CapsuleInstance(id=f"n{i}", capsule_id="card", children=[node])
    return node


def test_count_nodes():
    assert count_nodes(None) == 0
    tree = CapsuleInstance(
        id="root",
        capsule_id="card",
        children=[
            CapsuleInstance(id="a", capsule_id="text"),
            CapsuleInstance(id="b", capsule_id="list", children=[CapsuleInstance(id="c", capsule_id="text")]),
        ],
    )
    assert count_nodes(tree) == 4


def test_depth_limit_counts_root_as_one():
    assert count_nodes(_chain(3), TreeLimits(max_depth=3)) == 3
    with pytest.raises(CapsuleTreeError) as exc:
        count_nodes(_chain(4), TreeLimits(max_depth=3))
    assert exc.value.depth == 4


def test_deep_tree_fails_cleanly_instead_of_recursion_error():
    with pytest.raises(CapsuleTreeError):
        count_nodes(_chain(500))


def test_node_limit():
    with pytest.raises(CapsuleTreeError) as exc:
        count_nodes(_chain(4), TreeLimits(max_nodes=3))
    assert "max size" in str(exc.value)


def test_self_reference_is_detected():
    node = CapsuleInstance.model_construct(id="loop", capsule_id="card", props={}, children=[])
    node.children.append(node)
    with pytest.raises(CapsuleTreeError) as exc:
        count_nodes(node)
    assert exc.value.node_id == "loop"


def test_shared_subtree_is_not_a_cycle():
    shared = CapsuleInstance(id="shared", capsule_id="text")
    root = CapsuleInstance(id="root", capsule_id="card", children=[shared, shared])
    assert count_nodes(root) == 3


def test_fold_is_bottom_up():
    tree = CapsuleInstance(
        id="root",
        capsule_id="card",
        children=[CapsuleInstance(id="a", capsule_id="text"), CapsuleInstance(id="b", capsule_id="text")],
    )
    order = fold_tree(tree, lambda node, kids: [x for k in kids for x in k] + [node.id])
    assert order == ["a", "b", "root"]


def _full_tree(depth: int, branching: int, prefix: str = "n"):
    if depth == 0:
        return None
    children = [_full_tree(depth - 1, branching, f"{prefix}-{i}") for i in range(branching)] if depth > 1 else []
    return CapsuleInstance(id=prefix, capsule_id="card", children=[c for c in children if c is not None])


@pytest.mark.parametrize("depth", range(0, 5))
@pytest.mark.parametrize("branching", range(0, 6))
def test_count_matches_closed_form(depth, branching):
    expected = sum(branching ** level for level in range(depth))
    assert count_nodes(_full_tree(depth, branching)) == expected
