"""
MiniTree Ordered Tree Tests
===========================
Tests for OrderedTree: insert/delete, search, traversals, shape
introspection, rank/ancestor/range queries, balanced builds and the
structural invariants after random mutation sequences.
"""

import random

import pytest

from bst import OrderedTree, EmptyTreeError, InvalidArgumentError, UNBALANCED


SAMPLE_KEYS = [50, 30, 70, 20, 40, 60, 80]


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════

@pytest.fixture
def tree():
    """Perfect tree of height 2 rooted at 50."""
    return OrderedTree(SAMPLE_KEYS)


@pytest.fixture
def skewed():
    """Right-only chain 10 → 20 → ... → 70."""
    return OrderedTree([10, 20, 30, 40, 50, 60, 70])


@pytest.fixture
def rng():
    return random.Random(1234)


def assert_consistent(t: OrderedTree):
    keys = list(t.inorder())
    assert keys == sorted(set(keys))
    assert t.is_valid_bst()
    assert t.size() == t.count_nodes() == len(keys)
    assert (t.root is None) == (t.size() == 0)


# ═══════════════════════════════════════════════════════════════════
# Reference Scenarios
# ═══════════════════════════════════════════════════════════════════

class TestReferenceScenarios:

    def test_sample_tree_queries(self, tree):
        assert list(tree.inorder()) == [20, 30, 40, 50, 60, 70, 80]
        assert tree.height() == 2
        assert tree.size() == 7
        assert tree.is_balanced()
        assert tree.kth_smallest(3) == 40
        assert tree.lowest_common_ancestor(20, 40) == 30
        assert tree.range_sum(30, 70) == 260

    def test_ascending_insert_is_skewed(self, skewed):
        assert skewed.height() == 6
        assert not skewed.is_balanced()
        assert skewed.count_leaves() == 1
        assert list(skewed.preorder()) == [10, 20, 30, 40, 50, 60, 70]

    def test_empty_tree(self):
        t = OrderedTree()
        assert t.is_empty()
        assert t.height() == -1
        with pytest.raises(EmptyTreeError):
            t.find_min()

    def test_duplicate_rejected(self):
        t = OrderedTree()
        for k in (50, 30, 50):
            t.insert(k)
        assert t.size() == 2

    def test_delete_root_with_two_children(self, tree):
        assert tree.delete(50)
        assert tree.root.key == 60
        assert list(tree.inorder()) == [20, 30, 40, 60, 70, 80]
        assert_consistent(tree)


# ═══════════════════════════════════════════════════════════════════
# Insert
# ═══════════════════════════════════════════════════════════════════

class TestInsert:

    def test_insert_returns_added_flag(self):
        t = OrderedTree()
        assert t.insert(5) is True
        assert t.insert(5) is False
        assert t.insert_iterative(5) is False
        assert t.insert_iterative(6) is True
        assert t.size() == 2

    def test_duplicate_keeps_shape(self, tree):
        before = list(tree.preorder())
        assert not tree.insert(40)
        assert not tree.insert_iterative(70)
        assert list(tree.preorder()) == before
        assert tree.size() == 7

    def test_single_node(self):
        t = OrderedTree([42])
        assert t.height() == 0
        assert t.is_balanced()
        assert t.count_leaves() == 1
        assert t.find_min() == t.find_max() == 42

    def test_recursive_and_iterative_build_same_shape(self, rng):
        for _ in range(20):
            keys = [rng.randint(0, 500) for _ in range(rng.randint(0, 120))]
            a, b = OrderedTree(), OrderedTree()
            for k in keys:
                a.insert(k)
                b.insert_iterative(k)
            assert list(a.preorder()) == list(b.preorder())
            assert list(a.level_order()) == list(b.level_order())
            assert a.size() == b.size()

    def test_insert_many_counts_added(self):
        t = OrderedTree()
        assert t.insert_many([3, 1, 3, 2, 1]) == 3
        assert list(t) == [1, 2, 3]

    def test_mixed_int_and_float(self):
        t = OrderedTree([1, 2.5, 2])
        assert list(t.inorder()) == [1, 2, 2.5]
        assert not t.insert(2.0)

    def test_string_keys(self):
        t = OrderedTree(["pear", "apple", "fig"])
        assert list(t) == ["apple", "fig", "pear"]
        assert t.find_max() == "pear"
        assert t.lowest_common_ancestor("apple", "fig") == "apple"


# ═══════════════════════════════════════════════════════════════════
# Delete
# ═══════════════════════════════════════════════════════════════════

class TestDelete:

    def test_delete_leaf(self, tree):
        assert tree.delete(20)
        assert list(tree.preorder()) == [50, 30, 40, 70, 60, 80]
        assert tree.size() == 6

    def test_delete_one_child(self, tree):
        tree.delete(20)
        assert tree.delete(30)
        # 40 takes the slot of 30
        assert list(tree.preorder()) == [50, 40, 70, 60, 80]
        assert_consistent(tree)

    def test_delete_sequence_from_demo(self, tree):
        tree.delete(20)
        tree.delete(30)
        tree.delete(50)
        assert list(tree.preorder()) == [60, 40, 70, 80]
        assert list(tree.inorder()) == [40, 60, 70, 80]

    def test_delete_successor_with_right_child(self):
        t = OrderedTree([50, 30, 70, 60, 65])
        # successor of 50 is 60, which has right child 65
        assert t.delete(50)
        assert list(t.preorder()) == [60, 30, 70, 65]
        assert_consistent(t)

    def test_delete_absent_leaves_tree_unchanged(self, tree):
        before = list(tree.preorder())
        assert tree.delete(45) is False
        assert list(tree.preorder()) == before
        assert tree.size() == 7

    def test_delete_on_empty(self):
        t = OrderedTree()
        assert t.delete(1) is False
        assert t.is_empty()

    def test_delete_everything(self, tree, rng):
        keys = list(SAMPLE_KEYS)
        rng.shuffle(keys)
        for k in keys:
            assert tree.delete(k)
            assert_consistent(tree)
        assert tree.is_empty()
        assert tree.root is None
        assert tree.height() == -1

    def test_delete_skewed_chain(self, skewed):
        assert skewed.delete(10)
        assert skewed.root.key == 20
        assert skewed.height() == 5

    def test_clear(self, tree):
        tree.clear()
        assert tree.is_empty()
        assert tree.root is None
        assert list(tree.inorder()) == []
        tree.insert(1)
        assert tree.size() == 1


# ═══════════════════════════════════════════════════════════════════
# Search & Min/Max
# ═══════════════════════════════════════════════════════════════════

class TestSearch:

    def test_search_present_and_absent(self, tree):
        for k in SAMPLE_KEYS:
            assert tree.search(k)
            assert tree.search_iterative(k)
        for k in (0, 25, 45, 100):
            assert not tree.search(k)
            assert not tree.search_iterative(k)

    def test_search_on_empty(self):
        t = OrderedTree()
        assert not t.search(1)
        assert not t.search_iterative(1)

    def test_contains_operator(self, tree):
        assert 40 in tree
        assert 41 not in tree

    def test_min_max(self, tree, skewed):
        assert tree.find_min() == 20
        assert tree.find_max() == 80
        assert skewed.find_min() == 10
        assert skewed.find_max() == 70

    def test_find_max_on_empty(self):
        with pytest.raises(EmptyTreeError, match="find_max"):
            OrderedTree().find_max()


# ═══════════════════════════════════════════════════════════════════
# Traversals
# ═══════════════════════════════════════════════════════════════════

class TestTraversal:

    def test_orders(self, tree):
        assert list(tree.preorder()) == [50, 30, 20, 40, 70, 60, 80]
        assert list(tree.postorder()) == [20, 40, 30, 60, 80, 70, 50]
        assert list(tree.level_order()) == [50, 30, 70, 20, 40, 60, 80]

    def test_empty_traversals(self):
        t = OrderedTree()
        assert list(t.inorder()) == []
        assert list(t.preorder()) == []
        assert list(t.postorder()) == []
        assert list(t.level_order()) == []

    def test_traversal_is_lazy_and_single_pass(self, tree):
        walk = tree.inorder()
        assert next(walk) == 20
        assert next(walk) == 30
        assert list(walk) == [40, 50, 60, 70, 80]
        assert list(walk) == []
        # A fresh call starts over
        assert list(tree.inorder())[0] == 20

    def test_iter_is_inorder(self, tree):
        assert list(tree) == list(tree.inorder())
        assert len(tree) == 7

    def test_preorder_reinsert_rebuilds_shape(self, rng):
        for _ in range(10):
            original = OrderedTree([rng.randint(-100, 100) for _ in range(60)])
            copy = OrderedTree(original.preorder())
            assert list(copy.preorder()) == list(original.preorder())
            assert copy.height() == original.height()

    def test_postorder_children_before_parent(self, rng):
        t = OrderedTree([rng.randint(0, 300) for _ in range(80)])
        position = {k: i for i, k in enumerate(t.postorder())}
        stack = [t.root]
        while stack:
            node = stack.pop()
            for child in (node.left, node.right):
                if child is not None:
                    assert position[child.key] < position[node.key]
                    stack.append(child)


# ═══════════════════════════════════════════════════════════════════
# Shape Introspection
# ═══════════════════════════════════════════════════════════════════

class TestShape:

    def test_counts(self, tree):
        assert tree.count_nodes() == 7
        assert tree.count_leaves() == 4
        assert OrderedTree().count_leaves() == 0

    def test_balance_tolerates_difference_of_one(self):
        t = OrderedTree([2, 1, 3, 4])
        assert t.is_balanced()
        t.insert(5)
        assert not t.is_balanced()

    def test_balance_checks_every_node(self):
        # Root heights are equal (2 and 2) but 30 and 70 are lopsided.
        t = OrderedTree([50, 30, 70, 20, 10, 80, 90])
        assert t.root.left is not None and t.root.right is not None
        assert not t.is_balanced()

    def test_balanced_height_marker(self, tree, skewed):
        assert tree._balanced_height(tree.root) == 2
        assert skewed._balanced_height(skewed.root) is UNBALANCED

    def test_valid_bst_detects_corruption(self, tree):
        assert tree.is_valid_bst()
        tree.root.left.right.key = 55  # 55 sits in 50's left subtree
        assert not tree.is_valid_bst()

    def test_valid_bst_detects_duplicate(self, tree):
        tree.root.right.left.key = 50
        assert not tree.is_valid_bst()

    def test_empty_tree_is_valid_and_balanced(self):
        t = OrderedTree()
        assert t.is_valid_bst()
        assert t.is_balanced()


# ═══════════════════════════════════════════════════════════════════
# Augmented Queries
# ═══════════════════════════════════════════════════════════════════

class TestAugmentedQueries:

    def test_kth_matches_inorder(self, rng):
        t = OrderedTree([rng.randint(0, 1000) for _ in range(150)])
        ordered = list(t.inorder())
        for k in range(1, t.size() + 1):
            assert t.kth_smallest(k) == ordered[k - 1]

    @pytest.mark.parametrize("k", [0, -1, 8, 2.0, True, "3"])
    def test_kth_out_of_range(self, tree, k):
        with pytest.raises(InvalidArgumentError):
            tree.kth_smallest(k)

    def test_kth_on_empty(self):
        with pytest.raises(InvalidArgumentError):
            OrderedTree().kth_smallest(1)

    def test_lca(self, tree):
        assert tree.lowest_common_ancestor(20, 80) == 50
        assert tree.lowest_common_ancestor(60, 80) == 70
        assert tree.lowest_common_ancestor(40, 20) == 30
        assert tree.lowest_common_ancestor(30, 20) == 30
        assert tree.lowest_common_ancestor(40, 40) == 40

    def test_lca_on_skewed(self, skewed):
        assert skewed.lowest_common_ancestor(40, 70) == 40

    def test_lca_absent_key(self, tree):
        before = list(tree.preorder())
        with pytest.raises(InvalidArgumentError, match="45"):
            tree.lowest_common_ancestor(20, 45)
        assert list(tree.preorder()) == before

    def test_lca_on_empty(self):
        with pytest.raises(InvalidArgumentError):
            OrderedTree().lowest_common_ancestor(1, 2)

    def test_range_sum(self, tree):
        assert tree.range_sum(0, 100) == 350
        assert tree.range_sum(45, 55) == 50
        assert tree.range_sum(20, 20) == 20
        assert tree.range_sum(81, 90) == 0
        assert tree.range_sum(70, 30) == 0

    def test_range_sum_matches_brute_force(self, rng):
        keys = [rng.randint(-500, 500) for _ in range(200)]
        t = OrderedTree(keys)
        for _ in range(50):
            low, high = sorted(rng.randint(-600, 600) for _ in range(2))
            expected = sum(k for k in set(keys) if low <= k <= high)
            assert t.range_sum(low, high) == expected

    def test_range_sum_float_bounds(self, tree):
        assert tree.range_sum(29.5, 40.5) == 70

    def test_range_sum_empty_tree(self):
        assert OrderedTree().range_sum(1, 10) == 0

    def test_range_sum_rejects_non_numeric_tree(self):
        t = OrderedTree(["a", "b"])
        with pytest.raises(InvalidArgumentError, match="NUMBER"):
            t.range_sum("a", "b")


# ═══════════════════════════════════════════════════════════════════
# Balanced Build
# ═══════════════════════════════════════════════════════════════════

class TestBalancedBuild:

    def test_from_sorted(self):
        t = OrderedTree.from_sorted(range(1, 8))
        assert list(t.preorder()) == [4, 2, 1, 3, 6, 5, 7]
        assert t.height() == 2
        assert t.is_balanced()

    def test_from_unsorted_with_duplicates(self):
        t = OrderedTree.from_sorted([3, 1, 2, 3, 1])
        assert t.size() == 3
        assert list(t) == [1, 2, 3]
        assert t.root.key == 2

    def test_build_balanced_replaces_contents(self, skewed):
        size = skewed.build_balanced([5, 15, 25])
        assert size == 3
        assert list(skewed) == [5, 15, 25]
        assert skewed.is_balanced()

    def test_build_balanced_large_has_minimal_height(self):
        t = OrderedTree.from_sorted(range(1023))
        assert t.height() == 9
        assert t.is_balanced()

    def test_build_balanced_bad_key_leaves_tree(self, tree):
        before = list(tree.preorder())
        with pytest.raises(InvalidArgumentError):
            tree.build_balanced([1, "two", 3])
        assert list(tree.preorder()) == before

    def test_build_balanced_empty(self, tree):
        assert tree.build_balanced([]) == 0
        assert tree.is_empty()


# ═══════════════════════════════════════════════════════════════════
# Invariants Under Random Mutation
# ═══════════════════════════════════════════════════════════════════

class TestRandomMutation:

    def test_invariants_hold(self, rng):
        t = OrderedTree()
        present = set()
        for _ in range(2000):
            k = rng.randint(0, 200)
            if rng.random() < 0.6:
                assert t.insert(k) == (k not in present)
                present.add(k)
            else:
                assert t.delete(k) == (k in present)
                present.discard(k)
            assert t.size() == len(present)
        assert_consistent(t)
        assert list(t.inorder()) == sorted(present)


# ═══════════════════════════════════════════════════════════════════
# Deep Chains
# ═══════════════════════════════════════════════════════════════════

DEEP = 5000


@pytest.fixture(scope="module")
def chain():
    """Ascending chain 0 → 1 → ... → DEEP-1. Shared: read-only tests only."""
    return OrderedTree(range(DEEP))


class TestDeepChain:

    def test_every_insert_path_builds_the_chain(self):
        by_insert = OrderedTree()
        for k in range(DEEP):
            assert by_insert.insert(k)
        by_iterative = OrderedTree()
        for k in range(DEEP):
            assert by_iterative.insert_iterative(k)
        by_many = OrderedTree()
        assert by_many.insert_many(range(DEEP)) == DEEP
        for t in (by_insert, by_iterative, by_many):
            assert t.height() == DEEP - 1
        assert not by_insert.insert(DEEP - 1)

    def test_shape_queries(self, chain):
        assert chain.height() == DEEP - 1
        assert chain.size() == chain.count_nodes() == DEEP
        assert chain.count_leaves() == 1
        assert chain.is_valid_bst()
        assert not chain.is_balanced()

    def test_search_and_extremes(self, chain):
        assert chain.search(DEEP - 1)
        assert chain.search_iterative(DEEP - 1)
        assert not chain.search(DEEP)
        assert DEEP // 2 in chain
        assert chain.find_min() == 0
        assert chain.find_max() == DEEP - 1

    def test_traversals(self, chain):
        assert list(chain.inorder()) == list(range(DEEP))
        assert list(chain.preorder()) == list(range(DEEP))
        assert list(chain.postorder()) == list(reversed(range(DEEP)))
        assert sum(1 for _ in chain.level_order()) == DEEP

    def test_augmented_queries(self, chain):
        assert chain.kth_smallest(DEEP) == DEEP - 1
        assert chain.lowest_common_ancestor(DEEP - 2, DEEP - 1) == DEEP - 2
        assert chain.range_sum(0, DEEP) == DEEP * (DEEP - 1) // 2
        assert chain.range_sum(DEEP - 3, DEEP - 1) == 3 * DEEP - 6

    def test_delete_deepest_and_middle(self):
        t = OrderedTree(range(DEEP))
        assert t.delete(DEEP - 1)
        assert t.delete(DEEP // 2)
        assert not t.delete(DEEP // 2)
        assert t.size() == DEEP - 2
        assert t.height() == DEEP - 3
        assert_consistent(t)

    def test_descending_chain(self):
        t = OrderedTree(reversed(range(DEEP)))
        assert t.height() == DEEP - 1
        assert t.is_valid_bst()
        assert t.delete(0)
        assert t.find_min() == 1

    def test_drain_chain(self):
        t = OrderedTree(range(DEEP))
        for k in range(DEEP):
            assert t.delete(k)
        assert t.is_empty()
        assert t.key_kind is None
