"""
MiniTree Ordered Tree
=====================
In-memory unbalanced binary search tree over unique scalar keys.

Invariants (hold after every public call):
  - For every node N: keys(N.left) < N.key < keys(N.right). Strict, so no duplicates.
  - size == number of nodes reachable from root.
  - root is None  <=>  size == 0.

Shape:
  - No rotations. Shape is a pure function of the insert/delete sequence.
  - Sorted insertion yields a linear chain (height == size - 1);
    median-first insertion (build_balanced) yields minimal height.

Depth:
  - No operation recurses on the Python stack. Descents are loops and whole-tree
    walks run over explicit stacks/queues, so a sorted-insert chain of any
    length is as usable as a balanced tree (only slower).
  - build_balanced recurses, but only log2(n) deep.

Concurrency: single-threaded. Callers must serialize mutation themselves.
"""

from collections import deque
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Union

from bst.errors import EmptyTreeError, InvalidArgumentError, TreeError
from bst.keys import KeyKind, admit_key, key_kind
from bst.node import Node


class _Unbalanced:
    """Marker returned by the balance walk once any subtree fails the check."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNBALANCED"


UNBALANCED = _Unbalanced()


class OrderedTree:
    """
    Unbalanced BST with rank, range and ancestor queries.

    Usage:
        tree = OrderedTree()
        for k in (50, 30, 70):
            tree.insert(k)
        list(tree.inorder())      # [30, 50, 70]
        tree.kth_smallest(2)      # 50
        tree.delete(50)           # True
    """

    def __init__(self, keys: Optional[Iterable[Any]] = None):
        self._root: Optional[Node] = None
        self._size: int = 0
        self._kind: Optional[KeyKind] = None
        if keys is not None:
            self.insert_many(keys)

    @classmethod
    def from_sorted(cls, keys: Iterable[Any]) -> 'OrderedTree':
        """Build a minimal-height tree by inserting medians first."""
        tree = cls()
        tree.build_balanced(keys)
        return tree

    @property
    def root(self) -> Optional[Node]:
        """Root node, for display helpers. Do not mutate."""
        return self._root

    @property
    def key_kind(self) -> Optional[KeyKind]:
        """Kind of keys held, or None while the tree is empty."""
        return self._kind

    # ─── Mutation ───────────────────────────────────────────────────

    def insert(self, key: Any) -> bool:
        """
        Descent insert. Returns True if a node was added,
        False if the key was already present (silent no-op).
        """
        key = self._admit(key)
        parent, node = self._descend(key)
        if node is not None:
            return False
        self._attach(parent, Node(key))
        self._grow(key)
        return True

    def insert_iterative(self, key: Any) -> bool:
        """Iterative-descent insert. Builds the same shape as insert()."""
        key = self._admit(key)
        if self._root is None:
            self._root = Node(key)
            self._grow(key)
            return True

        current = self._root
        while True:
            if key < current.key:
                if current.left is None:
                    current.left = Node(key)
                    break
                current = current.left
            elif key > current.key:
                if current.right is None:
                    current.right = Node(key)
                    break
                current = current.right
            else:
                return False

        self._grow(key)
        return True

    def insert_many(self, keys: Iterable[Any]) -> int:
        """
        Insert keys in iteration order. Returns how many were added.
        Each insert stands alone: a bad key raises after earlier keys landed.
        """
        added = 0
        for key in keys:
            if self.insert_iterative(key):
                added += 1
        return added

    def build_balanced(self, keys: Iterable[Any]) -> int:
        """
        Replace the contents with keys, inserted median-first so the
        result has minimal height. Duplicates collapse. Returns the new size.
        The tree is untouched if any key is rejected.
        """
        kind = None
        admitted = []
        for key in keys:
            key = admit_key(key, kind)
            kind = key_kind(key)
            admitted.append(key)
        ordered = sorted(set(admitted))

        self.clear()
        self._insert_median_first(ordered, 0, len(ordered) - 1)
        return self._size

    def _insert_median_first(self, ordered: list, start: int, end: int) -> None:
        # Depth is log2(len(ordered)), so plain recursion is fine here.
        if start > end:
            return
        mid = start + (end - start) // 2
        self.insert(ordered[mid])
        self._insert_median_first(ordered, start, mid - 1)
        self._insert_median_first(ordered, mid + 1, end)

    def delete(self, key: Any) -> bool:
        """
        Remove key. Returns False (tree unchanged) if it was absent.

        Cases for the removed node:
          - leaf        → slot cleared
          - one child   → slot takes the child
          - two children → key replaced by in-order successor, which is
                           then removed from the right subtree
        """
        key = self._admit(key)
        parent, node = self._descend(key)
        if node is None:
            return False

        if node.left is not None and node.right is not None:
            successor_parent, successor = node, node.right
            while successor.left is not None:
                successor_parent, successor = successor, successor.left
            node.key = successor.key
            # Successor has no left child, so this is a leaf or one-child removal.
            parent, node = successor_parent, successor

        child = node.left if node.left is not None else node.right
        self._replace_child(parent, node, child)

        self._size -= 1
        if self._size == 0:
            self._kind = None
        return True

    def clear(self) -> None:
        """Drop every key in O(1) by releasing the root."""
        self._root = None
        self._size = 0
        self._kind = None

    # ─── Search ─────────────────────────────────────────────────────

    def search(self, key: Any) -> bool:
        """Membership test through the shared descent used by insert/delete."""
        key = self._admit(key)
        return self._descend(key)[1] is not None

    def search_iterative(self, key: Any) -> bool:
        """Iterative membership test. Always agrees with search()."""
        key = self._admit(key)
        node = self._root
        while node is not None:
            if key == node.key:
                return True
            node = node.left if key < node.key else node.right
        return False

    def find_min(self) -> Any:
        if self._root is None:
            raise EmptyTreeError("find_min")
        return self._min_node(self._root).key

    def find_max(self) -> Any:
        if self._root is None:
            raise EmptyTreeError("find_max")
        node = self._root
        while node.right is not None:
            node = node.right
        return node.key

    @staticmethod
    def _min_node(node: Node) -> Node:
        while node.left is not None:
            node = node.left
        return node

    # ─── Traversal ──────────────────────────────────────────────────

    def inorder(self) -> Iterator[Any]:
        """Left, node, right. Strictly ascending."""
        for node in self._inorder_nodes():
            yield node.key

    def _inorder_nodes(self) -> Iterator[Node]:
        stack = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node
            node = node.right

    def preorder(self) -> Iterator[Any]:
        """
        Node, left, right. Inserting this sequence into an empty tree
        rebuilds the same shape.
        """
        if self._root is None:
            return
        stack = [self._root]
        while stack:
            node = stack.pop()
            yield node.key
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def postorder(self) -> Iterator[Any]:
        """Left, right, node. Children always come before their parent."""
        stack = []
        node = self._root
        last_yielded: Optional[Node] = None
        while stack or node is not None:
            if node is not None:
                stack.append(node)
                node = node.left
                continue
            top = stack[-1]
            if top.right is not None and top.right is not last_yielded:
                node = top.right
            else:
                yield top.key
                last_yielded = stack.pop()

    def level_order(self) -> Iterator[Any]:
        """Breadth-first, left to right within each depth."""
        if self._root is None:
            return
        frontier = deque([self._root])
        while frontier:
            node = frontier.popleft()
            yield node.key
            if node.left is not None:
                frontier.append(node.left)
            if node.right is not None:
                frontier.append(node.right)

    # ─── Shape Introspection ────────────────────────────────────────

    def height(self) -> int:
        """Longest root-to-leaf path in edges. Empty → -1, single node → 0."""
        deepest = -1
        stack = [(self._root, 0)] if self._root is not None else []
        while stack:
            node, depth = stack.pop()
            if depth > deepest:
                deepest = depth
            if node.left is not None:
                stack.append((node.left, depth + 1))
            if node.right is not None:
                stack.append((node.right, depth + 1))
        return deepest

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def count_nodes(self) -> int:
        """Full recount, independent of the size counter."""
        return sum(1 for _ in self._walk())

    def count_leaves(self) -> int:
        return sum(1 for node in self._walk() if node.is_leaf)

    def is_valid_bst(self) -> bool:
        """
        Re-check the ordering invariant from scratch. Each node is checked
        against the open interval (low, high) its subtree must fit in;
        None = unbounded.
        """
        stack = [(self._root, None, None)]
        while stack:
            node, low, high = stack.pop()
            if node is None:
                continue
            if low is not None and not node.key > low:
                return False
            if high is not None and not node.key < high:
                return False
            stack.append((node.left, low, node.key))
            stack.append((node.right, node.key, high))
        return True

    def is_balanced(self) -> bool:
        """Every node's subtree heights differ by at most 1. Single pass."""
        return self._balanced_height(self._root) is not UNBALANCED

    def _balanced_height(self, root: Optional[Node]) -> Union[int, _Unbalanced]:
        """
        Subtree height, or UNBALANCED as soon as any subtree fails.
        Post-order over an explicit stack; child heights are consumed by
        their parent, so the table holds at most one entry per pending node.
        """
        heights: Dict[Node, int] = {}
        stack = [(root, False)]
        while stack:
            node, expanded = stack.pop()
            if node is None:
                continue
            if not expanded:
                stack.append((node, True))
                stack.append((node.right, False))
                stack.append((node.left, False))
                continue
            left = heights.pop(node.left) if node.left is not None else -1
            right = heights.pop(node.right) if node.right is not None else -1
            if abs(left - right) > 1:
                return UNBALANCED
            heights[node] = 1 + max(left, right)
        return heights.get(root, -1)

    # ─── Augmented Queries ──────────────────────────────────────────

    def kth_smallest(self, k: int) -> Any:
        """1-indexed rank lookup. Stops the in-order walk at the k-th visit."""
        if isinstance(k, bool) or not isinstance(k, int) or not 1 <= k <= self._size:
            raise InvalidArgumentError(f"k={k!r} is outside [1, {self._size}]")
        for visited, node in enumerate(self._inorder_nodes(), start=1):
            if visited == k:
                return node.key
        raise TreeError(f"size counter {self._size} exceeds reachable nodes")

    def lowest_common_ancestor(self, a: Any, b: Any) -> Any:
        """
        Deepest key with both a and b in its subtree (a node counts as its
        own ancestor). Both keys must be present.
        """
        a = self._admit(a)
        b = self._admit(b)
        for probe in (a, b):
            if not self.search_iterative(probe):
                raise InvalidArgumentError(f"Key {probe!r} is not in the tree")

        node = self._root
        while True:
            if a < node.key and b < node.key:
                node = node.left
            elif a > node.key and b > node.key:
                node = node.right
            else:
                return node.key

    def range_sum(self, low: Any, high: Any) -> Any:
        """
        Sum of keys in the closed interval [low, high]. Subtrees that lie
        entirely outside the interval are never visited. low > high → 0.
        """
        if self._kind is not None and self._kind is not KeyKind.NUMBER:
            raise InvalidArgumentError(
                f"range_sum() needs NUMBER keys, tree holds {self._kind.value}"
            )
        low = admit_key(low, KeyKind.NUMBER)
        high = admit_key(high, KeyKind.NUMBER)
        if low > high:
            return 0

        total = 0
        stack = [self._root] if self._root is not None else []
        while stack:
            node = stack.pop()
            if low <= node.key <= high:
                total += node.key
            if node.key > low and node.left is not None:
                stack.append(node.left)
            if node.key < high and node.right is not None:
                stack.append(node.right)
        return total

    # ─── Helpers ────────────────────────────────────────────────────

    def _descend(self, key: Any) -> Tuple[Optional[Node], Optional[Node]]:
        """(parent, node) where node holds key, or (parent, None) at the empty slot."""
        parent = None
        node = self._root
        while node is not None and key != node.key:
            parent = node
            node = node.left if key < node.key else node.right
        return parent, node

    def _attach(self, parent: Optional[Node], child: Node) -> None:
        if parent is None:
            self._root = child
        elif child.key < parent.key:
            parent.left = child
        else:
            parent.right = child

    def _replace_child(self, parent: Optional[Node], old: Node,
                       new: Optional[Node]) -> None:
        if parent is None:
            self._root = new
        elif parent.left is old:
            parent.left = new
        else:
            parent.right = new

    def _walk(self) -> Iterator[Node]:
        """Every node once, in no particular order."""
        stack = [self._root] if self._root is not None else []
        while stack:
            node = stack.pop()
            yield node
            if node.left is not None:
                stack.append(node.left)
            if node.right is not None:
                stack.append(node.right)

    def _admit(self, key: Any) -> Any:
        return admit_key(key, self._kind)

    def _grow(self, key: Any) -> None:
        self._size += 1
        if self._kind is None:
            self._kind = key_kind(key)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: Any) -> bool:
        return self.search_iterative(key)

    def __iter__(self) -> Iterator[Any]:
        return self.inorder()

    def __repr__(self) -> str:
        kind = self._kind.value if self._kind is not None else None
        return f"OrderedTree(size={self._size}, kind={kind})"
