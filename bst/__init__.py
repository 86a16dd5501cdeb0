"""
MiniTree Core
=============
In-memory ordered index: an unbalanced binary search tree over unique
scalar keys.

Components:
  - node: Node with left/right child slots (no parent pointer)
  - keys: key admission (NUMBER / STRING / DATE, NULL and NaN rejected)
  - ordered_tree: OrderedTree with mutation, traversal, introspection,
    rank/range/ancestor queries
  - errors: TreeError, EmptyTreeError, InvalidArgumentError
"""

from bst.errors import EmptyTreeError, InvalidArgumentError, TreeError
from bst.keys import KeyKind
from bst.node import Node
from bst.ordered_tree import UNBALANCED, OrderedTree
