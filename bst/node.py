"""
MiniTree Node
=============
One key plus two child slots. Each node is owned by exactly one slot
(a parent's left/right or the tree's root); there is no parent pointer.
"""

from typing import Any, Optional


class Node:
    __slots__ = ('key', 'left', 'right')

    def __init__(self, key: Any):
        self.key = key
        self.left: Optional['Node'] = None
        self.right: Optional['Node'] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self) -> str:
        return f"Node({self.key!r})"
