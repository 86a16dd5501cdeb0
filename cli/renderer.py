"""
MiniTree Result Renderer
========================
Display helper for tree results. The tree itself never formats output.

Features:
  - Streaming: keys are printed as the traversal yields them
  - Modes: list ([20, 30, 40]), column (one numbered key per line), raw (space separated)
  - Indented tree drawing with L/R branch labels
  - Key count + elapsed time footer
  - Error classification
"""

import sys
import time
from datetime import date
from typing import Any, Iterator, List, Optional, TextIO

from bst.node import Node


EMPTY_TREE_TEXT = "(empty tree)"


def format_value(value: Any) -> str:
    """Format a single key or query result for display."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        # Avoid unnecessary decimal places
        if value.is_integer():
            return str(int(value))
        return f"{value:.6g}"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return repr(value)
    return str(value)


def draw_tree(root: Optional[Node]) -> str:
    """
    Draw a subtree top-down, left child before right:

        50
        ├─ L: 30
        │  └─ L: 20
        └─ R: 70
    """
    if root is None:
        return EMPTY_TREE_TEXT

    lines = [format_value(root.key)]
    # (node, prefix, is_last, side)
    stack = []
    children = _labelled_children(root)
    for i in reversed(range(len(children))):
        stack.append((children[i][1], "", i == len(children) - 1, children[i][0]))

    while stack:
        node, prefix, is_last, side = stack.pop()
        branch = "└─ " if is_last else "├─ "
        lines.append(f"{prefix}{branch}{side}: {format_value(node.key)}")
        child_prefix = prefix + ("   " if is_last else "│  ")
        children = _labelled_children(node)
        for i in reversed(range(len(children))):
            stack.append((children[i][1], child_prefix, i == len(children) - 1, children[i][0]))

    return "\n".join(lines)


def _labelled_children(node: Node) -> List[tuple]:
    children = []
    if node.left is not None:
        children.append(("L", node.left))
    if node.right is not None:
        children.append(("R", node.right))
    return children


class Renderer:
    """
    Streaming key renderer with configurable display modes.
    """

    MODES = ("list", "column", "raw")

    def __init__(self, output: TextIO = None):
        self.output = output or sys.stdout
        self.mode: str = "list"
        self.show_timer: bool = True
        self.show_footer: bool = True

    # ─── Public API ─────────────────────────────────────────────────

    def render_keys(self, keys: Iterator[Any], label: Optional[str] = None) -> int:
        """
        Render a key sequence. Streams from the iterator.
        Returns number of keys rendered.
        """
        start = time.perf_counter()

        if self.mode == "raw":
            count = self._render_raw(keys)
        elif self.mode == "column":
            count = self._render_column(keys, label)
        else:
            count = self._render_list(keys, label)

        elapsed = time.perf_counter() - start

        if self.show_footer:
            if self.show_timer:
                self._print(f"{count} key(s) ({elapsed:.3f}s)")
            else:
                self._print(f"{count} key(s)")

        return count

    def render_tree(self, root: Optional[Node]):
        """Render the indented drawing of a tree rooted at root."""
        self._print(draw_tree(root))

    def render_message(self, message: str):
        """Render a non-sequence result (scalar query, mutation summary)."""
        if message:
            self._print(message)

    def render_error(self, error: Exception):
        """Render an error with classification prefix."""
        error_type = type(error).__name__
        prefix = self._classify_error(error_type)
        self._print(f"{prefix}: {error}")

    # ─── Modes ──────────────────────────────────────────────────────

    def _render_list(self, keys: Iterator[Any], label: Optional[str]) -> int:
        """Render keys as one bracketed line, written incrementally."""
        count = 0
        self.output.write(f"{label}: [" if label else "[")
        for key in keys:
            if count:
                self.output.write(", ")
            self.output.write(format_value(key))
            count += 1
        self.output.write("]\n")
        return count

    def _render_column(self, keys: Iterator[Any], label: Optional[str]) -> int:
        """Render one key per line with its 1-based position."""
        if label:
            self._print(f"*** {label} ***")
        count = 0
        for key in keys:
            count += 1
            self._print(f"  {count:>4}: {format_value(key)}")
        return count

    def _render_raw(self, keys: Iterator[Any]) -> int:
        """Render keys separated by spaces, no decoration."""
        parts = [format_value(k) for k in keys]
        self._print(" ".join(parts))
        return len(parts)

    # ─── Helpers ────────────────────────────────────────────────────

    def _classify_error(self, error_type: str) -> str:
        """Map error class name to user-friendly prefix."""
        mapping = {
            "EmptyTreeError": "EmptyTree",
            "InvalidArgumentError": "InvalidArgument",
            "TreeError": "TreeError",
            "SessionError": "CommandError",
            "ValueError": "InvalidArgument",
            "TypeError": "InvalidArgument",
            "KeyboardInterrupt": "Interrupted",
        }
        return mapping.get(error_type, f"Error[{error_type}]")

    def _print(self, text: str):
        """Print a line to the output stream."""
        print(text, file=self.output)
