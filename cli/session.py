"""
MiniTree Session
================
Per-shell state object: owns one OrderedTree and turns text commands into
tree calls.

Command language (case-insensitive, ';' separates commands on one line):
  insert K [K ...]    delete K [K ...]    search K    contains K
  min | max           inorder | preorder | postorder | levelorder
  height | size | count | leaves | empty | valid | balanced
  kth K               lca A B             range LOW HIGH
  build K [K ...]     clear               show

Key literals:
  42, -7, 3.5     → numbers
  'abc', "a b"    → strings (quotes stripped)
  d:2024-01-31    → dates
  abc             → bare words are strings (including nan, inf)
"""

import re
import shlex
from datetime import date
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from bst.ordered_tree import OrderedTree
from cli.renderer import draw_tree, format_value


class SessionError(Exception):
    """Command-level error (unknown command, bad arity, bad literal, closed session)."""
    pass


DATE_PREFIX = "d:"

# Decimal and exponent forms only; nan/inf/infinity stay bare-word strings.
NUMERIC_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# (keys_iterator_or_None, message, label)
CommandResult = Tuple[Optional[Iterator[Any]], str, Optional[str]]


def parse_value(token: str) -> Any:
    """Turn one command token into a key value."""
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"'):
        return token[1:-1]
    if token.lower().startswith(DATE_PREFIX):
        try:
            return date.fromisoformat(token[len(DATE_PREFIX):])
        except ValueError:
            raise SessionError(f"Invalid date literal: {token}")
    try:
        return int(token)
    except ValueError:
        pass
    if not NUMERIC_RE.match(token):
        return token
    return float(token)


def split_commands(text: str) -> List[str]:
    """Split on ';' outside of quotes. Empty segments are dropped."""
    commands = []
    current = []
    quote = None

    for ch in text:
        if quote is None and ch in ("'", '"'):
            quote = ch
        elif ch == quote:
            quote = None
        elif ch == ";" and quote is None:
            commands.append("".join(current).strip())
            current = []
            continue
        current.append(ch)

    commands.append("".join(current).strip())
    return [c for c in commands if c]


class TreeSession:
    """
    Drives one OrderedTree from text commands.

    Usage:
        with TreeSession() as session:
            session.execute("insert 50 30 70")
            keys, _, label = session.execute("inorder")
            print(label, list(keys))
    """

    def __init__(self, tree: Optional[OrderedTree] = None):
        self.tree = tree if tree is not None else OrderedTree()
        self._closed: bool = False

        # ── Statistics ──
        self.stats = {
            "commands_executed": 0,
            "keys_inserted": 0,
            "keys_deleted": 0,
            "errors": 0,
        }

        # name → (handler, min_args, max_args); max None = unbounded
        self._commands: Dict[str, Tuple[Callable[[List[Any]], CommandResult], int, Optional[int]]] = {
            "insert": (self._cmd_insert, 1, None),
            "delete": (self._cmd_delete, 1, None),
            "search": (self._cmd_search, 1, 1),
            "contains": (self._cmd_contains, 1, 1),
            "min": (self._cmd_min, 0, 0),
            "max": (self._cmd_max, 0, 0),
            "inorder": (self._traversal("inorder"), 0, 0),
            "preorder": (self._traversal("preorder"), 0, 0),
            "postorder": (self._traversal("postorder"), 0, 0),
            "levelorder": (self._traversal("level_order"), 0, 0),
            "height": (self._scalar("height"), 0, 0),
            "size": (self._scalar("size"), 0, 0),
            "count": (self._scalar("count_nodes"), 0, 0),
            "leaves": (self._scalar("count_leaves"), 0, 0),
            "empty": (self._scalar("is_empty"), 0, 0),
            "valid": (self._scalar("is_valid_bst"), 0, 0),
            "balanced": (self._scalar("is_balanced"), 0, 0),
            "kth": (self._cmd_kth, 1, 1),
            "lca": (self._cmd_lca, 2, 2),
            "range": (self._cmd_range, 2, 2),
            "build": (self._cmd_build, 0, None),
            "clear": (self._cmd_clear, 0, 0),
            "show": (self._cmd_show, 0, 0),
        }

    @property
    def command_names(self) -> List[str]:
        return sorted(self._commands)

    # ─── Execution ──────────────────────────────────────────────────

    def execute(self, command: str) -> CommandResult:
        """
        Execute one command.

        Returns: (keys_or_None, message, label)
          - traversals: (iterator, "", "inorder")
          - everything else: (None, "height = 2", None)
        """
        self._check_closed()
        self.stats["commands_executed"] += 1

        try:
            tokens = shlex.split(command, posix=False)
        except ValueError as e:
            self.stats["errors"] += 1
            raise SessionError(f"Cannot parse command: {e}")
        if not tokens:
            self.stats["errors"] += 1
            raise SessionError("Empty command")

        name = tokens[0].lower()
        entry = self._commands.get(name)
        if entry is None:
            self.stats["errors"] += 1
            raise SessionError(f"Unknown command '{tokens[0]}'. Type .help for commands.")

        handler, min_args, max_args = entry
        raw_args = tokens[1:]
        if len(raw_args) < min_args or (max_args is not None and len(raw_args) > max_args):
            self.stats["errors"] += 1
            raise SessionError(f"{name}: {self._arity_text(min_args, max_args)}, got {len(raw_args)}")

        try:
            args = [parse_value(t) for t in raw_args]
            return handler(args)
        except Exception:
            self.stats["errors"] += 1
            raise

    def execute_many(self, text: str) -> List[CommandResult]:
        """Execute every ';'-separated command in text. Stops at the first error."""
        return [self.execute(c) for c in split_commands(text)]

    # ─── Mutation Commands ──────────────────────────────────────────

    def _cmd_insert(self, args: List[Any]) -> CommandResult:
        added = 0
        for key in args:
            if self.tree.insert(key):
                added += 1
                self.stats["keys_inserted"] += 1
        message = f"Inserted {added} key(s)."
        if added < len(args):
            message += f" {len(args) - added} duplicate(s) ignored."
        return None, message, None

    def _cmd_delete(self, args: List[Any]) -> CommandResult:
        removed = 0
        for key in args:
            if self.tree.delete(key):
                removed += 1
                self.stats["keys_deleted"] += 1
        message = f"Deleted {removed} key(s)."
        if removed < len(args):
            message += f" {len(args) - removed} not found."
        return None, message, None

    def _cmd_build(self, args: List[Any]) -> CommandResult:
        dropped = self.tree.size()
        size = self.tree.build_balanced(args)
        self.stats["keys_deleted"] += dropped
        self.stats["keys_inserted"] += size
        return None, f"Built balanced tree with {size} key(s), height {self.tree.height()}.", None

    def _cmd_clear(self, args: List[Any]) -> CommandResult:
        dropped = self.tree.size()
        self.tree.clear()
        self.stats["keys_deleted"] += dropped
        return None, f"Cleared {dropped} key(s).", None

    # ─── Query Commands ─────────────────────────────────────────────

    def _cmd_search(self, args: List[Any]) -> CommandResult:
        return None, self._found_text(args[0], self.tree.search(args[0])), None

    def _cmd_contains(self, args: List[Any]) -> CommandResult:
        return None, self._found_text(args[0], self.tree.search_iterative(args[0])), None

    def _cmd_min(self, args: List[Any]) -> CommandResult:
        return None, f"min = {format_value(self.tree.find_min())}", None

    def _cmd_max(self, args: List[Any]) -> CommandResult:
        return None, f"max = {format_value(self.tree.find_max())}", None

    def _cmd_kth(self, args: List[Any]) -> CommandResult:
        k = args[0]
        return None, f"kth_smallest({format_value(k)}) = {format_value(self.tree.kth_smallest(k))}", None

    def _cmd_lca(self, args: List[Any]) -> CommandResult:
        a, b = args
        lca = self.tree.lowest_common_ancestor(a, b)
        return None, f"lca({format_value(a)}, {format_value(b)}) = {format_value(lca)}", None

    def _cmd_range(self, args: List[Any]) -> CommandResult:
        low, high = args
        total = self.tree.range_sum(low, high)
        return None, f"range_sum[{format_value(low)}, {format_value(high)}] = {format_value(total)}", None

    def _cmd_show(self, args: List[Any]) -> CommandResult:
        return None, draw_tree(self.tree.root), None

    def _traversal(self, method: str) -> Callable[[List[Any]], CommandResult]:
        label = method.replace("_", "")

        def run(args: List[Any]) -> CommandResult:
            return getattr(self.tree, method)(), "", label
        return run

    def _scalar(self, method: str) -> Callable[[List[Any]], CommandResult]:
        def run(args: List[Any]) -> CommandResult:
            value = getattr(self.tree, method)()
            return None, f"{method} = {format_value(value)}", None
        return run

    # ─── Internal ───────────────────────────────────────────────────

    @staticmethod
    def _found_text(key: Any, found: bool) -> str:
        return f"{format_value(key)} {'found' if found else 'not found'}"

    @staticmethod
    def _arity_text(min_args: int, max_args: Optional[int]) -> str:
        if max_args is None:
            return f"expected at least {min_args} argument(s)"
        if min_args == max_args:
            return f"expected {min_args} argument(s)"
        return f"expected {min_args}-{max_args} argument(s)"

    def _check_closed(self):
        if self._closed:
            raise SessionError("Session is closed")

    # ─── Lifecycle ──────────────────────────────────────────────────

    def close(self) -> None:
        """Close the session. Further execute() calls raise SessionError."""
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
