"""
MiniTree Interactive REPL
=========================
Interactive command-line shell with tree> prompt.

Features:
  - One or more ';'-separated commands per line
  - Meta-commands (dot-prefixed)
  - Ctrl+C: cancel current input OR interrupt a running traversal
  - Ctrl+D/EOF: exit
  - Persistent readline history (~/.minitree_history)
  - Error classification and display
"""

import os
import sys
from typing import Optional

from bst.ordered_tree import OrderedTree
from cli.renderer import Renderer
from cli.session import TreeSession, split_commands


# ─── History ────────────────────────────────────────────────────────
HISTORY_FILE = os.path.expanduser("~/.minitree_history")
HISTORY_MAX = 1000

try:
    import readline
    _HAS_READLINE = True
except ImportError:
    try:
        import pyreadline3 as readline
        _HAS_READLINE = True
    except ImportError:
        _HAS_READLINE = False


def _load_history():
    if _HAS_READLINE and os.path.exists(HISTORY_FILE):
        try:
            readline.read_history_file(HISTORY_FILE)
        except OSError:
            pass


def _save_history():
    if _HAS_READLINE:
        try:
            readline.set_history_length(HISTORY_MAX)
            readline.write_history_file(HISTORY_FILE)
        except OSError:
            pass


# ─── REPL ───────────────────────────────────────────────────────────

class REPL:
    """
    Interactive MiniTree shell.

    Usage:
        repl = REPL()
        repl.run()
    """

    PROMPT = "tree> "

    def __init__(self, tree: Optional[OrderedTree] = None, renderer: Optional[Renderer] = None):
        self.session = TreeSession(tree)
        self.renderer = renderer or Renderer()
        self._running = False

    def run(self):
        """Main REPL loop."""
        _load_history()
        self._running = True

        print("MiniTree v1.0.0")
        print('Type ".help" for usage hints.')
        print()

        try:
            while self._running:
                try:
                    line = input(self.PROMPT)
                except KeyboardInterrupt:
                    # Ctrl+C: cancel current input
                    print()
                    continue
                except EOFError:
                    # Ctrl+D: exit
                    print()
                    break

                self.handle_line(line)
        finally:
            _save_history()
            self._shutdown()

    def handle_line(self, line: str):
        """Dispatch one input line: meta-command or ';'-separated commands."""
        stripped = line.strip()
        if not stripped:
            return
        if stripped.startswith("."):
            self._handle_meta_command(stripped)
            return
        for command in split_commands(stripped):
            self._execute_command(command)

    # ─── Command Execution ──────────────────────────────────────────

    def _execute_command(self, command: str):
        """Execute a single command with error handling."""
        try:
            keys, message, label = self.session.execute(command)
            if keys is not None:
                try:
                    self.renderer.render_keys(keys, label)
                except KeyboardInterrupt:
                    print("\nTraversal interrupted.")
            else:
                self.renderer.render_message(message)
        except KeyboardInterrupt:
            print("\nCommand interrupted.")
        except Exception as e:
            self.renderer.render_error(e)

    # ─── Meta-Commands ──────────────────────────────────────────────

    def _handle_meta_command(self, line: str):
        """Handle dot-prefixed meta-commands."""
        parts = line.split(None, 1)
        cmd = parts[0].lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        if cmd in (".quit", ".exit", ".q"):
            self._running = False
        elif cmd == ".help":
            self._cmd_help()
        elif cmd == ".show":
            self.renderer.render_tree(self.session.tree.root)
        elif cmd == ".mode":
            self._cmd_mode(arg)
        elif cmd == ".timer":
            self._cmd_timer(arg)
        elif cmd == ".stats":
            self._cmd_stats()
        else:
            print(f"Unknown command: {cmd}. Type .help for available commands.")

    def _cmd_help(self):
        print("""MiniTree Commands:
  .help                Show this help
  .show                Draw the tree
  .mode list|column|raw  Set traversal output mode (default: list)
  .timer on|off        Toggle traversal timing display
  .stats               Show session statistics
  .quit                Exit (aliases: .exit, .q)

Tree Commands:
  insert K [K ...]     Insert keys (duplicates ignored)
  delete K [K ...]     Delete keys
  search K | contains K    Recursive / iterative lookup
  min | max            Smallest / largest key
  inorder | preorder | postorder | levelorder
  height | size | count | leaves | empty | valid | balanced
  kth K                K-th smallest key (1-based)
  lca A B              Lowest common ancestor of A and B
  range LOW HIGH       Sum of keys in [LOW, HIGH]
  build K [K ...]      Replace tree with a balanced build of the keys
  clear                Remove every key
  show                 Draw the tree

Tips:
  - Separate several commands with ;
  - Quote strings ('abc'); dates are written d:2024-01-31
  - Ctrl+C cancels current input or running traversal
  - Ctrl+D exits the shell""")

    def _cmd_mode(self, arg: str):
        valid = Renderer.MODES
        if arg.lower() in valid:
            self.renderer.mode = arg.lower()
            print(f"Output mode: {arg.lower()}")
        else:
            print(f"Usage: .mode {{{' | '.join(valid)}}}")
            print(f"Current: {self.renderer.mode}")

    def _cmd_timer(self, arg: str):
        if arg.lower() in ("on", "1", "true"):
            self.renderer.show_timer = True
            print("Timer ON")
        elif arg.lower() in ("off", "0", "false"):
            self.renderer.show_timer = False
            print("Timer OFF")
        else:
            print(f"Timer is {'ON' if self.renderer.show_timer else 'OFF'}")

    def _cmd_stats(self):
        s = self.session.stats
        tree = self.session.tree
        print("Session Statistics:")
        print(f"  Commands executed: {s['commands_executed']}")
        print(f"  Keys inserted:     {s['keys_inserted']}")
        print(f"  Keys deleted:      {s['keys_deleted']}")
        print(f"  Errors:            {s['errors']}")
        print(f"  Tree size:         {tree.size()}")
        kind = tree.key_kind.value if tree.key_kind is not None else "-"
        print(f"  Key kind:          {kind}")

    # ─── Helpers ────────────────────────────────────────────────────

    def _shutdown(self):
        self.session.close()
        print("Goodbye.")
