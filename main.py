"""
MiniTree — In-Memory Ordered Tree
=================================
Entry point for the tree shell.

Usage:
    python main.py [options]

Options:
    --help              Show help
    --execute CMDS      Execute ';'-separated tree commands and exit
    --file PATH         Execute a command script and exit
    --demo              Run the guided demo and exit

Default:
    Interactive REPL mode on an empty tree
"""

import os
import sys


def print_help():
    print("""
MiniTree — In-Memory Ordered Tree

Usage:
    python main.py                             Interactive REPL
    python main.py --execute "insert 5 3; inorder"   Execute commands
    python main.py --file script.tree          Execute command script
    python main.py --demo                      Guided demo

Options:
    --help          Show this help
    --execute CMDS  Execute commands and exit
    --file PATH     Execute command script and exit
    --demo          Run the demo and exit

Meta-Commands (REPL only):
    .help           Command reference
    .show           Draw the tree
    .mode M         Set output mode (list/column/raw)
    .timer on|off   Toggle timing
    .stats          Session statistics
    .quit           Exit
""")


def _run_commands(session, renderer, commands) -> bool:
    """Run commands in order. Returns False at the first failing command."""
    for command in commands:
        try:
            keys, message, label = session.execute(command)
            if keys is not None:
                renderer.render_keys(keys, label)
            else:
                renderer.render_message(message)
        except Exception as e:
            renderer.render_error(e)
            print(f"Error in command: {command[:80]}", file=sys.stderr)
            return False
    return True


def execute_single(text: str):
    """Execute ';'-separated commands against a fresh tree and exit."""
    from cli.session import TreeSession, split_commands
    from cli.renderer import Renderer

    renderer = Renderer()
    renderer.show_timer = False

    with TreeSession() as session:
        if not _run_commands(session, renderer, split_commands(text)):
            sys.exit(1)


def execute_script(script_path: str):
    """
    Execute a command script and exit.

    One or more ';'-separated commands per line. Lines starting with '#'
    are comments. Meta-commands are skipped. Errors stop execution.
    """
    from cli.session import TreeSession, split_commands
    from cli.renderer import Renderer

    if not os.path.isfile(script_path):
        print(f"Error: script file not found: {script_path}", file=sys.stderr)
        sys.exit(1)

    with open(script_path, "r", encoding="utf-8") as f:
        lines = f.read().splitlines()

    renderer = Renderer()
    renderer.show_timer = False  # Cleaner script output

    with TreeSession() as session:
        for line in lines:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if stripped.startswith("."):
                print(f"# meta-command not supported in script mode: {stripped}",
                      file=sys.stderr)
                continue
            if not _run_commands(session, renderer, split_commands(stripped)):
                sys.exit(1)


def main() -> None:
    """Parse CLI arguments and dispatch."""
    args = sys.argv[1:]

    if "--help" in args or "-h" in args:
        print_help()
        return

    execute_text = None
    script_file = None
    demo = False

    i = 0
    while i < len(args):
        if args[i] == "--execute" and i + 1 < len(args):
            execute_text = args[i + 1]
            i += 2
        elif args[i] == "--file" and i + 1 < len(args):
            script_file = args[i + 1]
            i += 2
        elif args[i] == "--demo":
            demo = True
            i += 1
        else:
            print(f"Unknown option: {args[i]}", file=sys.stderr)
            print_help()
            sys.exit(1)

    if demo:
        from cli.demo import run_demo
        run_demo()
    elif execute_text:
        execute_single(execute_text)
    elif script_file:
        execute_script(script_file)
    else:
        # Interactive REPL
        from cli.repl import REPL
        repl = REPL()
        repl.run()


if __name__ == "__main__":
    main()
