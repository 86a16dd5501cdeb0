"""
MiniTree Demo
=============
Guided walkthrough of every tree operation, printed section by section.
Run with: python main.py --demo
"""

from typing import TextIO

from bst.errors import EmptyTreeError
from bst.ordered_tree import OrderedTree
from cli.renderer import Renderer, format_value


DEMO_KEYS = (50, 30, 70, 20, 40, 60, 80)
BALANCED_KEYS = (50, 25, 75, 12, 37, 62, 87)
SORTED_KEYS = (10, 20, 30, 40, 50, 60, 70)


class Demo:
    """Prints numbered demo sections through a Renderer."""

    def __init__(self, output: TextIO = None):
        self.renderer = Renderer(output)
        self.renderer.show_footer = False
        self._section = 0

    def run(self):
        self._line("=== ORDERED TREE DEMO ===")
        tree = OrderedTree()

        self._header("INSERTION")
        self._line("Inserting keys: " + " ".join(str(k) for k in DEMO_KEYS))
        tree.insert_many(DEMO_KEYS)
        self.renderer.render_tree(tree.root)
        self._show("Size", tree.size())

        self._header("TRAVERSALS")
        self.renderer.render_keys(tree.inorder(), "inorder")
        self.renderer.render_keys(tree.preorder(), "preorder")
        self.renderer.render_keys(tree.postorder(), "postorder")
        self.renderer.render_keys(tree.level_order(), "levelorder")

        self._header("SEARCH")
        self._show("Search 40", tree.search(40))
        self._show("Search 100", tree.search(100))
        self._show("Search 20 (iterative)", tree.search_iterative(20))

        self._header("MIN / MAX")
        self._show("Minimum", tree.find_min())
        self._show("Maximum", tree.find_max())

        self._header("TREE PROPERTIES")
        self._show_properties(tree)
        self._show("Total nodes", tree.count_nodes())
        self._show("Leaf nodes", tree.count_leaves())
        self._show("Is valid BST", tree.is_valid_bst())

        self._header("AUGMENTED QUERIES")
        self._show("3rd smallest", tree.kth_smallest(3))
        self._show("5th smallest", tree.kth_smallest(5))
        self._show("LCA of 20 and 40", tree.lowest_common_ancestor(20, 40))
        self._show("LCA of 20 and 80", tree.lowest_common_ancestor(20, 80))
        self._show("Range sum [30, 70]", tree.range_sum(30, 70))

        self._header("DELETION")
        for key, case in ((20, "leaf"), (30, "one child"), (50, "two children")):
            self._line(f"Deleting {case} ({key}):")
            tree.delete(key)
            self.renderer.render_tree(tree.root)
            self.renderer.render_keys(tree.inorder(), "inorder")

        self._header("BALANCED VS SKEWED")
        balanced = OrderedTree(BALANCED_KEYS)
        self._line("Median-first insertion:")
        self.renderer.render_tree(balanced.root)
        self._show_properties(balanced)
        skewed = OrderedTree(SORTED_KEYS)
        self._line("Ascending insertion:")
        self.renderer.render_tree(skewed.root)
        self._show_properties(skewed)

        self._header("EDGE CASES")
        empty = OrderedTree()
        self._show("Empty tree is empty", empty.is_empty())
        self._show("Empty tree height", empty.height())
        try:
            empty.find_min()
        except EmptyTreeError as e:
            self.renderer.render_error(e)
        single = OrderedTree([42])
        self._line("Single node tree:")
        self.renderer.render_tree(single.root)
        self._show_properties(single)

        self._header("DUPLICATES")
        dup = OrderedTree()
        for key in (50, 30, 50):
            dup.insert(key)
        self._line("After inserting 50, 30, 50:")
        self.renderer.render_tree(dup.root)
        self._show("Size (duplicate not added)", dup.size())

        self._header("BALANCED BUILD FROM SORTED KEYS")
        rebuilt = OrderedTree.from_sorted(SORTED_KEYS)
        self.renderer.render_tree(rebuilt.root)
        self._show_properties(rebuilt)

        self._line("")
        self._line("=== DEMO COMPLETED ===")

    # ─── Helpers ────────────────────────────────────────────────────

    def _header(self, title: str):
        self._section += 1
        self._line("")
        self._line(f"{self._section}. {title}")
        self._line("-" * 50)

    def _show(self, label: str, value):
        self._line(f"{label}: {format_value(value)}")

    def _show_properties(self, tree: OrderedTree):
        self._show("Height", tree.height())
        self._show("Is balanced", tree.is_balanced())

    def _line(self, text: str):
        print(text, file=self.renderer.output)


def run_demo(output: TextIO = None):
    Demo(output).run()
