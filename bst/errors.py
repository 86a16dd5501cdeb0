"""
MiniTree Errors
===============
Error taxonomy for the ordered tree. All errors are caller-recoverable and
raised synchronously at the offending call; a failed call never leaves the
tree partially mutated.

Absence of a key is NOT an error: search() and delete() report it with False.
"""


class TreeError(Exception):
    """Base class for all ordered-tree errors."""
    pass


class EmptyTreeError(TreeError):
    """Operation needs at least one key but the tree is empty."""
    def __init__(self, operation: str):
        super().__init__(f"{operation}() on an empty tree")
        self.operation = operation


class InvalidArgumentError(TreeError, ValueError):
    """Argument outside the accepted domain (rank out of range, absent key, bad key)."""
    pass
