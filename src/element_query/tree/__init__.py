"""Element tree for element queries.

Key Components:
    Element: Tree node with attributes, owned children and a parent reference
    IndexOutOfRangeError: Raised by child index accessors and inserts
    CyclicTreeError: Raised when an attach would create a cycle
"""

from .element import CyclicTreeError, Element, IndexOutOfRangeError

__all__ = [
    "CyclicTreeError",
    "Element",
    "IndexOutOfRangeError",
]
