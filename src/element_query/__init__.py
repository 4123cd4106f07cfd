"""Element Query.

An in-memory element tree with a compact XPath-like query language.

Progressive API Disclosure:
- Level 1: Element.find_all() / find() / find_text() and the module-level
  functions of the same names
- Level 2: configure() and PathMatcher for caching, metrics and logging
- Level 3: compile_path() and match_path() for explicit pipelines
"""

__version__ = "0.1.0"
__author__ = "Element Query Team"

from .api import configure, find, find_all, find_text, get_default_matcher
from .path import (
    CompiledPath,
    InvalidPathSyntaxError,
    PathCompiler,
    PathMatcher,
    compile_path,
    match_path,
)
from .shared.config import ElementQueryConfig, GlobalConfig, QueryConfig
from .tree import CyclicTreeError, Element, IndexOutOfRangeError

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: tree and simple queries
    "Element",
    "find_all",
    "find",
    "find_text",

    # Level 2: configured matching
    "configure",
    "get_default_matcher",
    "PathMatcher",
    "ElementQueryConfig",
    "QueryConfig",
    "GlobalConfig",

    # Level 3: explicit compilation
    "CompiledPath",
    "PathCompiler",
    "compile_path",
    "match_path",

    # Errors
    "InvalidPathSyntaxError",
    "IndexOutOfRangeError",
    "CyclicTreeError",
]
