"""Path expression compiler and matcher.

Key Components:
    compile_path: Compile an expression into an immutable CompiledPath
    PathCompiler: Compiler with a least-recently-used cache
    match_path: Fold a CompiledPath over a tree
    PathMatcher: Configured compiler and matcher pair with statistics
"""

from .compiler import (
    NO_OP_KINDS,
    CompiledPath,
    InvalidPathSyntaxError,
    PathCompiler,
    PathStep,
    SeedMode,
    StepKind,
    compile_path,
    select_seed_mode,
    tokenize_path,
)
from .matcher import PathMatcher, apply_step, match_path, seed_nodes
from .names import is_name_char, is_name_start_char, is_valid_name, scan_name

__all__ = [
    "NO_OP_KINDS",
    "CompiledPath",
    "InvalidPathSyntaxError",
    "PathCompiler",
    "PathStep",
    "SeedMode",
    "StepKind",
    "compile_path",
    "select_seed_mode",
    "tokenize_path",
    "PathMatcher",
    "apply_step",
    "match_path",
    "seed_nodes",
    "is_name_char",
    "is_name_start_char",
    "is_valid_name",
    "scan_name",
]
