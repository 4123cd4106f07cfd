"""Path expression compiler.

Turns a compact path expression such as ``//item[@id='3']/..`` into an
immutable :class:`CompiledPath`: a seed mode plus an ordered tuple of
:class:`PathStep` operators. Compilation never looks at a tree, so compiled
paths can be cached and shared freely.

Grammar, tried in this order at every position::

    /.. | ..          parent axis
    /.  | .           self axis (no operator)
    //                descendant-or-self axis
    *                 wildcard (no operator)
    name              tag test
    [@name]           attribute presence
    [@name='value']   attribute equality (double quotes also accepted)
    [name]            has a child with this tag
    /                 child axis
"""

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from element_query.shared import QueryConfig, QueryMetrics, get_logger

from .names import scan_name

_QUOTES = ("'", '"')


class SeedMode(Enum):
    """Initial node set a match starts from."""

    ROOT = auto()       # Root of the starting element's tree
    SELF = auto()       # The starting element itself
    CHILDREN = auto()   # Direct children of the starting element


class StepKind(Enum):
    """Token kinds of the path grammar."""

    PARENT = auto()
    SELF = auto()
    DESCENDANT_OR_SELF = auto()
    WILDCARD = auto()
    TAG = auto()
    ATTRIBUTE = auto()
    HAS_CHILD = auto()
    CHILD = auto()


# Tokens consumed without adding an operator to the pipeline
NO_OP_KINDS = frozenset({StepKind.SELF, StepKind.WILDCARD})


@dataclass(frozen=True)
class PathStep:
    """One pipeline operator and the literals captured for it."""

    kind: StepKind
    name: Optional[str] = None
    value: Optional[str] = None

    def __str__(self) -> str:
        if self.kind is StepKind.PARENT:
            return ".."
        if self.kind is StepKind.SELF:
            return "."
        if self.kind is StepKind.DESCENDANT_OR_SELF:
            return "//"
        if self.kind is StepKind.WILDCARD:
            return "*"
        if self.kind is StepKind.TAG:
            return str(self.name)
        if self.kind is StepKind.ATTRIBUTE:
            if self.value is None:
                return f"[@{self.name}]"
            return f"[@{self.name}='{self.value}']"
        if self.kind is StepKind.HAS_CHILD:
            return f"[{self.name}]"
        return "/"


@dataclass(frozen=True)
class CompiledPath:
    """Immutable result of compiling a path expression."""

    expression: str
    seed: SeedMode
    steps: Tuple[PathStep, ...]


class InvalidPathSyntaxError(ValueError):
    """Raised when part of a path expression matches no grammar rule."""

    def __init__(self, expression: str, position: int) -> None:
        self.expression = expression
        self.position = position
        self.remainder = expression[position:]
        super().__init__(
            f"Invalid path expression {expression!r}; "
            f"error at {self.remainder!r} (offset {position})"
        )


def select_seed_mode(expression: str) -> SeedMode:
    """Pick the seed mode from the first character of ``expression``."""
    if expression.startswith("/"):
        return SeedMode.ROOT
    if expression.startswith("."):
        return SeedMode.SELF
    return SeedMode.CHILDREN


def _scan_attribute_predicate(expression: str, pos: int) -> Optional[Tuple[PathStep, int]]:
    if not expression.startswith("[@", pos):
        return None
    name_start = pos + 2
    name_end = scan_name(expression, name_start)
    if name_end == name_start:
        return None
    name = expression[name_start:name_end]

    if expression.startswith("]", name_end):
        return PathStep(StepKind.ATTRIBUTE, name=name), name_end + 1

    quote_pos = name_end + 1
    if not expression.startswith("=", name_end) or quote_pos >= len(expression):
        return None
    quote = expression[quote_pos]
    if quote not in _QUOTES:
        return None
    close = expression.find(quote, quote_pos + 1)
    if close == -1 or not expression.startswith("]", close + 1):
        return None
    value = expression[quote_pos + 1:close]
    return PathStep(StepKind.ATTRIBUTE, name=name, value=value), close + 2


def _scan_child_predicate(expression: str, pos: int) -> Optional[Tuple[PathStep, int]]:
    if not expression.startswith("[", pos):
        return None
    name_end = scan_name(expression, pos + 1)
    if name_end == pos + 1 or not expression.startswith("]", name_end):
        return None
    return PathStep(StepKind.HAS_CHILD, name=expression[pos + 1:name_end]), name_end + 1


def _scan_step(expression: str, pos: int) -> Optional[Tuple[PathStep, int]]:
    """Match one grammar rule at ``pos``; return the step and the new offset."""
    # "..", "//" must win over the shorter "." and "/" rules
    if expression.startswith("/..", pos):
        return PathStep(StepKind.PARENT), pos + 3
    if expression.startswith("..", pos):
        return PathStep(StepKind.PARENT), pos + 2
    if expression.startswith("/.", pos):
        return PathStep(StepKind.SELF), pos + 2
    if expression.startswith(".", pos):
        return PathStep(StepKind.SELF), pos + 1
    if expression.startswith("//", pos):
        return PathStep(StepKind.DESCENDANT_OR_SELF), pos + 2
    if expression.startswith("*", pos):
        return PathStep(StepKind.WILDCARD), pos + 1

    name_end = scan_name(expression, pos)
    if name_end > pos:
        return PathStep(StepKind.TAG, name=expression[pos:name_end]), name_end

    scanned = _scan_attribute_predicate(expression, pos)
    if scanned is None:
        scanned = _scan_child_predicate(expression, pos)
    if scanned is not None:
        return scanned

    if expression.startswith("/", pos):
        return PathStep(StepKind.CHILD), pos + 1
    return None


def tokenize_path(expression: str) -> List[PathStep]:
    """Split ``expression`` into grammar tokens, no-op tokens included.

    Raises:
        InvalidPathSyntaxError: if some suffix matches no rule
    """
    tokens: List[PathStep] = []
    pos = 0
    while pos < len(expression):
        scanned = _scan_step(expression, pos)
        if scanned is None:
            raise InvalidPathSyntaxError(expression, pos)
        step, pos = scanned
        tokens.append(step)
    return tokens


def compile_path(expression: str) -> CompiledPath:
    """Compile ``expression`` without caching.

    Raises:
        TypeError: if ``expression`` is not a string
        InvalidPathSyntaxError: if the expression is malformed
    """
    if not isinstance(expression, str):
        raise TypeError("Path expression must be a string")

    steps = tuple(
        step for step in tokenize_path(expression) if step.kind not in NO_OP_KINDS
    )
    return CompiledPath(
        expression=expression,
        seed=select_seed_mode(expression),
        steps=steps,
    )


class PathCompiler:
    """Compiler front end with a least-recently-used cache of compiled paths.

    Examples:
        >>> compiler = PathCompiler()
        >>> path = compiler.compile("//item[@id]")
        >>> compiler.compile("//item[@id]") is path
        True
    """

    def __init__(
        self,
        config: Optional[QueryConfig] = None,
        correlation_id: Optional[str] = None,
        metrics: Optional[QueryMetrics] = None,
    ) -> None:
        """Initialize the compiler.

        Args:
            config: Query configuration controlling the cache
            correlation_id: Optional correlation ID for log records
            metrics: Shared metrics object, a fresh one is created if omitted
        """
        self.config = config or QueryConfig()
        self.correlation_id = correlation_id
        self.metrics = metrics if metrics is not None else QueryMetrics()
        self.logger = get_logger(__name__, correlation_id, "path_compiler")
        self._cache: "OrderedDict[str, CompiledPath]" = OrderedDict()

    @property
    def caching_enabled(self) -> bool:
        return self.config.enable_caching and self.config.cache_size_limit > 0

    def compile(self, expression: str) -> CompiledPath:
        """Compile ``expression``, reusing a cached result when available.

        Raises:
            TypeError: if ``expression`` is not a string
            InvalidPathSyntaxError: if the expression is malformed
        """
        if self.caching_enabled:
            cached = self._cache.get(expression)
            if cached is not None:
                self._cache.move_to_end(expression)
                if self.config.enable_metrics:
                    self.metrics.cache_hits += 1
                self.logger.debug(
                    "Using cached compiled path",
                    extra={"expression": expression}
                )
                return cached
            if self.config.enable_metrics:
                self.metrics.cache_misses += 1

        try:
            compiled = compile_path(expression)
        except InvalidPathSyntaxError as e:
            self.logger.warning(
                "Path expression rejected",
                extra={
                    "expression": e.expression,
                    "error_offset": e.position,
                    "remainder": e.remainder,
                }
            )
            raise

        if self.config.enable_metrics:
            self.metrics.compilations += 1
        self.logger.debug(
            "Compiled path expression",
            extra={
                "expression": expression,
                "seed_mode": compiled.seed.name,
                "step_count": len(compiled.steps),
            }
        )

        if self.caching_enabled:
            self._cache[expression] = compiled
            while len(self._cache) > self.config.cache_size_limit:
                self._cache.popitem(last=False)
        return compiled

    def get_cache_statistics(self) -> Dict[str, Any]:
        """Get cache occupancy and hit statistics."""
        return {
            "cache_size": len(self._cache),
            "cache_limit": self.config.cache_size_limit,
            "cache_enabled": self.caching_enabled,
            "cache_hits": self.metrics.cache_hits,
            "cache_misses": self.metrics.cache_misses,
            "cache_hit_rate": self.metrics.cache_hit_rate,
        }

    def clear_cache(self) -> None:
        """Clear the compiled path cache."""
        self._cache.clear()
