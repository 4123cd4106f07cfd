"""Path matcher.

Threads a :class:`CompiledPath` over a concrete tree. The working set is an
insertion-ordered mapping keyed by node identity, so every node appears once,
at the position where the fold first reached it.
"""

import time
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple, Union

from element_query.shared import ElementQueryConfig, QueryMetrics, get_logger

from .compiler import CompiledPath, PathCompiler, PathStep, SeedMode, StepKind

if TYPE_CHECKING:
    from element_query.tree import Element

PathLike = Union[str, CompiledPath]

MS_PER_SECOND = 1000


def seed_nodes(seed: SeedMode, node: "Element") -> Iterable["Element"]:
    """Initial node collection for ``seed`` relative to ``node``."""
    if seed is SeedMode.ROOT:
        return (node.root,)
    if seed is SeedMode.SELF:
        return (node,)
    return node.children


def apply_step(step: PathStep, node: "Element") -> Iterable["Element"]:
    """Map one node through one operator; absent structure yields nothing."""
    kind = step.kind
    if kind is StepKind.CHILD:
        return node.children
    if kind is StepKind.DESCENDANT_OR_SELF:
        return node.iter()
    if kind is StepKind.TAG:
        return (node,) if node.tag == step.name else ()
    if kind is StepKind.PARENT:
        parent = node.parent
        return (parent,) if parent is not None else ()
    if kind is StepKind.ATTRIBUTE:
        actual = node.get_attribute(step.name)
        if actual is None:
            return ()
        if step.value is None or actual == step.value:
            return (node,)
        return ()
    if kind is StepKind.HAS_CHILD:
        if any(child.tag == step.name for child in node.children):
            return (node,)
        return ()
    if kind in (StepKind.SELF, StepKind.WILDCARD):
        return (node,)
    raise ValueError(f"Unsupported step kind: {kind}")


def _fold(compiled: CompiledPath, node: "Element") -> Tuple[List["Element"], int]:
    current: Dict[int, "Element"] = {}
    for seed in seed_nodes(compiled.seed, node):
        current.setdefault(id(seed), seed)

    # Fan-out: every node a step produces, counted before deduplication
    yielded = 0
    for step in compiled.steps:
        following: Dict[int, "Element"] = {}
        for member in current.values():
            for result in apply_step(step, member):
                yielded += 1
                following.setdefault(id(result), result)
        current = following

    return list(current.values()), yielded


def match_path(compiled: CompiledPath, node: "Element") -> List["Element"]:
    """Run ``compiled`` from ``node`` and return matches in first-seen order."""
    results, _ = _fold(compiled, node)
    return results


class PathMatcher:
    """Configured entry point pairing a caching compiler with the matcher.

    Examples:
        >>> matcher = PathMatcher()
        >>> [e.tag for e in matcher.find_all(root, "//c")]
        ['c']
    """

    def __init__(
        self,
        config: Optional[ElementQueryConfig] = None,
        correlation_id: Optional[str] = None,
        compiler: Optional[PathCompiler] = None,
    ) -> None:
        """Initialize the matcher.

        Args:
            config: Configuration, defaults to ``ElementQueryConfig()``
            correlation_id: Optional correlation ID for log records
            compiler: Compiler to reuse; one is built from ``config`` if omitted
        """
        self.config = config or ElementQueryConfig()
        if not self.config.global_.enable_correlation_tracking:
            correlation_id = None
        self.correlation_id = correlation_id
        self.metrics = compiler.metrics if compiler is not None else QueryMetrics()
        self.compiler = compiler or PathCompiler(
            self.config.query, correlation_id, self.metrics
        )
        self.logger = get_logger(__name__, correlation_id, "path_matcher")

    def compile(self, path: PathLike) -> CompiledPath:
        """Return ``path`` compiled, passing compiled paths through untouched."""
        if isinstance(path, CompiledPath):
            return path
        return self.compiler.compile(path)

    def find_all(self, element: "Element", path: PathLike) -> List["Element"]:
        """All nodes selected by ``path`` starting at ``element``."""
        compiled = self.compile(path)
        start_time = time.time()
        results, yielded = _fold(compiled, element)
        elapsed_ms = (time.time() - start_time) * MS_PER_SECOND

        if self.config.query.enable_metrics:
            self.metrics.matches += 1
            self.metrics.nodes_yielded += yielded
            self.metrics.results_returned += len(results)
            self.metrics.total_match_time_ms += elapsed_ms

        self.logger.debug(
            "Path matched",
            extra={
                "expression": compiled.expression,
                "start_tag": element.tag,
                "nodes_yielded": yielded,
                "result_count": len(results),
                "match_time_ms": elapsed_ms,
            }
        )
        return results

    def find(self, element: "Element", path: PathLike) -> Optional["Element"]:
        """First node selected by ``path`` or ``None``."""
        results = self.find_all(element, path)
        return results[0] if results else None

    def find_text(
        self,
        element: "Element",
        path: PathLike,
        default: Optional[str] = None,
    ) -> Optional[str]:
        """Text of the first node selected by ``path``, else ``default``."""
        found = self.find(element, path)
        if found is None:
            return default
        return found.text

    def get_statistics(self) -> Dict[str, float]:
        """Get accumulated compile and match statistics."""
        return {
            "compilations": self.metrics.compilations,
            "cache_hits": self.metrics.cache_hits,
            "cache_misses": self.metrics.cache_misses,
            "cache_hit_rate": self.metrics.cache_hit_rate,
            "matches": self.metrics.matches,
            "nodes_yielded": self.metrics.nodes_yielded,
            "results_returned": self.metrics.results_returned,
            "average_match_time_ms": self.metrics.average_match_time_ms,
        }

    def reset_statistics(self) -> None:
        """Reset accumulated statistics."""
        self.metrics.reset()
