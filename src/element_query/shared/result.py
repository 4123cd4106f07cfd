"""Metrics objects for path compilation and matching."""

from dataclasses import dataclass


@dataclass
class QueryMetrics:
    """Counters collected by a path compiler and matcher pair."""

    compilations: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    matches: int = 0
    nodes_yielded: int = 0
    results_returned: int = 0
    total_match_time_ms: float = 0.0

    @property
    def cache_hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total_accesses = self.cache_hits + self.cache_misses
        if total_accesses == 0:
            return 0.0
        return self.cache_hits / total_accesses

    @property
    def average_match_time_ms(self) -> float:
        """Average wall time of one match."""
        if self.matches == 0:
            return 0.0
        return self.total_match_time_ms / self.matches

    def reset(self) -> None:
        """Zero every counter."""
        self.compilations = 0
        self.cache_hits = 0
        self.cache_misses = 0
        self.matches = 0
        self.nodes_yielded = 0
        self.results_returned = 0
        self.total_match_time_ms = 0.0
