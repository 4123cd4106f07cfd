"""Developer tools for element queries."""

from .profiling import (
    PhaseMeasurement,
    ProfilingReport,
    ProfilingSession,
    QueryProfiler,
)

__all__ = [
    "PhaseMeasurement",
    "ProfilingReport",
    "ProfilingSession",
    "QueryProfiler",
]
