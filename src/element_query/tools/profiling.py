"""Performance profiling tools for element queries.

Measures the compile and match phases of path queries separately, with
optional process memory tracking, and derives simple tuning recommendations.
"""

import json
import time
try:
    import psutil
    HAS_PSUTIL = True
except ImportError:
    psutil = None
    HAS_PSUTIL = False
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from element_query.path import PathMatcher, compile_path
from element_query.shared import ElementQueryConfig, get_logger

if TYPE_CHECKING:
    from element_query.tree import Element

# Thresholds used by get_optimization_recommendations
SLOW_COMPILE_MS = 1.0
SLOW_MATCH_MS = 50.0
HIGH_FANOUT_RATIO = 3.0
BOTTLENECK_SHARE = 0.8


@dataclass
class PhaseMeasurement:
    """Timing and memory for one phase (compile or match) of a query."""

    phase_name: str
    start_time: float
    end_time: float
    memory_start: int  # bytes
    memory_end: int  # bytes
    operations_count: int = 0

    @property
    def duration_ms(self) -> float:
        """Processing duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Memory usage change in bytes."""
        return self.memory_end - self.memory_start


@dataclass
class ProfilingSession:
    """Container for one profiled query."""

    session_id: str
    start_time: float
    end_time: float
    expression: str = ""
    tree_size: int = 0  # elements
    result_count: int = 0
    phases: List[PhaseMeasurement] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    def phase(self, name: str) -> Optional[PhaseMeasurement]:
        """First phase measurement called ``name``, if any."""
        return next((p for p in self.phases if p.phase_name == name), None)


@dataclass
class ProfilingReport:
    """Aggregate view over profiled sessions."""

    sessions: List[ProfilingSession]
    generation_time: float

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def average_duration_ms(self) -> float:
        """Average query duration across sessions."""
        if not self.sessions:
            return 0.0
        return sum(s.total_duration_ms for s in self.sessions) / len(self.sessions)

    def average_phase_ms(self, phase_name: str) -> float:
        """Average duration of ``phase_name`` over the sessions that ran it."""
        durations = [
            p.duration_ms
            for s in self.sessions
            for p in s.phases
            if p.phase_name == phase_name
        ]
        if not durations:
            return 0.0
        return sum(durations) / len(durations)


class PhaseProfiler:
    """Context manager measuring one phase inside a session."""

    def __init__(self, profiler: "QueryProfiler", session: ProfilingSession, phase_name: str):
        self.profiler = profiler
        self.session = session
        self.phase_name = phase_name
        self.measurement: Optional[PhaseMeasurement] = None

    def __enter__(self) -> PhaseMeasurement:
        self.measurement = PhaseMeasurement(
            phase_name=self.phase_name,
            start_time=time.time(),
            end_time=0.0,
            memory_start=self.profiler.current_memory(),
            memory_end=0,
        )
        return self.measurement

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.measurement is None:
            return
        self.measurement.end_time = time.time()
        self.measurement.memory_end = self.profiler.current_memory()
        self.profiler.add_phase_measurement(self.session, self.measurement)


class QueryProfiler:
    """Profiler for path compilation and matching.

    Examples:
        >>> profiler = QueryProfiler()
        >>> session = profiler.profile_query("items", root, "//item[@id]")
        >>> session.result_count
        3
        >>> profiler.get_optimization_recommendations(profiler.generate_report())
        ['Query performance appears optimal based on current analysis']
    """

    def __init__(
        self,
        config: Optional[ElementQueryConfig] = None,
        enable_memory_tracking: bool = True,
    ) -> None:
        """Initialize query profiler.

        Args:
            config: Configuration for the matcher used by ``profile_query``
            enable_memory_tracking: Track RSS memory when psutil is installed
        """
        self.enable_memory_tracking = enable_memory_tracking and HAS_PSUTIL
        self.matcher = PathMatcher(config)
        self.sessions: List[ProfilingSession] = []
        self.logger = get_logger(__name__, None, "query_profiler")

    def current_memory(self) -> int:
        """Resident set size of this process in bytes, or 0 when untracked."""
        if not self.enable_memory_tracking:
            return 0
        return int(psutil.Process().memory_info().rss)

    def start_session(self, session_id: str, expression: str = "", tree_size: int = 0) -> ProfilingSession:
        """Start a new profiling session."""
        session = ProfilingSession(
            session_id=session_id,
            start_time=time.time(),
            end_time=0.0,
            expression=expression,
            tree_size=tree_size,
        )
        self.logger.debug(
            "Started profiling session",
            extra={
                "session_id": session_id,
                "expression": expression,
                "memory_tracking": self.enable_memory_tracking,
            }
        )
        return session

    def end_session(self, session: ProfilingSession) -> None:
        """End a profiling session and store results."""
        session.end_time = time.time()
        self.sessions.append(session)
        self.logger.info(
            "Ended profiling session",
            extra={
                "session_id": session.session_id,
                "duration_ms": session.total_duration_ms,
                "result_count": session.result_count,
            }
        )

    def profile_phase(self, session: ProfilingSession, phase_name: str) -> PhaseProfiler:
        """Context manager measuring ``phase_name`` within ``session``."""
        return PhaseProfiler(self, session, phase_name)

    def add_phase_measurement(self, session: ProfilingSession, measurement: PhaseMeasurement) -> None:
        session.phases.append(measurement)

    def profile_query(self, session_id: str, element: "Element", expression: str) -> ProfilingSession:
        """Compile and run ``expression`` from ``element``, measuring each phase.

        Compilation bypasses the matcher's cache so the compile phase always
        measures real work.
        """
        tree_size = sum(1 for _ in element.root.iter())
        session = self.start_session(session_id, expression, tree_size)

        with self.profile_phase(session, "compile") as compile_phase:
            compiled = compile_path(expression)
            compile_phase.operations_count = len(compiled.steps)

        with self.profile_phase(session, "match") as match_phase:
            yielded_before = self.matcher.metrics.nodes_yielded
            results = self.matcher.find_all(element, compiled)
            match_phase.operations_count = self.matcher.metrics.nodes_yielded - yielded_before

        session.result_count = len(results)
        self.end_session(session)
        return session

    def generate_report(self) -> ProfilingReport:
        """Generate a report over all stored sessions."""
        return ProfilingReport(sessions=self.sessions.copy(), generation_time=time.time())

    def save_report(self, report: ProfilingReport, output_path: Path) -> None:
        """Save a report as JSON."""
        report_data = {
            "generation_time": report.generation_time,
            "summary": {
                "session_count": report.session_count,
                "average_duration_ms": report.average_duration_ms,
                "average_compile_ms": report.average_phase_ms("compile"),
                "average_match_ms": report.average_phase_ms("match"),
            },
            "sessions": [
                {
                    "session_id": session.session_id,
                    "expression": session.expression,
                    "tree_size": session.tree_size,
                    "result_count": session.result_count,
                    "total_duration_ms": session.total_duration_ms,
                    "metadata": session.metadata,
                    "phases": [
                        {
                            "phase_name": phase.phase_name,
                            "duration_ms": phase.duration_ms,
                            "memory_delta": phase.memory_delta,
                            "operations_count": phase.operations_count,
                        }
                        for phase in session.phases
                    ],
                }
                for session in report.sessions
            ],
        }

        output_path.write_text(json.dumps(report_data, indent=2))

        self.logger.info(
            "Saved profiling report",
            extra={"output_path": str(output_path), "session_count": report.session_count}
        )

    def get_optimization_recommendations(self, report: ProfilingReport) -> List[str]:
        """Derive tuning advice from a report."""
        if not report.sessions:
            return ["No profiling data available for analysis"]

        recommendations = []

        if report.average_phase_ms("compile") > SLOW_COMPILE_MS:
            recommendations.append(
                "Compilation is noticeable. Enable the compiled path cache or "
                "precompile frequently used expressions with compile_path()"
            )

        if report.average_phase_ms("match") > SLOW_MATCH_MS:
            recommendations.append(
                "Matching is slow. Start queries from a closer element instead of "
                "the document root"
            )

        for session in report.sessions:
            match_phase = session.phase("match")
            if (
                match_phase is not None
                and session.tree_size > 0
                and match_phase.operations_count > session.tree_size * HIGH_FANOUT_RATIO
            ):
                recommendations.append(
                    f"Query {session.expression!r} produces far more intermediate nodes "
                    f"than the tree holds because descendant steps rescan nested subtrees. "
                    f"Avoid chaining several '//' steps"
                )

        for session in report.sessions:
            compile_phase = session.phase("compile")
            if (
                compile_phase is not None
                and session.total_duration_ms > 0
                and compile_phase.duration_ms > session.total_duration_ms * BOTTLENECK_SHARE
                and compile_phase.duration_ms > SLOW_COMPILE_MS
            ):
                recommendations.append(
                    f"Compilation dominates query {session.expression!r}. "
                    f"Reuse the CompiledPath across calls"
                )
                break

        if not recommendations:
            recommendations.append("Query performance appears optimal based on current analysis")

        return recommendations

    def clear_sessions(self) -> None:
        """Clear all stored profiling sessions."""
        session_count = len(self.sessions)
        self.sessions.clear()
        self.logger.info("Cleared profiling sessions", extra={"cleared_count": session_count})
