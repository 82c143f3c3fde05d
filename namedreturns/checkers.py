"""
namedreturns/checkers.py
════════════════════════

Checker framework and entry points.

Architecture
────────────

  ┌─────────────────────────────────────────────────────────┐
  │                   CheckerRunner                         │
  │     run(unit)            run_units(units, workers)      │
  │  ┌──────────────────────────────────────────────────┐   │
  │  │              NamedReturnsChecker                 │   │
  │  │  configure → collect_evidence → diagnose → report│   │
  │  └───────────────────────┬──────────────────────────┘   │
  │                          │                              │
  │  ┌───────────────────────▼──────────────────────────┐   │
  │  │  analysis.analyze_function (per FunctionUnit)    │   │
  │  └───────────────────────┬──────────────────────────┘   │
  │                          │                              │
  │  ┌───────────────────────▼──────────────────────────┐   │
  │  │  DiagnosticReporter (unit) → DiagnosticSink (run)│   │
  │  └──────────────────────────────────────────────────┘   │
  └─────────────────────────────────────────────────────────┘

A compilation unit is what the external front end hands over: its
files, the resolver tables, and the inspector built over them.  If the
inspector is missing the unit is not analyzable and the run fails with
``TraversalUnavailableError``; no partial findings are returned.

License: MIT
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, FrozenSet, List, Mapping, Optional, Sequence

from namedreturns.analysis import FunctionUnit, analyze_function
from namedreturns.ast_helper import Inspector
from namedreturns.config import ANALYZER_DOC, ANALYZER_NAME, AnalyzerConfig
from namedreturns.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticReporter,
    DiagnosticSink,
    UnitReport,
)
from namedreturns.errors import NamedReturnsError, TraversalUnavailableError
from namedreturns.go_ast import File, FuncDecl, FuncLit
from namedreturns.type_info import TypeInfo

_log = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — COMPILATION UNIT
# ═════════════════════════════════════════════════════════════════════════

@dataclass
class CompilationUnit:
    """
    Front-end output for one unit of analysis.

    name      : label used in logs and run results
    files     : parsed files
    info      : resolver tables (types, defs, uses)
    inspector : traversal facility; None when the front end could not
                provide one
    """
    name: str
    files: List[File] = field(default_factory=list)
    info: TypeInfo = field(default_factory=TypeInfo)
    inspector: Optional[Inspector] = None

    @classmethod
    def from_files(cls, name: str, files: Sequence[File],
                   info: Optional[TypeInfo] = None) -> "CompilationUnit":
        files = list(files)
        return cls(
            name=name,
            files=files,
            info=info if info is not None else TypeInfo(),
            inspector=Inspector(files),
        )


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — CHECKER BASE CLASS
# ═════════════════════════════════════════════════════════════════════════

@dataclass
class CheckerContext:
    """
    Per-unit context handed to each checker.

    unit     : the CompilationUnit under analysis
    config   : immutable run configuration
    inspector: the unit's inspector, resolved once
    stats    : mutable dict for timing / counting
    """
    unit: CompilationUnit
    config: AnalyzerConfig
    inspector: Inspector
    stats: Dict[str, Any] = field(default_factory=dict)


class Checker(ABC):
    """
    Lifecycle
    ─────────
      1. ``configure(ctx)``        — read configuration
      2. ``collect_evidence(ctx)`` — gather the nodes to examine
      3. ``diagnose(ctx)``         — turn them into diagnostics
      4. ``report(ctx)``           — return the final, ordered list
    """

    name: ClassVar[str] = "base-checker"
    description: ClassVar[str] = ""
    kinds: ClassVar[FrozenSet[DiagnosticKind]] = frozenset()

    def __init__(self) -> None:
        self._reporter = DiagnosticReporter()

    def configure(self, ctx: CheckerContext) -> None:
        pass

    @abstractmethod
    def collect_evidence(self, ctx: CheckerContext) -> None:
        ...

    @abstractmethod
    def diagnose(self, ctx: CheckerContext) -> None:
        ...

    def report(self, ctx: CheckerContext) -> List[Diagnostic]:
        return self._reporter.diagnostics

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} '{self.name}'>"


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — NAMED RETURNS CHECKER
# ═════════════════════════════════════════════════════════════════════════

class NamedReturnsChecker(Checker):
    """
    Requires every function result to be named, used by name in every
    non-bare return, and never re-declared in the body.

    A named ``error`` result that is set from a deferred closure is
    exempt from the usage and shadowing checks unless
    ``report-error-in-defer`` is on.
    """

    name: ClassVar[str] = ANALYZER_NAME
    description: ClassVar[str] = ANALYZER_DOC
    kinds: ClassVar[FrozenSet[DiagnosticKind]] = frozenset(DiagnosticKind)

    def __init__(self) -> None:
        super().__init__()
        self._functions: List[FunctionUnit] = []
        self._config = AnalyzerConfig()

    def configure(self, ctx: CheckerContext) -> None:
        self._config = ctx.config

    def collect_evidence(self, ctx: CheckerContext) -> None:
        def visit(node: Any) -> None:
            fn = FunctionUnit.from_node(node)
            if fn is not None:
                self._functions.append(fn)

        ctx.inspector.preorder([FuncDecl, FuncLit], visit)
        ctx.stats["functions"] = len(self._functions)

    def diagnose(self, ctx: CheckerContext) -> None:
        info = ctx.unit.info
        for fn in self._functions:
            self._reporter.extend(analyze_function(fn, info, self._config))


# ═════════════════════════════════════════════════════════════════════════
#  PART 4 — RUN RESULTS
# ═════════════════════════════════════════════════════════════════════════

@dataclass
class CheckerRunResults:
    """
    Aggregate results over one or more units.

    reports : one UnitReport per unit, in input order
    """
    reports: List[UnitReport] = field(default_factory=list)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        out: List[Diagnostic] = []
        for r in self.reports:
            out.extend(r.diagnostics)
        return out

    @property
    def failures(self) -> Dict[str, str]:
        return {r.unit_name: r.error for r in self.reports if r.error is not None}

    @property
    def total_count(self) -> int:
        return sum(len(r.diagnostics) for r in self.reports)

    def by_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]

    def by_file(self, filename: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.location.filename == filename]

    def counts_by_kind(self) -> Dict[str, int]:
        counts: Dict[str, int] = defaultdict(int)
        for d in self.diagnostics:
            counts[d.kind.value] += 1
        return dict(counts)

    def to_json_lines(self) -> str:
        return "\n".join(d.to_json_str() for d in self.diagnostics)

    def to_gcc_format(self) -> str:
        return "\n".join(d.to_gcc_format() for d in self.diagnostics)

    def summary(self) -> str:
        lines = [
            f"{ANALYZER_NAME}: {self.total_count} diagnostics "
            f"in {len(self.reports)} unit(s), {len(self.failures)} failed",
        ]
        for r in self.reports:
            status = f"error: {r.error}" if r.error else f"{len(r.diagnostics)} findings"
            lines.append(f"  {r.unit_name}: {status} ({r.elapsed_ms:.1f}ms)")
        return "\n".join(lines)


# ═════════════════════════════════════════════════════════════════════════
#  PART 5 — CHECKER RUNNER
# ═════════════════════════════════════════════════════════════════════════

class CheckerRunner:
    """
    Runs the named-returns checker over compilation units.

    Usage
    -----
    >>> runner = CheckerRunner({"report-error-in-defer": "true"})
    >>> diags = runner.run(unit)
    >>> results = runner.run_units([unit_a, unit_b], max_workers=4)
    >>> print(results.summary())
    """

    def __init__(self, options: Optional[Mapping[str, Any]] = None,
                 config: Optional[AnalyzerConfig] = None) -> None:
        self.config = config if config is not None else AnalyzerConfig.from_options(options)
        self.sink = DiagnosticSink()

    def run(self, unit: CompilationUnit) -> List[Diagnostic]:
        """
        Analyze one unit and return its diagnostics in source order.

        Raises TraversalUnavailableError when the unit has no inspector.
        """
        inspector = unit.inspector
        if not isinstance(inspector, Inspector):
            raise TraversalUnavailableError(unit.name)

        ctx = CheckerContext(unit=unit, config=self.config, inspector=inspector)
        checker = NamedReturnsChecker()

        t0 = time.monotonic()
        checker.configure(ctx)
        checker.collect_evidence(ctx)
        checker.diagnose(ctx)
        diags = checker.report(ctx)
        elapsed_ms = (time.monotonic() - t0) * 1000.0

        _log.debug(
            "%s: %d nodes, %d functions, %d diagnostics (%.1fms)",
            unit.name, len(inspector), ctx.stats.get("functions", 0), len(diags), elapsed_ms,
        )
        self.sink.publish(unit.name, diags)
        return diags

    def _run_one(self, unit: CompilationUnit) -> UnitReport:
        t0 = time.monotonic()
        try:
            diags = self.run(unit)
        except NamedReturnsError as exc:
            _log.warning("%s: analysis failed: %s", unit.name, exc)
            return UnitReport(
                unit_name=unit.name,
                elapsed_ms=(time.monotonic() - t0) * 1000.0,
                error=str(exc),
            )
        return UnitReport(
            unit_name=unit.name,
            diagnostics=diags,
            elapsed_ms=(time.monotonic() - t0) * 1000.0,
        )

    def run_units(self, units: Sequence[CompilationUnit],
                  max_workers: Optional[int] = None) -> CheckerRunResults:
        """
        Analyze several independent units, optionally in parallel.

        A unit that fails is recorded in ``failures``; the others still
        run.  Reports come back in input order.
        """
        units = list(units)
        if max_workers == 1 or len(units) <= 1:
            return CheckerRunResults(reports=[self._run_one(u) for u in units])
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            reports = list(pool.map(self._run_one, units))
        return CheckerRunResults(reports=reports)


# ═════════════════════════════════════════════════════════════════════════
#  PART 6 — ENTRY POINT
# ═════════════════════════════════════════════════════════════════════════

def run(unit: CompilationUnit, report_error_in_defer: bool = False) -> List[Diagnostic]:
    """
    Analyze ``unit`` and return its ordered diagnostics.

    ``report_error_in_defer`` disables the deferred-assignment exemption
    for named ``error`` results.
    """
    runner = CheckerRunner(config=AnalyzerConfig(report_error_in_defer=report_error_in_defer))
    return runner.run(unit)


__all__ = [
    "CompilationUnit",
    "Checker",
    "CheckerContext",
    "NamedReturnsChecker",
    "CheckerRunResults",
    "CheckerRunner",
    "run",
]
