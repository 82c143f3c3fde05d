"""
namedreturns/diagnostics.py
═══════════════════════════

Diagnostic model and reporter sinks.

    ┌──────────────────────────────────────────────────────────────┐
    │  DiagnosticKind      unnamed-return, placeholder-return-name │
    │                      return-mismatch, shadowed-return        │
    │  Diagnostic          frozen finding: kind, message, location │
    │  DiagnosticReporter  per-unit list, source-ordered output    │
    │  DiagnosticSink      lock-guarded store shared across units  │
    └──────────────────────────────────────────────────────────────┘

Message text is part of the external contract: downstream tooling
matches on it (suppression comments, expected-output files), so the
templates below only ever grow at the end.

License: MIT
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from namedreturns.config import ANALYZER_NAME
from namedreturns.go_ast import Position, go_quote


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — KINDS, SEVERITY, TEMPLATES
# ═════════════════════════════════════════════════════════════════════════

class DiagnosticKind(Enum):
    UNNAMED_RETURN = "unnamed-return"
    PLACEHOLDER_RETURN_NAME = "placeholder-return-name"
    RETURN_MISMATCH = "return-mismatch"
    SHADOWED_RETURN = "shadowed-return"


class DiagnosticSeverity(Enum):
    ERROR = "error"
    WARNING = "warning"
    STYLE = "style"
    INFORMATION = "information"


class ShadowKind(Enum):
    """Which construct re-declared a named return."""
    LOCAL_DECLARATION = "local variable declaration"
    RANGE_VARIABLE = "range loop variable"
    FOR_VARIABLE = "for loop variable"


def unnamed_return_message(type_text: str) -> str:
    return (
        f"unnamed return with type {go_quote(type_text)} found"
        " - named returns are required"
    )


def placeholder_return_message(type_text: str) -> str:
    return (
        "underscore as a return variable name is unacceptable"
        f" for type {go_quote(type_text)}"
    )


def return_mismatch_message(name: str) -> str:
    return (
        f"named return variable {go_quote(name)} is declared"
        " but not used in return statement"
    )


def shadowed_return_message(name: str, shadow: ShadowKind) -> str:
    return f"named return variable {go_quote(name)} is shadowed by {shadow.value}"


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — DIAGNOSTIC
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Diagnostic:
    """
    A single positioned finding.

    Attributes
    ----------
    kind      : DiagnosticKind
    message   : human-readable text (stable contract)
    location  : Position the finding is reported at
    severity  : DiagnosticSeverity
    variable  : the named return the finding concerns, if any
    analyzer  : producing analyzer name
    """
    kind: DiagnosticKind
    message: str
    location: Position
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    variable: Optional[str] = None
    analyzer: str = ANALYZER_NAME

    def sort_key(self) -> Tuple[str, int, int]:
        loc = self.location
        return (loc.filename, loc.line, loc.column)

    def to_json(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "file": self.location.filename,
            "line": self.location.line,
            "column": self.location.column,
            "severity": self.severity.value,
            "message": self.message,
            "analyzer": self.analyzer,
            "kind": self.kind.value,
        }
        if self.variable is not None:
            result["variable"] = self.variable
        return result

    def to_json_str(self) -> str:
        """Single-line JSON string."""
        return json.dumps(self.to_json())

    def to_gcc_format(self) -> str:
        """GCC-style: file:line:col: severity: message [kind]."""
        return f"{self.location}: {self.severity.value}: {self.message} [{self.kind.value}]"

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — REPORTER
# ═════════════════════════════════════════════════════════════════════════

class DiagnosticReporter:
    """
    Collects the findings of one compilation unit.

    Checkers may emit out of source order (a nested function literal is
    visited after its parent has already reported at a later line);
    ``diagnostics`` returns a stable sort by position so output is
    reproducible, with ties keeping emission order.
    """

    def __init__(self) -> None:
        self._diagnostics: List[Diagnostic] = []

    def report(self, diag: Diagnostic) -> None:
        self._diagnostics.append(diag)

    def extend(self, diags: Iterable[Diagnostic]) -> None:
        self._diagnostics.extend(diags)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return sorted(self._diagnostics, key=Diagnostic.sort_key)

    def __len__(self) -> int:
        return len(self._diagnostics)


class DiagnosticSink:
    """
    Thread-safe store of per-unit diagnostic lists.

    Independent units may be analyzed concurrently; each one publishes
    its finished list under its own name; a later run of the same unit
    replaces the earlier list.  No ordering is kept across units, only
    within them.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_unit: Dict[str, List[Diagnostic]] = {}

    def publish(self, unit_name: str, diags: Iterable[Diagnostic]) -> None:
        items = list(diags)
        with self._lock:
            self._by_unit[unit_name] = items

    def get(self, unit_name: str) -> List[Diagnostic]:
        with self._lock:
            return list(self._by_unit.get(unit_name, []))

    def units(self) -> List[str]:
        with self._lock:
            return list(self._by_unit)

    def all(self) -> List[Diagnostic]:
        with self._lock:
            out: List[Diagnostic] = []
            for diags in self._by_unit.values():
                out.extend(diags)
            return out

    def __len__(self) -> int:
        with self._lock:
            return sum(len(d) for d in self._by_unit.values())


@dataclass
class UnitReport:
    """Finished result for one unit, as returned by the runner."""
    unit_name: str
    diagnostics: List[Diagnostic] = field(default_factory=list)
    elapsed_ms: float = 0.0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
