"""
namedreturns/analysis.py
════════════════════════

The named-returns rule, as pure functions over hand-inspectable inputs.

Pipeline per function unit
──────────────────────────

    FunctionUnit ──► classify_results ──► unnamed-return
         │                 │              placeholder-return-name
         │                 ▼
         │          candidate NamedReturns
         │                 │
         │                 ▼
         │          is_defer_exempt  (skipped when report_error_in_defer)
         │                 │
         │                 ▼
         └────────► tracked names ──► check_return_usage ──► return-mismatch
                                  └─► check_shadowing    ──► shadowed-return

Every function here takes a subtree plus plain values and returns a list
of Diagnostics; none keeps state between calls, so each can be tested
against a few hand-built nodes without a front end.

Precision
─────────
Return usage is identifier matching, not value flow: ``return x + 0``
for a named ``x`` is still a mismatch.  Shadowing ignores block depth:
a re-declaration anywhere in the body is reported, reachable or not.

License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from namedreturns.ast_helper import find_first, inspect, iter_preorder
from namedreturns.config import AnalyzerConfig
from namedreturns.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    ShadowKind,
    placeholder_return_message,
    return_mismatch_message,
    shadowed_return_message,
    unnamed_return_message,
)
from namedreturns.go_ast import (
    AssignStmt,
    BlockStmt,
    DeferStmt,
    FieldList,
    ForStmt,
    FuncDecl,
    FuncLit,
    Ident,
    Node,
    Position,
    RangeStmt,
    ReturnStmt,
    ValueSpec,
    expr_string,
)
from namedreturns.type_info import ERROR_TYPE, Object, TypeInfo, identical

_log = logging.getLogger(__name__)

PLACEHOLDER_NAME = "_"


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — FUNCTION UNITS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FunctionUnit:
    """
    One function declaration or function literal, reduced to what the
    checks read.  The two node shapes are told apart once, here.
    """
    node: Node
    results: Optional[FieldList]
    body: Optional[BlockStmt]
    pos: Position

    @classmethod
    def from_node(cls, node: Node) -> Optional["FunctionUnit"]:
        if isinstance(node, (FuncDecl, FuncLit)):
            ftype = node.type
            return cls(
                node=node,
                results=ftype.results if ftype is not None else None,
                body=node.body,
                pos=node.pos,
            )
        return None

    @property
    def name(self) -> str:
        if isinstance(self.node, FuncDecl) and self.node.name is not None:
            return self.node.name.name
        return "func literal"


@dataclass(frozen=True)
class NamedReturn:
    """A name bound in the result list, with the type expression it was declared with."""
    name: str
    ident: Ident
    type_expr: Optional[Node]


@dataclass
class Classification:
    candidates: List[NamedReturn] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — FUNCTION SIGNATURE CLASSIFIER
# ═════════════════════════════════════════════════════════════════════════

def classify_results(fn: FunctionUnit) -> Classification:
    """
    Split the result list into named candidates and report the rest.

    Each unnamed entry yields one ``unnamed-return`` at the function;
    each ``_`` name yields one ``placeholder-return-name`` at that name.
    Candidates keep declaration order.
    """
    out = Classification()
    if fn.results is None:
        return out

    for param in fn.results.list:
        type_text = expr_string(param.type)
        if not param.names:
            out.diagnostics.append(Diagnostic(
                kind=DiagnosticKind.UNNAMED_RETURN,
                message=unnamed_return_message(type_text),
                location=fn.pos,
            ))
            continue

        for ident in param.names:
            if ident.name == PLACEHOLDER_NAME:
                out.diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.PLACEHOLDER_RETURN_NAME,
                    message=placeholder_return_message(type_text),
                    location=ident.pos,
                ))
                continue
            out.candidates.append(NamedReturn(ident.name, ident, param.type))
    return out


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — DEFER-EXEMPTION RESOLVER
# ═════════════════════════════════════════════════════════════════════════

def find_variable_assignment(body: Optional[Node], info: TypeInfo,
                             variable: Object) -> bool:
    """True if any assignment in ``body`` targets ``variable`` (by binding, not by name)."""

    def assigns(node: Node) -> bool:
        if not isinstance(node, AssignStmt):
            return False
        for lhs in node.lhs:
            if isinstance(lhs, Ident) and info.object_of(lhs) is variable:
                return True
        return False

    return find_first(body, assigns) is not None


def find_deferred_assignment(body: Optional[BlockStmt], info: TypeInfo,
                             variable: Object) -> bool:
    """
    True if a ``defer func() { ... }()`` of this function assigns ``variable``.

    Deferred statements inside nested blocks count (they still run at
    this function's exit); those inside nested function literals belong
    to that literal and are not considered.  Stops at the first match.
    """
    found = False

    def visit(node: Node) -> bool:
        nonlocal found
        if found:
            return False
        if isinstance(node, FuncLit):
            return False
        if isinstance(node, DeferStmt):
            call = node.call
            if call is not None and isinstance(call.fun, FuncLit):
                if find_variable_assignment(call.fun.body, info, variable):
                    found = True
            return False
        return True

    inspect(body, visit)
    return found


def is_defer_exempt(var: NamedReturn, body: Optional[BlockStmt], info: TypeInfo) -> bool:
    """
    A named result is exempt when its declared type is the predeclared
    ``error`` and a deferred closure assigns it.
    """
    if not identical(info.type_of(var.type_expr), ERROR_TYPE):
        return False
    obj = info.object_of(var.ident)
    if obj is None:
        return False
    return find_deferred_assignment(body, info, obj)


# ═════════════════════════════════════════════════════════════════════════
#  PART 4 — RETURN-USAGE CHECKER
# ═════════════════════════════════════════════════════════════════════════

def check_return_usage(names: Sequence[str], body: Optional[BlockStmt],
                       func_pos: Position) -> List[Diagnostic]:
    """
    Every non-bare ``return`` must list each tracked name as a plain
    identifier.  Missing names are reported at the function position,
    once per statement.  Nested function literals are not entered.
    """
    diags: List[Diagnostic] = []
    tracked = set(names)

    def visit(node: Node) -> bool:
        if isinstance(node, FuncLit):
            return False
        if isinstance(node, ReturnStmt) and not node.is_bare:
            used = {
                r.name for r in node.results
                if isinstance(r, Ident) and r.name in tracked
            }
            for name in names:
                if name not in used:
                    diags.append(Diagnostic(
                        kind=DiagnosticKind.RETURN_MISMATCH,
                        message=return_mismatch_message(name),
                        location=func_pos,
                        variable=name,
                    ))
        return True

    inspect(body, visit)
    return diags


# ═════════════════════════════════════════════════════════════════════════
#  PART 5 — SHADOW DETECTOR
# ═════════════════════════════════════════════════════════════════════════

def _shadow(ident: Ident, shadow: ShadowKind) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.SHADOWED_RETURN,
        message=shadowed_return_message(ident.name, shadow),
        location=ident.pos,
        variable=ident.name,
    )


def check_shadowing(names: Sequence[str], body: Optional[BlockStmt]) -> List[Diagnostic]:
    """
    Report re-declarations of tracked names anywhere in ``body``.

    Four constructs, each checked on its own:
      (a) ``x := ...``
      (b) ``var x T``
      (c) ``for x, y := range ...`` (key and value)
      (d) ``for x := ...; ...; ... {}`` initializer

    (d) is also an instance of (a), so a for-loop initializer reports
    twice: once as a for loop variable and once as a local declaration.
    """
    tracked = set(names)
    diags: List[Diagnostic] = []

    for node in iter_preorder(body):
        if isinstance(node, AssignStmt):
            if node.is_define:
                for lhs in node.lhs:
                    if isinstance(lhs, Ident) and lhs.name in tracked:
                        diags.append(_shadow(lhs, ShadowKind.LOCAL_DECLARATION))
        elif isinstance(node, ValueSpec):
            for ident in node.names:
                if ident.name in tracked:
                    diags.append(_shadow(ident, ShadowKind.LOCAL_DECLARATION))
        elif isinstance(node, RangeStmt):
            for binding in (node.key, node.value):
                if isinstance(binding, Ident) and binding.name in tracked:
                    diags.append(_shadow(binding, ShadowKind.RANGE_VARIABLE))
        elif isinstance(node, ForStmt):
            init = node.init
            if isinstance(init, AssignStmt) and init.is_define:
                for lhs in init.lhs:
                    if isinstance(lhs, Ident) and lhs.name in tracked:
                        diags.append(_shadow(lhs, ShadowKind.FOR_VARIABLE))
    return diags


# ═════════════════════════════════════════════════════════════════════════
#  PART 6 — PER-FUNCTION DRIVER
# ═════════════════════════════════════════════════════════════════════════

def analyze_function(fn: FunctionUnit, info: TypeInfo,
                     config: Optional[AnalyzerConfig] = None) -> List[Diagnostic]:
    """Run all four components over one function unit."""
    config = config or AnalyzerConfig()

    # External declarations (assembly-backed, linkname) have no body.
    if fn.body is None:
        _log.debug("skipping %s at %s: no body", fn.name, fn.pos)
        return []

    classification = classify_results(fn)
    diags = list(classification.diagnostics)

    tracked: List[str] = []
    for var in classification.candidates:
        if not config.report_error_in_defer and is_defer_exempt(var, fn.body, info):
            _log.debug("%s: %r is assigned in a deferred closure, exempt", fn.name, var.name)
            continue
        tracked.append(var.name)

    if tracked:
        diags.extend(check_return_usage(tracked, fn.body, fn.pos))
        diags.extend(check_shadowing(tracked, fn.body))
    return diags
