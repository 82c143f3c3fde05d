"""
namedreturns — Named-Return Convention Checker
==============================================

Checks that every function's results are named, returned by name,
and never re-declared in the body.  Works on a syntax tree and resolver
tables produced by an external front end; no source text is parsed.

Core modules
------------
go_ast
    Syntax-tree node model with positions and ``expr_string``.
type_info
    Types, objects, the universe ``error`` type and ``TypeInfo`` tables.
ast_helper
    Pre-order walks and the per-unit ``Inspector``.
diagnostics
    Diagnostic kinds, message templates, reporter and shared sink.
analysis
    Classifier, defer-exemption resolver, return-usage and shadow checks.
checkers
    Checker lifecycle, ``CheckerRunner`` and the ``run`` entry point.
config
    The ``report-error-in-defer`` flag and ``AnalyzerConfig``.
dump
    Loader for JSON dumps written by a front end.

Quick start
-----------
>>> from namedreturns import load_dump, run
>>> unit = load_dump("pkg.dump.json")
>>> for diag in run(unit):
...     print(diag.to_gcc_format())
"""

from __future__ import annotations

import importlib
import logging
import sys
from typing import List

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.1.0"
__author__ = "namedreturns contributors"
__license__ = "MIT"
__all__: List[str] = []          # populated below

_log = logging.getLogger(__name__)
_log.addHandler(logging.NullHandler())

# ---------------------------------------------------------------------------
# Public symbols per submodule. Every module here is required.
# ---------------------------------------------------------------------------

_CORE_MODULES = {
    "errors": [
        "NamedReturnsError",
        "TraversalUnavailableError",
        "ConfigError",
        "DumpFormatError",
    ],
    "config": [
        "AnalyzerConfig",
        "ANALYZER_FLAGS",
        "FLAG_REPORT_ERROR_IN_DEFER",
    ],
    "diagnostics": [
        "Diagnostic",
        "DiagnosticKind",
        "DiagnosticSeverity",
        "DiagnosticReporter",
        "DiagnosticSink",
    ],
    "analysis": [
        "FunctionUnit",
        "analyze_function",
        "classify_results",
        "is_defer_exempt",
        "check_return_usage",
        "check_shadowing",
    ],
    "checkers": [
        "CompilationUnit",
        "NamedReturnsChecker",
        "CheckerRunner",
        "CheckerRunResults",
        "run",
    ],
    "dump": [
        "load_dump",
        "parse_dump",
        "decode_unit",
    ],
}


def _import_names(module_rel_name: str, names: List[str]) -> None:
    """Import *names* from a submodule and bind them in the package namespace."""
    fq_name = f"{__name__}.{module_rel_name}"
    try:
        mod = importlib.import_module(fq_name)
    except ImportError as exc:
        raise ImportError(
            f"namedreturns: required submodule '{module_rel_name}' "
            f"failed to import: {exc}"
        ) from exc

    current_module = sys.modules[__name__]
    for name in names:
        obj = getattr(mod, name, None)
        if obj is None:
            raise AttributeError(
                f"namedreturns.{module_rel_name} does not export '{name}'"
            )
        setattr(current_module, name, obj)
        __all__.append(name)


for _mod, _names in _CORE_MODULES.items():
    _import_names(_mod, _names)

del _mod, _names


__all__ += ["__version__"]
