"""
namedreturns/config.py

Analyzer flag set.

There is a single flag.  It is read once per run into an immutable
``AnalyzerConfig`` and passed down explicitly; nothing here is global
mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from namedreturns.errors import ConfigError

ANALYZER_NAME = "namedreturns"
ANALYZER_DOC = "Reports functions that don't use named returns"

FLAG_REPORT_ERROR_IN_DEFER = "report-error-in-defer"


@dataclass(frozen=True)
class FlagSpec:
    name: str
    default: bool
    help: str


ANALYZER_FLAGS: Tuple[FlagSpec, ...] = (
    FlagSpec(
        name=FLAG_REPORT_ERROR_IN_DEFER,
        default=False,
        help="report named error if it is assigned inside defer",
    ),
)


def _flag_value(raw: Any) -> bool:
    # Flag values arrive either as real booleans or as their string form.
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    return str(raw).strip().lower() == "true"


@dataclass(frozen=True)
class AnalyzerConfig:
    """
    Run-context for one analyzer run.

    report_error_in_defer : when True the defer exemption is disabled and
                            every named ``error`` result is checked like
                            any other named result.
    """
    report_error_in_defer: bool = False

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> "AnalyzerConfig":
        """Build a config from ``{flag-name: value}``; unknown names are rejected."""
        if not options:
            return cls()
        known = {f.name for f in ANALYZER_FLAGS}
        unknown = sorted(k for k in options if k not in known)
        if unknown:
            raise ConfigError(
                f"unknown option(s) for {ANALYZER_NAME}: {', '.join(unknown)}"
            )
        return cls(
            report_error_in_defer=_flag_value(options.get(FLAG_REPORT_ERROR_IN_DEFER)),
        )

    def to_options(self) -> Dict[str, str]:
        return {FLAG_REPORT_ERROR_IN_DEFER: "true" if self.report_error_in_defer else "false"}
