"""Result models — engine output contracts."""

from vessel_finance.models.results import (
    AmortizationEntry,
    AnalysisResult,
    AnalysisSummary,
    CashFlowYear,
    IRRSolution,
    KeyRatios,
    OperatingAssumptions,
)

__all__ = [
    "AmortizationEntry",
    "AnalysisResult",
    "AnalysisSummary",
    "CashFlowYear",
    "IRRSolution",
    "KeyRatios",
    "OperatingAssumptions",
]
