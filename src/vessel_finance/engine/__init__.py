"""Engine — cash flow projection and orchestration."""

from vessel_finance.engine.cashflow import analysis_horizon, project_cash_flows
from vessel_finance.engine.orchestrator import run_analysis

__all__ = [
    "analysis_horizon",
    "project_cash_flows",
    "run_analysis",
]
