"""Result types — the contract between engine, API, narrative and store.

Every model is frozen: a result is built once per invocation and never
mutated afterward.  Fields are snake_case in Python and serialize with
camelCase aliases (``model_dump(by_alias=True)``) for the presentation and
persistence layers.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Contract(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# ═══════════════════════════════════════════════════════════════════════════
# Year-by-year series
# ═══════════════════════════════════════════════════════════════════════════

class CashFlowYear(_Contract):
    """One projection year.  Year 0 carries only the equity outflow."""

    year: int
    revenue: float = 0.0
    opex: float = 0.0
    ebitda: float = 0.0
    debt_payment: float = 0.0
    terminal_value: float = 0.0
    net_cash_flow: float
    cumulative_cash_flow: float


class AmortizationEntry(_Contract):
    """One loan year, aggregated from twelve monthly payments."""

    year: int
    starting_balance: float
    principal: float
    interest: float
    payment: float
    """interest + principal actually paid during the year."""
    ending_balance: float


# ═══════════════════════════════════════════════════════════════════════════
# Valuation
# ═══════════════════════════════════════════════════════════════════════════

class IRRSolution(_Contract):
    """IRR estimate plus how it was obtained.

    ``converged`` is False when neither Newton-Raphson nor the bisection
    fallback drove |NPV| below tolerance; ``rate`` is then the last
    Newton-Raphson estimate.
    """

    rate: float
    converged: bool
    iterations: int
    method: Literal["newton", "bisection"] = "newton"


# ═══════════════════════════════════════════════════════════════════════════
# Ratios & summary
# ═══════════════════════════════════════════════════════════════════════════

class KeyRatios(_Contract):
    """Aggregates over the operating years (year ≥ 1)."""

    total_revenue: float
    total_opex: float
    avg_annual_ebitda: float
    avg_annual_debt_service: float
    """Total debt payments / loan term in years."""
    debt_service_coverage_ratio: float | None
    """avg EBITDA / avg debt service.  None when there is no debt service."""
    operating_margin: float
    return_on_investment: float
    """avg EBITDA / year-0 equity outlay."""


class OperatingAssumptions(_Contract):
    daily_rate: float
    utilization: str
    annual_operating_days: int


class AnalysisSummary(_Contract):
    """Display strings describing the vessel, financing and operations."""

    vessel_description: str
    purchase_price: float
    currency: str
    financing_terms: str
    operating_assumptions: OperatingAssumptions


# ═══════════════════════════════════════════════════════════════════════════
# Aggregated result
# ═══════════════════════════════════════════════════════════════════════════

class AnalysisResult(_Contract):
    """Everything one engine invocation produces."""

    npv: float
    irr: float
    irr_converged: bool
    """False when ``irr`` is a best-effort estimate rather than a root."""
    payback_period: float | None
    """Fractional years until cumulative cash flow turns non-negative."""
    discount_rate: float
    horizon_years: int
    cash_flows: tuple[CashFlowYear, ...]
    amortization_schedule: tuple[AmortizationEntry, ...]
    key_ratios: KeyRatios
    summary: AnalysisSummary
