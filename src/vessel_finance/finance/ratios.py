"""Secondary ratios and the display summary."""

from __future__ import annotations

from collections.abc import Sequence

from vessel_finance.config.parameters import DAYS_PER_YEAR, InvestmentParameters
from vessel_finance.models.results import (
    AnalysisSummary,
    CashFlowYear,
    KeyRatios,
    OperatingAssumptions,
)


def compute_key_ratios(cash_flows: Sequence[CashFlowYear], params: InvestmentParameters) -> KeyRatios:
    """Totals and averages over the operating years (year ≥ 1).

    DSCR  = avg EBITDA / avg debt service   (None without debt service)
    ROI   = avg EBITDA / year-0 equity      (0 without equity)
    Margin = (revenue − opex) / revenue     (0 without revenue)

    Average debt service divides by the loan term, not the horizon.
    """
    operating = [cf for cf in cash_flows if cf.year >= 1]

    total_revenue = sum(cf.revenue for cf in operating)
    total_opex = sum(cf.opex for cf in operating)
    total_debt = sum(cf.debt_payment for cf in operating)

    avg_ebitda = (total_revenue - total_opex) / len(operating) if operating else 0.0
    avg_debt_service = total_debt / params.loan_term_years

    equity = params.equity_outlay

    return KeyRatios(
        total_revenue=total_revenue,
        total_opex=total_opex,
        avg_annual_ebitda=avg_ebitda,
        avg_annual_debt_service=avg_debt_service,
        debt_service_coverage_ratio=avg_ebitda / avg_debt_service if avg_debt_service > 0 else None,
        operating_margin=(total_revenue - total_opex) / total_revenue if total_revenue > 0 else 0.0,
        return_on_investment=avg_ebitda / equity if equity > 0 else 0.0,
    )


def _format_quantity(value: float) -> str:
    """Thousands-separated, without a trailing '.0' for whole numbers."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


def build_summary(params: InvestmentParameters) -> AnalysisSummary:
    age = _format_quantity(params.age)
    dwt = _format_quantity(params.dwt)
    return AnalysisSummary(
        vessel_description=f"{age}-year-old {params.vessel_type} ({dwt} DWT)",
        purchase_price=params.price,
        currency=params.currency,
        financing_terms=f"{params.loan_term_years} years at {params.interest_rate_percent * 100:.2f}%",
        operating_assumptions=OperatingAssumptions(
            daily_rate=params.daily_charter_rate,
            utilization=f"{params.utilization_percent * 100:.1f}%",
            annual_operating_days=round(DAYS_PER_YEAR * params.utilization_percent),
        ),
    )
