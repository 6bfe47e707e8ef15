"""Annual cash flow projection.

Year 0 is the equity outflow.  Every operating year earns the same charter
revenue and pays the same OpEx; debt service runs for the loan term and the
scrap value lands in the final horizon year.  No inflation, tax or currency
conversion: inputs must be pre-adjusted by callers.
"""

from __future__ import annotations

from vessel_finance.config.analysis import AnalysisConfig
from vessel_finance.config.parameters import DAYS_PER_YEAR, InvestmentParameters
from vessel_finance.finance.amortization import annual_debt_service
from vessel_finance.models.results import CashFlowYear


def analysis_horizon(params: InvestmentParameters, config: AnalysisConfig | None = None) -> int:
    """Horizon in years: the explicit setting, else the loan term."""
    if config is not None and config.horizon_years is not None:
        return config.horizon_years
    return params.loan_term_years


def project_cash_flows(
    params: InvestmentParameters,
    config: AnalysisConfig | None = None,
) -> list[CashFlowYear]:
    """Build the year 0..horizon cash flow series.

    Returns
    -------
    list[CashFlowYear]
        ``horizon + 1`` entries; entry ``i`` is year ``i``.
    """
    horizon = analysis_horizon(params, config)

    equity = params.equity_outlay
    debt_service = annual_debt_service(
        params.loan_principal, params.interest_rate_percent, params.loan_term_years,
    )

    revenue = params.daily_charter_rate * DAYS_PER_YEAR * params.utilization_percent
    opex = params.opex_per_day * DAYS_PER_YEAR
    ebitda = revenue - opex

    cumulative = -equity
    years = [CashFlowYear(year=0, net_cash_flow=-equity, cumulative_cash_flow=cumulative)]

    for year in range(1, horizon + 1):
        debt_payment = debt_service if year <= params.loan_term_years else 0.0
        terminal_value = params.scrap_value if year == horizon else 0.0

        net = ebitda - debt_payment + terminal_value
        cumulative += net

        years.append(CashFlowYear(
            year=year,
            revenue=revenue,
            opex=opex,
            ebitda=ebitda,
            debt_payment=debt_payment,
            terminal_value=terminal_value,
            net_cash_flow=net,
            cumulative_cash_flow=cumulative,
        ))

    return years
