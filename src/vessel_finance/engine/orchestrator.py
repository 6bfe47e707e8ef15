"""Engine orchestrator — one parameter map in, one ``AnalysisResult`` out.

Normalize → {amortization schedule, cash flows} → valuation → ratios.
Stateless: every call builds fresh immutable structures, so calls may run
concurrently without locking.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from vessel_finance.config.analysis import AnalysisConfig
from vessel_finance.config.parameters import InvestmentParameters, normalize_parameters
from vessel_finance.engine.cashflow import analysis_horizon, project_cash_flows
from vessel_finance.finance.amortization import build_amortization_schedule
from vessel_finance.finance.ratios import build_summary, compute_key_ratios
from vessel_finance.finance.valuation import compute_irr, compute_npv, compute_payback_period
from vessel_finance.models.results import AnalysisResult

logger = logging.getLogger(__name__)


def run_analysis(
    parameters: InvestmentParameters | Mapping[str, Any],
    config: AnalysisConfig | None = None,
) -> AnalysisResult:
    """Run the full vessel investment analysis.

    Parameters
    ----------
    parameters : InvestmentParameters | Mapping[str, Any]
        Already-normalized parameters, or a raw wire map (percentages as
        whole numbers) which is normalized first.
    config : AnalysisConfig | None
        Discount rate, horizon and IRR solver settings. Defaults reproduce
        the 10% rate and horizon = loan term.

    Raises
    ------
    ParameterError
        The raw map is missing a required field or holds an invalid value.
        Nothing is computed in that case.
    """
    params = parameters if isinstance(parameters, InvestmentParameters) else normalize_parameters(parameters)
    cfg = config or AnalysisConfig()

    schedule = build_amortization_schedule(params)
    cash_flows = project_cash_flows(params, cfg)
    net_flows = [cf.net_cash_flow for cf in cash_flows]

    npv = compute_npv(net_flows, cfg.discount_rate)
    irr = compute_irr(net_flows, cfg)
    payback = compute_payback_period(net_flows)

    logger.debug(
        "Analysed %s: npv=%.2f irr=%.6f (converged=%s) payback=%s",
        params.vessel_type, npv, irr.rate, irr.converged, payback,
    )

    return AnalysisResult(
        npv=npv,
        irr=irr.rate,
        irr_converged=irr.converged,
        payback_period=payback,
        discount_rate=cfg.discount_rate,
        horizon_years=analysis_horizon(params, cfg),
        cash_flows=tuple(cash_flows),
        amortization_schedule=tuple(schedule),
        key_ratios=compute_key_ratios(cash_flows, params),
        summary=build_summary(params),
    )
