"""Valuation engine — NPV, IRR and payback period on annual cash flows.

Cash flows are indexed by year: index 0 = purchase (year 0, undiscounted).

Key formulas:
  NPV(r)  = Σ CF_t / (1 + r)^t
  NPV'(r) = −Σ t × CF_t / (1 + r)^(t+1)
  IRR     = r where NPV(r) = 0  (Newton-Raphson, bisection fallback)
  Payback = (i − 1) + (−cumulative_{i−1} / CF_i) for the first year i with cumulative ≥ 0
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from vessel_finance.config.analysis import AnalysisConfig
from vessel_finance.models.results import IRRSolution

logger = logging.getLogger(__name__)

BISECTION_MAX_ITERATIONS = 200


def _discounted(amount: float, rate: float, periods: int) -> float:
    """``amount / (1 + rate) ** periods``, taking the limit when the factor leaves float range."""
    try:
        factor = (1 + rate) ** periods
    except OverflowError:
        return 0.0
    if factor == 0:
        return 0.0 if amount == 0 else math.copysign(math.inf, amount)
    return amount / factor


def compute_npv(cash_flows: Sequence[float], rate: float) -> float:
    """Net Present Value with discrete annual discounting.

    Parameters
    ----------
    cash_flows : Sequence[float]
        Annual net cash flows. Index 0 = year 0 (not discounted).
    rate : float
        Annual discount rate (e.g. 0.10 for 10%).

    Over very long horizons near rate = -1 the result can be infinite
    (or NaN when both signs diverge); it never raises.
    """
    npv = 0.0
    for t, cf in enumerate(cash_flows):
        npv += _discounted(cf, rate, t)
    return npv


def npv_derivative(cash_flows: Sequence[float], rate: float) -> float:
    """dNPV/dr at ``rate``."""
    slope = 0.0
    for t, cf in enumerate(cash_flows):
        slope -= _discounted(t * cf, rate, t + 1)
    return slope


def _newton(cash_flows: Sequence[float], cfg: AnalysisConfig) -> IRRSolution:
    rate = cfg.irr_initial_guess
    iterations = 0

    for iterations in range(1, cfg.irr_max_iterations + 1):
        npv = compute_npv(cash_flows, rate)
        if abs(npv) < cfg.irr_tolerance:
            return IRRSolution(rate=rate, converged=True, iterations=iterations)

        slope = npv_derivative(cash_flows, rate)
        if slope == 0:
            # Flat NPV curve: no Newton step possible, keep the current estimate.
            break
        if not (math.isfinite(npv) and math.isfinite(slope)):
            logger.debug("NPV left float range at rate %.6f; stopping Newton-Raphson", rate)
            break

        rate -= npv / slope
        rate = min(max(rate, cfg.irr_lower_bound), cfg.irr_upper_bound)
    else:
        # The final update may itself have landed on the root.
        if abs(compute_npv(cash_flows, rate)) < cfg.irr_tolerance:
            return IRRSolution(rate=rate, converged=True, iterations=iterations)

    return IRRSolution(rate=rate, converged=False, iterations=iterations)


def _bisect(cash_flows: Sequence[float], cfg: AnalysisConfig) -> IRRSolution | None:
    """Bisection on [lower, upper].  None when NPV has no usable sign change there."""
    low, high = cfg.irr_lower_bound, cfg.irr_upper_bound
    npv_low = compute_npv(cash_flows, low)
    npv_high = compute_npv(cash_flows, high)
    if not npv_low * npv_high < 0:
        return None

    mid = (low + high) / 2
    for i in range(1, BISECTION_MAX_ITERATIONS + 1):
        mid = (low + high) / 2
        npv_mid = compute_npv(cash_flows, mid)
        if math.isnan(npv_mid):
            return None
        if abs(npv_mid) < cfg.irr_tolerance:
            return IRRSolution(rate=mid, converged=True, iterations=i, method="bisection")
        if npv_low * npv_mid < 0:
            high = mid
        else:
            low, npv_low = mid, npv_mid

    return IRRSolution(rate=mid, converged=False, iterations=BISECTION_MAX_ITERATIONS, method="bisection")


def compute_irr(cash_flows: Sequence[float], config: AnalysisConfig | None = None) -> IRRSolution:
    """Internal Rate of Return (annual).

    Newton-Raphson from ``irr_initial_guess``, clamping the rate to
    [``irr_lower_bound``, ``irr_upper_bound``] after every update.  If that
    does not converge and NPV changes sign across the bounds, bisection
    supplies the root.  Otherwise the last Newton estimate is returned with
    ``converged=False``; this is never raised as an error.
    """
    cfg = config or AnalysisConfig()

    solution = _newton(cash_flows, cfg)
    if solution.converged:
        return solution

    if cfg.irr_bisection_fallback:
        bracketed = _bisect(cash_flows, cfg)
        if bracketed is not None and bracketed.converged:
            logger.debug("IRR found by bisection after Newton-Raphson stalled at %.6f", solution.rate)
            return bracketed

    logger.warning(
        "IRR did not converge after %d iterations; returning estimate %.6f",
        solution.iterations, solution.rate,
    )
    return solution


def compute_payback_period(cash_flows: Sequence[float]) -> float | None:
    """Fractional years until cumulative cash flow first turns non-negative.

    Interpolates linearly inside the crossing year.  Year 0 never counts as
    payback.  Returns None if the horizon ends with a negative cumulative.
    """
    cumulative = 0.0
    for i, cf in enumerate(cash_flows):
        previous = cumulative
        cumulative += cf
        if i > 0 and cumulative >= 0:
            if previous >= 0:
                # Nothing left to recover when the year started.
                return float(i - 1)
            return (i - 1) + (-previous / cf)
    return None
