"""Tests for the valuation engine — NPV, IRR, payback period."""

import math

import pytest

from vessel_finance.config import AnalysisConfig
from vessel_finance.finance.valuation import (
    compute_irr,
    compute_npv,
    compute_payback_period,
    npv_derivative,
)

# One large outflow, positive thereafter.
SIMPLE = [-1000.0, 300.0, 300.0, 300.0, 300.0, 300.0]


# ── NPV ─────────────────────────────────────────────────────────────────────

class TestComputeNPV:
    def test_zero_rate_is_sum(self):
        assert compute_npv([100.0, 200.0, 300.0], 0.0) == pytest.approx(600.0)

    def test_year_zero_not_discounted(self):
        assert compute_npv([-500.0], 0.10) == -500.0

    def test_discrete_annual_discounting(self):
        npv = compute_npv([-100.0, 110.0, 121.0], 0.10)
        assert npv == pytest.approx(-100 + 100 + 100)

    def test_empty_flows(self):
        assert compute_npv([], 0.10) == 0.0

    def test_decreasing_in_rate_for_single_sign_change(self):
        rates = [-0.5, -0.2, 0.0, 0.05, 0.1, 0.2, 0.5, 1.0, 3.0]
        values = [compute_npv(SIMPLE, r) for r in rates]
        for a, b in zip(values, values[1:]):
            assert b < a

    def test_underflowing_discount_factor_gives_infinity(self):
        # 0.01 ** 200 underflows to zero.
        flows = [-1.0] + [1.0] * 200
        assert compute_npv(flows, -0.99) == math.inf
        assert npv_derivative(flows, -0.99) == -math.inf

    def test_overflowing_discount_factor_gives_zero_terms(self):
        # 11 ** 400 is past float range; those terms vanish.
        flows = [-1.0] + [0.0] * 399 + [5.0]
        assert compute_npv(flows, 10.0) == -1.0
        assert npv_derivative(flows, 10.0) == 0.0

    def test_derivative_matches_finite_difference(self):
        h = 1e-6
        numeric = (compute_npv(SIMPLE, 0.1 + h) - compute_npv(SIMPLE, 0.1 - h)) / (2 * h)
        assert npv_derivative(SIMPLE, 0.1) == pytest.approx(numeric, rel=1e-5)


# ── IRR ─────────────────────────────────────────────────────────────────────

class TestComputeIRR:
    def test_simple_project(self):
        sol = compute_irr(SIMPLE)
        assert sol.converged
        assert sol.method == "newton"
        # Known IRR of a 5-year 300/yr annuity on 1000 ≈ 15.24%
        assert sol.rate == pytest.approx(0.1524, abs=1e-3)

    def test_npv_at_irr_is_zero(self):
        flows = [-7_500_000.0] + [1_000_000.0] * 6 + [4_750_000.0]
        sol = compute_irr(flows)
        assert sol.converged
        assert abs(compute_npv(flows, sol.rate)) < 1e-4

    def test_already_at_root_returns_initial_guess(self):
        flows = [-100.0, 110.0]
        sol = compute_irr(flows)
        assert sol.rate == pytest.approx(0.10)
        assert sol.converged
        assert sol.iterations == 1

    def test_zero_flows_converge_immediately(self):
        sol = compute_irr([0.0, 0.0, 0.0])
        assert sol.converged
        assert sol.rate == 0.10

    def test_flat_npv_returns_estimate_unconverged(self):
        # Only a year-0 flow: NPV is constant, derivative exactly zero.
        sol = compute_irr([-100.0])
        assert not sol.converged
        assert sol.rate == 0.10

    def test_no_root_is_not_an_error(self):
        sol = compute_irr([-100.0, -50.0, -25.0])
        assert not sol.converged
        assert math.isfinite(sol.rate)
        assert -0.99 <= sol.rate <= 10

    def test_rate_stays_within_clamp(self):
        # Enormous return drives Newton toward the upper clamp.
        sol = compute_irr([-1.0, 1000.0])
        assert -0.99 <= sol.rate <= 10
        assert math.isfinite(sol.rate)

    def test_custom_initial_guess(self):
        sol = compute_irr(SIMPLE, AnalysisConfig(irr_initial_guess=0.5))
        assert sol.converged
        assert sol.rate == pytest.approx(0.1524, abs=1e-3)

    def test_bisection_rescues_stalled_newton(self):
        # One Newton step is not enough; bisection still brackets the root.
        cfg = AnalysisConfig(irr_max_iterations=1)
        sol = compute_irr(SIMPLE, cfg)
        assert sol.converged
        assert sol.method == "bisection"
        assert abs(compute_npv(SIMPLE, sol.rate)) < 1e-4

    def test_last_allowed_update_landing_on_root_counts(self):
        needed = compute_irr(SIMPLE).iterations
        assert needed >= 2
        cfg = AnalysisConfig(irr_max_iterations=needed - 1, irr_bisection_fallback=False)
        sol = compute_irr(SIMPLE, cfg)
        assert sol.converged
        assert sol.method == "newton"
        assert sol.rate == compute_irr(SIMPLE).rate

    @pytest.mark.parametrize("years", [170, 320])
    def test_long_horizon_does_not_raise(self, years):
        # Reaches the clamp bounds where the discount factor leaves float range.
        flows = [-7_500_000.0] + [-1_000_000.0] * (years - 1) + [2_750_000.0]
        sol = compute_irr(flows)
        assert math.isfinite(sol.rate)
        assert -0.99 <= sol.rate <= 10

    def test_fallback_can_be_disabled(self):
        cfg = AnalysisConfig(irr_max_iterations=1, irr_bisection_fallback=False)
        sol = compute_irr(SIMPLE, cfg)
        assert not sol.converged
        assert sol.method == "newton"


# ── Payback ─────────────────────────────────────────────────────────────────

class TestPaybackPeriod:
    def test_interpolates_within_year(self):
        # cumulative: -1000, -700, -400, -100, 200 → 3 + 100/300
        assert compute_payback_period(SIMPLE) == pytest.approx(3 + 1 / 3)

    def test_exact_recovery_at_year_end(self):
        assert compute_payback_period([-200.0, 100.0, 100.0]) == pytest.approx(2.0)

    def test_never_pays_back(self):
        assert compute_payback_period([-1000.0, 100.0, 100.0]) is None

    def test_year_zero_alone_is_not_payback(self):
        assert compute_payback_period([100.0]) is None

    def test_no_equity_pays_back_immediately(self):
        assert compute_payback_period([0.0, 50.0, 50.0]) == 0.0

    def test_bracketed_by_cumulative(self):
        flows = [-7_500_000.0] + [1_006_000.0] * 6 + [4_756_000.0]
        payback = compute_payback_period(flows)
        cumulative = []
        total = 0.0
        for cf in flows:
            total += cf
            cumulative.append(total)
        assert cumulative[math.floor(payback)] < 0 <= cumulative[math.ceil(payback)]

    def test_empty(self):
        assert compute_payback_period([]) is None
