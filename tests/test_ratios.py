"""Tests for key ratios and the display summary."""

import pytest

from vessel_finance.config import normalize_parameters
from vessel_finance.engine.cashflow import project_cash_flows
from vessel_finance.finance.amortization import annual_debt_service
from vessel_finance.finance.ratios import build_summary, compute_key_ratios


class TestKeyRatios:
    def test_base_case(self, params):
        ratios = compute_key_ratios(project_cash_flows(params), params)
        revenue = 18_000 * 365 * 0.85
        opex = 4_000 * 365
        debt = annual_debt_service(17_500_000, 0.065, 7)

        assert ratios.total_revenue == pytest.approx(revenue * 7)
        assert ratios.total_opex == pytest.approx(opex * 7)
        assert ratios.avg_annual_ebitda == pytest.approx(revenue - opex)
        assert ratios.avg_annual_debt_service == pytest.approx(debt)
        assert ratios.debt_service_coverage_ratio == pytest.approx((revenue - opex) / debt)
        assert 0 < ratios.operating_margin < 1
        assert ratios.return_on_investment == pytest.approx((revenue - opex) / 7_500_000)

    def test_no_debt_gives_null_dscr(self, raw_parameters):
        p = normalize_parameters({**raw_parameters, "downPaymentPercent": 100})
        ratios = compute_key_ratios(project_cash_flows(p), p)
        assert ratios.avg_annual_debt_service == 0
        assert ratios.debt_service_coverage_ratio is None

    def test_zero_revenue_gives_zero_margin(self, raw_parameters):
        p = normalize_parameters({**raw_parameters, "dailyCharterRate": 0})
        ratios = compute_key_ratios(project_cash_flows(p), p)
        assert ratios.total_revenue == 0
        assert ratios.operating_margin == 0
        assert ratios.avg_annual_ebitda < 0

    def test_zero_equity_gives_zero_roi(self, raw_parameters):
        p = normalize_parameters({**raw_parameters, "downPaymentPercent": 0})
        ratios = compute_key_ratios(project_cash_flows(p), p)
        assert ratios.return_on_investment == 0


class TestSummary:
    def test_vessel_description(self, params):
        s = build_summary(params)
        assert s.vessel_description == "10-year-old Panamax Bulk Carrier (82,000 DWT)"

    def test_financing_terms(self, params):
        assert build_summary(params).financing_terms == "7 years at 6.50%"

    def test_operating_assumptions(self, params):
        oa = build_summary(params).operating_assumptions
        assert oa.daily_rate == 18_000
        assert oa.utilization == "85.0%"
        assert oa.annual_operating_days == 310

    def test_price_and_currency(self, params):
        s = build_summary(params)
        assert s.purchase_price == 25_000_000
        assert s.currency == "USD"

    def test_defaults_for_unknown_vessel(self, zero_rate_raw):
        s = build_summary(normalize_parameters(zero_rate_raw))
        assert s.vessel_description == "0-year-old Unknown (0 DWT)"

    def test_fractional_age(self, raw_parameters):
        s = build_summary(normalize_parameters({**raw_parameters, "age": 7.5}))
        assert s.vessel_description.startswith("7.5-year-old")
