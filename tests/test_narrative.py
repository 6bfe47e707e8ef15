"""Tests for the plain-English narrative."""

from vessel_finance.engine import run_analysis
from vessel_finance.api.narrative import generate_narrative


class TestNarrative:
    def test_sections_present(self, raw_parameters):
        text = generate_narrative(run_analysis(raw_parameters))
        for title in ("VESSEL & FINANCING", "OPERATING ECONOMICS", "VALUATION",
                      "DEBT COVERAGE", "RECOMMENDATIONS"):
            assert title in text

    def test_mentions_vessel_and_terms(self, raw_parameters):
        text = generate_narrative(run_analysis(raw_parameters))
        assert "10-year-old Panamax Bulk Carrier (82,000 DWT)" in text
        assert "7 years at 6.50%" in text
        assert "USD" in text

    def test_no_payback_flagged(self, loss_making_raw):
        text = generate_narrative(run_analysis(loss_making_raw))
        assert "NEVER (within horizon)" in text
        assert "not recovered within the horizon" in text
        assert "DSCR" in text and "< 1.00" in text

    def test_all_equity_has_no_dscr(self, raw_parameters):
        text = generate_narrative(run_analysis({**raw_parameters, "downPaymentPercent": 100}))
        assert "DSCR: N/A (no debt service)" in text
