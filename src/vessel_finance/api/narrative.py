"""Narrative generator — plain-English interpretation of an analysis result.

Turns an ``AnalysisResult`` into a sectioned text block for display next to
the charts, or for an assistant to quote back to the user.
"""

from __future__ import annotations

from vessel_finance.models.results import AnalysisResult

RULE = "=" * 60


def _section(title: str) -> list[str]:
    return ["", RULE, title, RULE]


def _money(value: float, currency: str) -> str:
    return f"{currency} {value:,.0f}"


def generate_narrative(result: AnalysisResult) -> str:
    """Generate a plain-English narrative from an analysis result.

    Sections:
      1. Vessel & financing
      2. Operating economics
      3. Valuation
      4. Debt coverage
      5. Recommendations
    """
    s = result.summary
    k = result.key_ratios
    ccy = s.currency
    operating = [cf for cf in result.cash_flows if cf.year >= 1]
    equity = -result.cash_flows[0].net_cash_flow if result.cash_flows else 0.0

    sections: list[str] = []

    # ── 1. Vessel & financing ──
    sections += [RULE, "VESSEL & FINANCING", RULE]
    sections.append(
        f"Vessel: {s.vessel_description}\n"
        f"Purchase price: {_money(s.purchase_price, ccy)}\n"
        f"Equity at purchase: {_money(equity, ccy)}\n"
        f"Loan: {s.financing_terms}\n"
        f"Horizon: {result.horizon_years} years"
    )

    # ── 2. Operating economics ──
    sections += _section("OPERATING ECONOMICS")
    oa = s.operating_assumptions
    sections.append(
        f"Daily charter rate: {_money(oa.daily_rate, ccy)}\n"
        f"Utilization: {oa.utilization} ({oa.annual_operating_days} days on hire per year)\n"
        f"Annual revenue: {_money(operating[0].revenue if operating else 0.0, ccy)}\n"
        f"Annual OpEx: {_money(operating[0].opex if operating else 0.0, ccy)}\n"
        f"Average annual EBITDA: {_money(k.avg_annual_ebitda, ccy)}\n"
        f"Operating margin: {k.operating_margin * 100:.1f}%"
    )

    # ── 3. Valuation ──
    sections += _section("VALUATION")
    irr_note = "" if result.irr_converged else " (estimate, solver did not converge)"
    payback = (
        f"{result.payback_period:.1f} years"
        if result.payback_period is not None
        else "NEVER (within horizon)"
    )
    sections.append(
        f"NPV at {result.discount_rate * 100:.1f}%: {_money(result.npv, ccy)}\n"
        f"IRR: {result.irr * 100:.1f}%{irr_note}\n"
        f"Payback period: {payback}\n"
        f"Return on equity (avg EBITDA / equity): {k.return_on_investment * 100:.1f}%"
    )

    # ── 4. Debt coverage ──
    sections += _section("DEBT COVERAGE")
    dscr = k.debt_service_coverage_ratio
    sections.append(f"Average annual debt service: {_money(k.avg_annual_debt_service, ccy)}")
    sections.append(f"DSCR: {dscr:.2f}" if dscr is not None else "DSCR: N/A (no debt service)")

    # ── 5. Recommendations ──
    sections += _section("RECOMMENDATIONS")
    recs: list[str] = []
    if result.npv < 0:
        recs.append(
            f"NPV is negative at a {result.discount_rate * 100:.0f}% discount rate. "
            "Consider negotiating the price, a higher charter rate, or better utilization."
        )
    if result.irr_converged and result.irr < result.discount_rate:
        recs.append(
            f"IRR ({result.irr * 100:.1f}%) is below the {result.discount_rate * 100:.0f}% hurdle rate."
        )
    if result.payback_period is None:
        recs.append("Equity is not recovered within the horizon. Consider lower OpEx or a higher charter rate.")
    if dscr is not None and dscr < 1.0:
        recs.append(
            f"DSCR {dscr:.2f} < 1.00: operating cash does not cover debt service. "
            "Consider a larger down payment or a longer loan term."
        )
    if not recs:
        recs.append("No critical issues identified. Stress-test charter rate and utilization before committing.")

    for i, rec in enumerate(recs, 1):
        sections.append(f"  {i}. {rec}")

    return "\n".join(sections)
