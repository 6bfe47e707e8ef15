"""Loan amortization — level-payment annuity, reported per loan year.

Key formulas:
  loan principal P = price × (1 − down_payment)
  monthly payment M = P × r × (1+r)^n / ((1+r)^n − 1),  r = annual_rate / 12, n = years × 12
  annual debt service = 12 × M   (P / years when the rate is zero)
"""

from __future__ import annotations

import logging

from vessel_finance.config.parameters import InvestmentParameters
from vessel_finance.models.results import AmortizationEntry

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12

# Final residual above this share of the principal is worth a debug line.
BALANCE_TOLERANCE = 1e-9


def annual_debt_service(principal: float, annual_rate: float, term_years: int) -> float:
    """Level annual payment that retires ``principal`` over ``term_years``.

    A zero rate falls back to straight-line repayment (principal / term)
    instead of dividing by zero in the annuity formula.
    """
    monthly_rate = annual_rate / MONTHS_PER_YEAR
    try:
        factor = (1 + monthly_rate) ** (term_years * MONTHS_PER_YEAR)
    except OverflowError:
        # Annuity factor past float range: the payment is interest-only in the limit.
        return principal * monthly_rate * MONTHS_PER_YEAR
    if factor == 1:
        # Zero (or sub-epsilon) rate.
        return principal / term_years

    monthly_payment = principal * monthly_rate * factor / (factor - 1)
    return monthly_payment * MONTHS_PER_YEAR


def build_amortization_schedule(params: InvestmentParameters) -> list[AmortizationEntry]:
    """Year-by-year principal/interest split of the vessel loan.

    Each year accumulates twelve monthly splits; a monthly principal
    repayment never exceeds the outstanding balance.  Whatever balance is
    left after the last loan year is added to that year's principal, so the
    schedule always ends at zero.

    Returns an empty list for an all-equity purchase.
    """
    principal = params.loan_principal
    if principal <= 0:
        return []

    term = params.loan_term_years
    monthly_rate = params.interest_rate_percent / MONTHS_PER_YEAR
    monthly_payment = annual_debt_service(principal, params.interest_rate_percent, term) / MONTHS_PER_YEAR
    tolerance = BALANCE_TOLERANCE * principal

    rows: list[AmortizationEntry] = []
    balance = principal

    for year in range(1, term + 1):
        opening = balance
        year_interest = 0.0
        year_principal = 0.0

        for _ in range(MONTHS_PER_YEAR):
            if balance <= 0:
                break
            interest = balance * monthly_rate
            repaid = min(monthly_payment - interest, balance)
            year_interest += interest
            year_principal += repaid
            balance -= repaid

        if year == term:
            if abs(balance) > tolerance:
                logger.debug("Folding loan residual %.6f into year %d principal", balance, year)
            year_principal += balance
            balance = 0.0

        rows.append(AmortizationEntry(
            year=year,
            starting_balance=opening,
            principal=year_principal,
            interest=year_interest,
            payment=year_interest + year_principal,
            ending_balance=balance,
        ))

    return rows
