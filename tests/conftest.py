"""Shared test fixtures — the Panamax bulk carrier base case."""

from __future__ import annotations

import pytest

from vessel_finance.config import InvestmentParameters, normalize_parameters


@pytest.fixture
def raw_parameters() -> dict:
    return {
        "vesselType": "Panamax Bulk Carrier",
        "age": 10,
        "price": 25_000_000,
        "dwt": 82_000,
        "currency": "USD",
        "downPaymentPercent": 30,
        "loanTermYears": 7,
        "interestRatePercent": 6.5,
        "dailyCharterRate": 18_000,
        "opexPerDay": 4_000,
        "utilizationPercent": 85,
        "scrapValue": 3_750_000,
    }


@pytest.fixture
def params(raw_parameters: dict) -> InvestmentParameters:
    return normalize_parameters(raw_parameters)


@pytest.fixture
def zero_rate_raw() -> dict:
    return {
        "price": 1_000_000,
        "downPaymentPercent": 10,
        "loanTermYears": 5,
        "interestRatePercent": 0,
        "dailyCharterRate": 5_000,
        "opexPerDay": 2_000,
        "utilizationPercent": 50,
    }


@pytest.fixture
def loss_making_raw(raw_parameters: dict) -> dict:
    """EBITDA (≈91k) far below annual debt service (≈3.1M) in every year."""
    return {**raw_parameters, "dailyCharterRate": 5_000}
