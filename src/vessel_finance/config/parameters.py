"""Investment parameters — the validated, normalized engine input.

The wire format is a flat camelCase map with percentages as whole numbers
(``{"downPaymentPercent": 30, ...}``).  ``normalize_parameters`` checks the
required fields, converts the three percentage fields to fractions and fills
the scrap-value default, returning a frozen ``InvestmentParameters``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from vessel_finance.errors import InvalidParameterError, MissingParameterError

# Checked in this order; the first absent one is reported.
REQUIRED_FIELDS: tuple[str, ...] = (
    "price",
    "downPaymentPercent",
    "loanTermYears",
    "interestRatePercent",
    "dailyCharterRate",
    "opexPerDay",
    "utilizationPercent",
)

PERCENT_FIELDS: tuple[str, ...] = (
    "downPaymentPercent",
    "interestRatePercent",
    "utilizationPercent",
)

DEFAULT_SCRAP_FRACTION = 0.15

# Per-day rates are annualized over calendar days.
DAYS_PER_YEAR = 365


class InvestmentParameters(BaseModel):
    """One vessel purchase: price, financing terms and operating assumptions.

    Percentage fields hold **fractions** (0.30 for 30 %).  Build instances from
    raw user input with :meth:`from_raw`; constructing the model directly
    assumes the values are already normalized.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
        extra="ignore",
    )

    # --- Vessel ---
    vessel_type: str = Field(default="Unknown", description="Vessel class, e.g. 'Panamax Bulk Carrier'.")
    age: float = Field(default=0, description="Vessel age in years.")
    dwt: float = Field(default=0, description="Deadweight tonnage.")
    currency: str = Field(default="USD", description="Display currency; no conversion is applied.")
    price: float = Field(description="Purchase price in base currency units.")

    # --- Financing ---
    down_payment_percent: float = Field(
        ge=0, le=1,
        description="Equity share of the price, as a fraction (0–1).",
    )
    loan_term_years: int = Field(ge=1, description="Loan term in whole years. Also the default horizon.")
    interest_rate_percent: float = Field(
        ge=0, le=1,
        description="Annual nominal interest rate, as a fraction (0–1).",
    )

    # --- Operations ---
    daily_charter_rate: float = Field(description="Charter income per on-hire day.")
    opex_per_day: float = Field(description="Operating expense per calendar day.")
    utilization_percent: float = Field(
        ge=0, le=1,
        description="Share of the year on hire, as a fraction (0–1).",
    )
    scrap_value: float = Field(description="Residual value realised in the final horizon year.")

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> InvestmentParameters:
        return normalize_parameters(raw)

    @property
    def equity_outlay(self) -> float:
        """Year-0 cash paid by the buyer = price × down payment."""
        return self.price * self.down_payment_percent

    @property
    def loan_principal(self) -> float:
        return self.price * (1 - self.down_payment_percent)


_ALIASES: dict[str, str] = {
    name: info.alias or name for name, info in InvestmentParameters.model_fields.items()
}


def _canonical_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Accept snake_case keys alongside the camelCase wire names."""
    return {_ALIASES.get(key, key): value for key, value in raw.items()}


def _as_float(field: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(field, f"expected a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidParameterError(field, "must be a finite number")
    return number


def normalize_parameters(raw: Mapping[str, Any]) -> InvestmentParameters:
    """Validate a raw parameter map and return normalized ``InvestmentParameters``.

    Raises
    ------
    MissingParameterError
        A required field is absent or null (first one in ``REQUIRED_FIELDS`` order).
    InvalidParameterError
        A field cannot be coerced, or violates a model invariant
        (loan term below one year, percentage outside 0–100).
    """
    data = _canonical_keys(raw)

    for field in REQUIRED_FIELDS:
        if data.get(field) is None:
            raise MissingParameterError(field)

    for field in PERCENT_FIELDS:
        data[field] = _as_float(field, data[field]) / 100

    if data.get("scrapValue") is None:
        data["scrapValue"] = _as_float("price", data["price"]) * DEFAULT_SCRAP_FRACTION

    # Null optionals fall back to model defaults.
    data = {key: value for key, value in data.items() if value is not None}

    try:
        return InvestmentParameters.model_validate(data)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "parameters"
        raise InvalidParameterError(field, error["msg"]) from exc
