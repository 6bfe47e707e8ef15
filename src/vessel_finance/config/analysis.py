"""Analysis settings — discount rate, horizon and IRR solver knobs.

Defaults reproduce the fixed business rules: 10 % discount rate and an
analysis horizon equal to the loan term.
"""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DISCOUNT_RATE = 0.10


class AnalysisConfig(BaseModel):
    """How a set of ``InvestmentParameters`` is valued."""

    model_config = ConfigDict(frozen=True)

    discount_rate: float = Field(
        default=DEFAULT_DISCOUNT_RATE, gt=-1,
        description="Annual discount rate for NPV (0.10 = 10%).",
    )
    horizon_years: int | None = Field(
        default=None, ge=1,
        description="Analysis horizon in years. None = loan term.",
    )

    # --- IRR solver ---
    irr_initial_guess: float = Field(default=0.10, description="Newton-Raphson starting rate.")
    irr_tolerance: float = Field(default=1e-4, gt=0, description="Converged when |NPV(r)| is below this.")
    irr_max_iterations: int = Field(default=100, ge=1)
    irr_lower_bound: float = Field(
        default=-0.99, gt=-1,
        description="Rate is clamped to at least this after every update.",
    )
    irr_upper_bound: float = Field(default=10.0, description="Rate is clamped to at most this.")
    irr_bisection_fallback: bool = Field(
        default=True,
        description="Try bisection on [lower, upper] when Newton-Raphson does not converge.",
    )
