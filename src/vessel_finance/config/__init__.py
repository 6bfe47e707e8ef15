"""Configuration models — engine inputs and service settings."""

from vessel_finance.config.parameters import InvestmentParameters, normalize_parameters
from vessel_finance.config.analysis import AnalysisConfig, DEFAULT_DISCOUNT_RATE

__all__ = [
    "InvestmentParameters",
    "normalize_parameters",
    "AnalysisConfig",
    "DEFAULT_DISCOUNT_RATE",
]
