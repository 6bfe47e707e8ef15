"""Error taxonomy shared by the engine, the store and the HTTP layer.

Validation problems are raised before any numeric work starts.
Numerical edge cases (zero rate, non-convergence) are never raised;
they are resolved by the branch policies in ``finance.valuation``.
"""

from __future__ import annotations


class VesselFinanceError(Exception):
    """Base class for all errors raised by this package."""


class ParameterError(VesselFinanceError, ValueError):
    """An input parameter map could not be turned into ``InvestmentParameters``."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class MissingParameterError(ParameterError):
    """A required field is absent (or null). User-correctable."""

    def __init__(self, field: str):
        super().__init__(field, f"Missing required parameter: {field}")


class InvalidParameterError(ParameterError):
    """A field is present but not usable (non-numeric, loan term < 1, ...)."""

    def __init__(self, field: str, reason: str):
        super().__init__(field, f"Invalid parameter {field}: {reason}")
        self.reason = reason


class AnalysisNotFoundError(VesselFinanceError, LookupError):
    """No stored analysis with that id belongs to the requesting owner."""

    def __init__(self, analysis_id: str):
        super().__init__(f"Analysis not found: {analysis_id}")
        self.analysis_id = analysis_id
