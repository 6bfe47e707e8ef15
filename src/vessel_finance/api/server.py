"""FastAPI server — HTTP surface for the vessel finance engine.

Run with:
    uvicorn vessel_finance.api.server:app --reload --port 8000

Or:
    python -m vessel_finance.api.server

Endpoints:
    GET    /health               — liveness probe
    GET    /schema               — JSON Schema of the parameter map
    GET    /parameters/example   — complete example parameter map
    POST   /calculate            — run the analysis (and store it for the owner)
    POST   /calculate/narrative  — run + plain-English interpretation
    GET    /analyses             — owner's stored analyses, newest first (?search= name prefix)
    GET    /analyses/count       — number of stored analyses for the owner
    GET    /analyses/{id}        — one stored analysis
    PATCH  /analyses/{id}        — rename a stored analysis
    DELETE /analyses/{id}        — delete a stored analysis

The owning identity arrives in the ``X-Owner-Id`` header, set by whatever
authenticates the caller upstream.  This service does not verify it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from vessel_finance.api.narrative import generate_narrative
from vessel_finance.api.store import AnalysisListItem, AnalysisStore, StoredAnalysis
from vessel_finance.config.analysis import AnalysisConfig
from vessel_finance.config.parameters import PERCENT_FIELDS, REQUIRED_FIELDS, InvestmentParameters
from vessel_finance.config.settings import configure_logging, settings
from vessel_finance.engine.orchestrator import run_analysis
from vessel_finance.errors import AnalysisNotFoundError, ParameterError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="Vessel Finance API",
    version="1.0.0",
    description=(
        "Deterministic vessel investment analysis: year-by-year cash flows, "
        "loan amortization, NPV, IRR, payback period and debt-service coverage "
        "from one flat parameter map."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

store = AnalysisStore(max_per_owner=settings.max_analyses_per_owner)


EXAMPLE_PARAMETERS: dict[str, Any] = {
    "vesselType": "Panamax Bulk Carrier",
    "age": 10,
    "dwt": 82000,
    "currency": "USD",
    "price": 25_000_000,
    "downPaymentPercent": 30,
    "loanTermYears": 7,
    "interestRatePercent": 6.5,
    "dailyCharterRate": 18_000,
    "opexPerDay": 4_000,
    "utilizationPercent": 85,
    "scrapValue": 3_750_000,
}


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class CalculateRequest(BaseModel):
    """Request body for /calculate."""
    parameters: dict[str, Any] = Field(
        description="Flat parameter map, percentages as whole numbers. "
                    "Example: {'price': 25000000, 'downPaymentPercent': 30, 'loanTermYears': 7, ...}",
    )
    analysis_name: str | None = Field(default=None, description="Label for the stored analysis.")
    config: AnalysisConfig | None = Field(
        default=None,
        description="Optional discount rate / horizon / IRR solver overrides.",
    )


class CalculateResponse(BaseModel):
    """Response from /calculate. ``results`` uses camelCase keys."""
    success: bool = True
    results: dict[str, Any]
    calculated_at: datetime
    analysis_id: str | None = None


class RenameRequest(BaseModel):
    analysis_name: str = Field(min_length=1)


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def get_store() -> AnalysisStore:
    return store


def require_owner(x_owner_id: str | None = Header(default=None)) -> str:
    if not x_owner_id:
        raise HTTPException(status_code=401, detail="Owner identity required (X-Owner-Id header)")
    return x_owner_id


def get_parameter_schema() -> dict[str, Any]:
    """JSON Schema of the wire map: percentages are whole numbers 0–100."""
    schema = InvestmentParameters.model_json_schema(by_alias=True)
    props = schema["properties"]
    for field in PERCENT_FIELDS:
        props[field]["maximum"] = 100
        props[field]["description"] = props[field]["description"].replace(
            "as a fraction (0–1)", "as a whole-number percent (0–100)",
        )
    schema["required"] = list(REQUIRED_FIELDS)
    return schema


def _now() -> datetime:
    return datetime.now(timezone.utc)


@app.exception_handler(ParameterError)
async def parameter_error_handler(request: Request, exc: ParameterError):
    logger.warning("Rejected parameters on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=400,
        content={"error": str(exc), "field": exc.field},
    )


@app.exception_handler(AnalysisNotFoundError)
async def not_found_handler(request: Request, exc: AnalysisNotFoundError):
    return JSONResponse(status_code=404, content={"error": "Analysis not found", "analysis_id": exc.analysis_id})


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    """Health check for deployment platforms."""
    return {"status": "ok", "timestamp": _now().isoformat()}


@app.get("/")
def root():
    return {
        "name": "Vessel Finance API",
        "version": "1.0.0",
        "start_here": "GET /parameters/example, then POST /calculate",
        "docs": "GET /docs (interactive Swagger UI)",
    }


@app.get("/schema")
def get_schema():
    """JSON Schema of the parameter map accepted by /calculate."""
    return get_parameter_schema()


@app.get("/parameters/example")
def get_example_parameters():
    """A complete, valid parameter map. Use it as a starting point."""
    return dict(EXAMPLE_PARAMETERS)


@app.post("/calculate", response_model=CalculateResponse)
def calculate(
    req: CalculateRequest,
    x_owner_id: str | None = Header(default=None),
    analyses: AnalysisStore = Depends(get_store),
):
    """Run the vessel investment analysis.

    Validation failures return 400 with the engine's message unchanged.
    When ``X-Owner-Id`` is sent, the ``{parameters, results}`` pair is stored
    and its id returned as ``analysis_id``.
    """
    result = run_analysis(req.parameters, req.config)

    analysis_id = None
    if x_owner_id:
        analysis_id = analyses.save(x_owner_id, req.parameters, result, req.analysis_name)

    return CalculateResponse(
        results=result.model_dump(by_alias=True),
        calculated_at=_now(),
        analysis_id=analysis_id,
    )


@app.post("/calculate/narrative")
def calculate_with_narrative(req: CalculateRequest):
    """Run the analysis and return the plain-English narrative plus headline metrics."""
    result = run_analysis(req.parameters, req.config)
    return {
        "narrative": generate_narrative(result),
        "headline_metrics": {
            "npv": round(result.npv, 2),
            "irr": round(result.irr, 4),
            "irr_converged": result.irr_converged,
            "payback_period": round(result.payback_period, 2) if result.payback_period is not None else None,
            "dscr": (
                round(result.key_ratios.debt_service_coverage_ratio, 2)
                if result.key_ratios.debt_service_coverage_ratio is not None else None
            ),
        },
    }


@app.get("/analyses", response_model=list[AnalysisListItem])
def list_analyses(
    limit: int = Query(default=50, ge=1, le=500),
    search: str | None = Query(default=None, min_length=1, description="Analysis name prefix."),
    owner_id: str = Depends(require_owner),
    analyses: AnalysisStore = Depends(get_store),
):
    """Owner's stored analyses, newest first. Headline numbers only.

    With ``search``, only names starting with that prefix, ordered by name.
    """
    if search:
        return [AnalysisListItem.from_record(r) for r in analyses.search(owner_id, search, limit)]
    return analyses.list_for_owner(owner_id, limit)


@app.get("/analyses/count")
def count_analyses(
    owner_id: str = Depends(require_owner),
    analyses: AnalysisStore = Depends(get_store),
):
    """How many analyses the owner has stored."""
    return {"count": analyses.count_for_owner(owner_id)}


@app.get("/analyses/{analysis_id}", response_model=StoredAnalysis)
def get_analysis(
    analysis_id: str,
    owner_id: str = Depends(require_owner),
    analyses: AnalysisStore = Depends(get_store),
):
    return analyses.get(analysis_id, owner_id)


@app.patch("/analyses/{analysis_id}", response_model=StoredAnalysis)
def rename_analysis(
    analysis_id: str,
    req: RenameRequest,
    owner_id: str = Depends(require_owner),
    analyses: AnalysisStore = Depends(get_store),
):
    return analyses.rename(analysis_id, owner_id, req.analysis_name)


@app.delete("/analyses/{analysis_id}")
def delete_analysis(
    analysis_id: str,
    owner_id: str = Depends(require_owner),
    analyses: AnalysisStore = Depends(get_store),
):
    analyses.delete(analysis_id, owner_id)
    return {"success": True, "deleted_at": _now().isoformat()}


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn

    configure_logging()
    logger.info("Starting Vessel Finance API on %s:%d", settings.host, settings.port)
    uvicorn.run(
        "vessel_finance.api.server:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
