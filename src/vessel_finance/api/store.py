"""In-memory analysis store — ``{parameters, results}`` pairs keyed by owner.

The engine never touches storage; the HTTP layer saves each calculation here
when the request carries an owner identity.  Every read is ownership-checked:
an analysis that belongs to someone else is reported as not found.
"""

from __future__ import annotations

import logging
import math
import threading
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from vessel_finance.errors import AnalysisNotFoundError
from vessel_finance.models.results import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_ANALYSIS_NAME = "Vessel Analysis"


class StoredAnalysis(BaseModel):
    """One saved calculation."""

    id: str
    owner_id: str
    analysis_name: str = DEFAULT_ANALYSIS_NAME
    parameters: dict[str, Any]
    """The raw parameter map as submitted (whole-number percentages)."""
    results: dict[str, Any]
    """``AnalysisResult`` serialized with camelCase keys."""
    created_at: datetime
    updated_at: datetime
    version: int = 1


class AnalysisListItem(BaseModel):
    """Lightweight listing row — headline numbers only, not the full series."""

    id: str
    analysis_name: str
    created_at: datetime
    updated_at: datetime
    vessel_type: str | None = None
    price: float | None = None
    npv: float | None = None
    irr: float | None = None

    @classmethod
    def from_record(cls, record: StoredAnalysis) -> AnalysisListItem:
        return cls(
            id=record.id,
            analysis_name=record.analysis_name,
            created_at=record.created_at,
            updated_at=record.updated_at,
            vessel_type=record.parameters.get("vesselType"),
            price=record.parameters.get("price"),
            npv=record.results.get("npv"),
            irr=record.results.get("irr"),
        )


def sanitize(data: Any) -> Any:
    """Replace NaN/±inf with None so payloads stay JSON-compliant."""
    if isinstance(data, float):
        return data if math.isfinite(data) else None
    if isinstance(data, dict):
        return {key: sanitize(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [sanitize(item) for item in data]
    return data


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisStore:
    """Thread-safe in-process store.

    Parameters
    ----------
    max_per_owner : int
        Oldest analyses are evicted once an owner exceeds this many.
    """

    def __init__(self, max_per_owner: int = 500):
        self.max_per_owner = max_per_owner
        self._records: dict[str, StoredAnalysis] = {}
        self._lock = threading.Lock()

    def save(
        self,
        owner_id: str,
        parameters: dict[str, Any],
        result: AnalysisResult,
        analysis_name: str | None = None,
    ) -> str:
        """Store a calculation and return its id."""
        now = _now()
        record = StoredAnalysis(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            analysis_name=analysis_name or DEFAULT_ANALYSIS_NAME,
            parameters=sanitize(dict(parameters)),
            results=sanitize(result.model_dump(by_alias=True)),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._records[record.id] = record
            self._evict(owner_id)
        logger.info("Saved analysis %s for owner %s", record.id, owner_id)
        return record.id

    def _evict(self, owner_id: str) -> None:
        owned = [r.id for r in self._records.values() if r.owner_id == owner_id]
        for analysis_id in owned[: max(len(owned) - self.max_per_owner, 0)]:
            del self._records[analysis_id]
            logger.info("Evicted analysis %s for owner %s", analysis_id, owner_id)

    def _owned(self, analysis_id: str, owner_id: str) -> StoredAnalysis:
        record = self._records.get(analysis_id)
        if record is None or record.owner_id != owner_id:
            raise AnalysisNotFoundError(analysis_id)
        return record

    def get(self, analysis_id: str, owner_id: str) -> StoredAnalysis:
        with self._lock:
            return self._owned(analysis_id, owner_id)

    def list_for_owner(self, owner_id: str, limit: int | None = 50) -> list[AnalysisListItem]:
        """Owner's analyses, newest first."""
        with self._lock:
            owned = [r for r in reversed(self._records.values()) if r.owner_id == owner_id]
        if limit:
            owned = owned[:limit]
        return [AnalysisListItem.from_record(r) for r in owned]

    def count_for_owner(self, owner_id: str) -> int:
        with self._lock:
            return sum(1 for r in self._records.values() if r.owner_id == owner_id)

    def search(self, owner_id: str, prefix: str, limit: int = 20) -> list[StoredAnalysis]:
        """Owner's analyses whose name starts with ``prefix``, by name then newest first."""
        with self._lock:
            matches = [
                r for r in self._records.values()
                if r.owner_id == owner_id and r.analysis_name.startswith(prefix)
            ]
        matches.sort(key=lambda r: r.created_at, reverse=True)
        matches.sort(key=lambda r: r.analysis_name)
        return matches[:limit]

    def rename(self, analysis_id: str, owner_id: str, analysis_name: str) -> StoredAnalysis:
        with self._lock:
            record = self._owned(analysis_id, owner_id)
            updated = record.model_copy(update={"analysis_name": analysis_name, "updated_at": _now()})
            self._records[analysis_id] = updated
        return updated

    def delete(self, analysis_id: str, owner_id: str) -> None:
        with self._lock:
            self._owned(analysis_id, owner_id)
            del self._records[analysis_id]
        logger.info("Deleted analysis %s for owner %s", analysis_id, owner_id)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
