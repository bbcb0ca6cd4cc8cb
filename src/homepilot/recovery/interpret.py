"""Read a recovered generator record into a GeneratedAnalysis."""

from __future__ import annotations

from typing import Any

from ..errors import RecoveryFailed
from ..models import GeneratedAnalysis
from .parser import recover_document

_BREAKDOWN_KEYS = (
    "paymentBreakdown",
    "financialBreakdown",
    "incomeBreakdown",
    "insuranceBreakdown",
    "propertyTaxBreakdown",
    "hoaFeesBreakdown",
    "maintenanceBreakdown",
)


def _first(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.replace("$", "").replace(",", "").replace("%", "").strip())
        except ValueError:
            return None
    return None


def _text_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, list):
        return tuple(str(v) for v in value if v is not None and str(v).strip())
    return (str(value),)


def interpret_generated(raw: str) -> GeneratedAnalysis:
    """Recover ``raw`` and read the analysis fields out of it.

    The record itself is kept as recovered; only the typed view is coerced.
    """
    doc = recover_document(raw)
    record = doc.data
    if not isinstance(record, dict):
        raise RecoveryFailed(raw, doc.text, f"expected an object, got {type(record).__name__}")

    score = _as_number(_first(record, "affordabilityScore", "investmentScore", "score"))
    level = _first(record, "affordabilityLevel", "investmentLevel", "level")
    summary = record.get("fiveYearSummary")
    message = _first(record, "advisorMessage", "williamRecommendation")

    return GeneratedAnalysis(
        record=record,
        score=None if score is None else int(round(score)),
        level=None if level is None else str(level),
        monthly_payment=_as_number(record.get("monthlyPayment")),
        dti_ratio=_as_number(record.get("dtiRatio")),
        insights=_text_list(record.get("keyInsights")),
        warnings=_text_list(record.get("warnings")),
        advisor_message="" if message is None else str(message),
        breakdowns={k: record[k] for k in _BREAKDOWN_KEYS if isinstance(record.get(k), dict)},
        five_year_summary=summary if isinstance(summary, dict) else None,
        repaired=doc.repaired,
    )
