"""Export analysis results to CSV and JSON."""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..models import AnalysisResult


def _serialize(obj: Any) -> Any:
    """JSON serializer for datetime and other objects."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def export_csv(results: list[AnalysisResult], path: Path | str) -> None:
    """Export one summary row per analysis to CSV."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "mode",
        "address",
        "zipcode",
        "price",
        "affordability_score",
        "affordability_level",
        "monthly_payment",
        "dti_ratio",
        "investment_score",
        "cash_flow_monthly",
        "cap_rate",
        "dscr",
        "price_verdict",
        "overall_risk",
        "suggested_offer",
    ]

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for r in results:
            afford = r.affordability
            writer.writerow({
                "mode": r.mode,
                "address": r.property.address,
                "zipcode": r.property.zipcode,
                "price": r.property.price,
                "affordability_score": afford.score if afford else "",
                "affordability_level": afford.level.value if afford else "",
                "monthly_payment": round(afford.payment.total, 2) if afford else "",
                "dti_ratio": "" if afford is None or afford.dti_ratio is None else round(afford.dti_ratio, 1),
                "investment_score": r.investment.score,
                "cash_flow_monthly": round(r.investment.cash_flow_monthly, 2),
                "cap_rate": round(r.investment.cap_rate, 2),
                "dscr": "" if r.investment.dscr is None else round(r.investment.dscr, 2),
                "price_verdict": r.market.verdict.value,
                "overall_risk": r.risk.overall.value,
                "suggested_offer": round(r.recommendations.suggested_offer),
            })


def export_json(results: list[AnalysisResult], path: Path | str) -> None:
    """Export full analysis details to JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "run_at": datetime.now(timezone.utc).isoformat(),
        "count": len(results),
        "results": [r.to_dict() for r in results],
    }

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=_serialize)
