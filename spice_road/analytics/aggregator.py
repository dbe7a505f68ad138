from __future__ import annotations

from collections import Counter
from typing import Any


def _avg(values: list[float]) -> float:
    return round(sum(values) / len(values), 1) if values else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "shop_search"]
    recommendations = [e for e in events if e["type"] == "recommendations"]
    registrations = [e for e in events if e["type"] == "registration"]
    total = len(searches)

    times = [
        e["response_time_ms"]
        for e in searches + recommendations
        if "response_time_ms" in e
    ]

    # Top search terms (case-folded, blanks ignored)
    term_counter: Counter[str] = Counter()
    for s in searches:
        term = (s.get("search") or "").strip().lower()
        if term:
            term_counter[term] += 1
    top_terms = [{"term": t, "count": c} for t, c in term_counter.most_common(10)]

    # Top regions
    region_counter: Counter[str] = Counter()
    for s in searches:
        for r in s.get("regions", []) or []:
            region_counter[r] += 1
    top_regions = [{"name": n, "count": c} for n, c in region_counter.most_common(10)]

    ranked = sum(1 for s in searches if s.get("ranked"))
    empty = sum(1 for s in searches if s.get("results_returned", 0) == 0)

    return {
        "total_searches": total,
        "avg_response_time_ms": _avg(times),
        "top_search_terms": top_terms,
        "top_regions": top_regions,
        "ranked_search_rate": round(ranked / total * 100, 1) if total else 0.0,
        "empty_result_rate": round(empty / total * 100, 1) if total else 0.0,
        "recommendation_requests": len(recommendations),
        "registrations": {
            "total": len(registrations),
            "succeeded": sum(1 for r in registrations if r.get("success")),
        },
    }
