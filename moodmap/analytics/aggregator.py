from __future__ import annotations

from collections import Counter
from typing import Any

from .store import SEARCH_EVENT


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == SEARCH_EVENT]
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Top moods
    mood_counter: Counter[str] = Counter()
    for s in searches:
        mood_counter[s.get("mood", "unknown")] += 1
    top_moods = [{"name": n, "count": c} for n, c in mood_counter.most_common(10)]

    custom_prompts = sum(1 for s in searches if s.get("custom_prompt"))

    # Outcomes
    upstream_errors = sum(1 for s in searches if s.get("upstream_error"))
    empty_results = sum(
        1 for s in searches
        if not s.get("upstream_error") and s.get("results_returned", 0) == 0
    )

    # Cache stats
    cache_hits = sum(1 for s in searches if s.get("cache_hit"))
    cache_misses = total - cache_hits

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "top_moods": top_moods,
        "custom_prompt_rate": round(custom_prompts / total * 100, 1) if total else 0.0,
        "upstream_errors": upstream_errors,
        "empty_results": empty_results,
        "cache_stats": {
            "hits": cache_hits,
            "misses": cache_misses,
            "hit_rate": round(cache_hits / total * 100, 1) if total else 0.0,
        },
    }
