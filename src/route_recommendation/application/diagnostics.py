# ============================================================
# 📦 src/route_recommendation/application/diagnostics.py
# ============================================================

from datetime import date
from typing import Any, Dict, Sequence

from route_recommendation.domain.due_dates import horizon_end, resolve_next_due_date
from route_recommendation.domain.entities import ClusterParameters, CustomerLocation


NO_CUSTOMERS = "NO_CUSTOMERS"
NO_COORDINATES = "NO_COORDINATES"
NO_DUE_DATES = "NO_DUE_DATES"
NONE_DUE_WITHIN_HORIZON = "NONE_DUE_WITHIN_HORIZON"
TOO_FEW_DUE = "TOO_FEW_DUE"
NO_CLUSTERS = "NO_CLUSTERS"

# abaixo disso não há clusters nem pela área
TOO_FEW_THRESHOLD = 3


def explain_empty_result(
    customers: Sequence[CustomerLocation],
    params: ClusterParameters,
    today: date,
) -> Dict[str, Any]:
    """Explica por que uma execução não gerou nenhuma recomendação."""
    total = len(customers)
    with_coords = sum(1 for c in customers if c.location.is_valid)
    with_dates = sum(1 for c in customers if resolve_next_due_date(c) is not None)

    limit = horizon_end(today, params.days_ahead_horizon)
    due = 0
    for c in customers:
        if not c.location.is_valid:
            continue
        d = resolve_next_due_date(c)
        if d is not None and d <= limit:
            due += 1

    if total == 0:
        reason = NO_CUSTOMERS
    elif with_coords == 0:
        reason = NO_COORDINATES
    elif with_dates == 0:
        reason = NO_DUE_DATES
    elif due == 0:
        reason = NONE_DUE_WITHIN_HORIZON
    elif due < TOO_FEW_THRESHOLD:
        reason = TOO_FEW_DUE
    else:
        reason = NO_CLUSTERS

    return {
        "reason": reason,
        "totalCustomers": total,
        "withCoordinates": with_coords,
        "withDueDates": with_dates,
        "dueWithinHorizon": due,
        "daysAheadHorizon": params.days_ahead_horizon,
    }
