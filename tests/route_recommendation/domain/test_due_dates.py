# ============================================================
# 🧪 tests/route_recommendation/domain/test_due_dates.py
# ============================================================

from datetime import date, datetime

from route_recommendation.domain.due_dates import add_months, is_overdue, resolve_next_due_date
from route_recommendation.domain.entities import CustomerLocation, GeoPoint, ServiceRecord


def _customer(next_due=None, services=()):
    return CustomerLocation(id=1, location=GeoPoint(60.0, 10.0), next_due_date=next_due, services=services)


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2025, 6, 15), 36) == date(2028, 6, 15)


def test_explicit_date_wins_over_services():
    c = _customer(
        next_due=date(2026, 3, 1),
        services=(ServiceRecord(next_due=date(2026, 2, 1)),),
    )

    assert resolve_next_due_date(c) == date(2026, 3, 1)


def test_earliest_service_date_is_used():
    c = _customer(
        services=(
            ServiceRecord(service_type="El-Kontroll", last_done=date(2023, 5, 10), interval_months=36),
            ServiceRecord(service_type="Brannvarsling", next_due=date(2026, 7, 1)),
            ServiceRecord(service_type="Feiing"),
        )
    )

    assert resolve_next_due_date(c) == date(2026, 5, 10)


def test_datetime_values_are_reduced_to_dates():
    c = _customer(next_due=datetime(2026, 2, 3, 14, 30))

    assert resolve_next_due_date(c) == date(2026, 2, 3)


def test_no_resolvable_date():
    assert resolve_next_due_date(_customer()) is None
    assert resolve_next_due_date(_customer(services=(ServiceRecord(),))) is None


def test_is_overdue_is_strictly_before_today():
    today = date(2026, 1, 15)

    assert is_overdue(_customer(next_due=date(2026, 1, 14)), today)
    assert not is_overdue(_customer(next_due=today), today)
    assert not is_overdue(_customer(), today)
