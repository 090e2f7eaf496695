# ============================================================
# 🧪 tests/conftest.py
# ============================================================

from datetime import date, timedelta

import pytest

from route_recommendation.domain.entities import CustomerLocation, GeoPoint


TODAY = date(2026, 1, 15)


@pytest.fixture(autouse=True)
def clean_route_env(monkeypatch):
    """Garante defaults de ClusterParameters independentes do ambiente."""
    for name in (
        "ROUTE_DAYS_AHEAD",
        "ROUTE_MAX_CUSTOMERS",
        "ROUTE_MAX_TRAVEL_MIN",
        "ROUTE_MIN_CLUSTER_SIZE",
        "ROUTE_CLUSTER_RADIUS_KM",
        "ROUTE_SERVICE_MIN",
        "ROUTE_DEPOT_LAT",
        "ROUTE_DEPOT_LON",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_customer():
    def _make(cid, lat, lon, due_in_days=10, area=None, category=None, **kwargs):
        due = TODAY + timedelta(days=due_in_days) if due_in_days is not None else None
        return CustomerLocation(
            id=cid,
            location=GeoPoint(lat, lon),
            display_name=f"Cliente {cid}",
            area_name=area,
            category=category,
            next_due_date=due,
            **kwargs,
        )

    return _make
