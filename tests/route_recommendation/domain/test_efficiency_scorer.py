# ============================================================
# 🧪 tests/route_recommendation/domain/test_efficiency_scorer.py
# ============================================================

import random
from datetime import timedelta

import pytest

from route_recommendation.domain.efficiency_scorer import (
    EfficiencyScorer,
    efficiency_score,
    primary_area,
    round_half_up,
)
from route_recommendation.domain.entities import GeoPoint
from route_recommendation.domain.geo_math import bounding_box_area_km2, centroid, distance_km


def test_square_cluster_concrete_values(make_customer, today):
    members = [
        make_customer(1, 0.0, 0.0),
        make_customer(2, 0.0, 0.1),
        make_customer(3, 0.1, 0.0),
        make_customer(4, 0.1, 0.1),
    ]
    scorer = EfficiencyScorer(depot=GeoPoint(0.0, 0.0), service_time_minutes_per_stop=30, today=today)

    cluster = scorer.score(members)

    assert cluster.centroid.latitude == pytest.approx(0.05)
    assert cluster.centroid.longitude == pytest.approx(0.05)
    assert cluster.distance_from_depot_km == pytest.approx(7.8627, abs=1e-3)
    assert cluster.avg_radius_from_centroid_km == pytest.approx(7.8627, abs=1e-3)
    assert cluster.density == pytest.approx(4 / 123.21, rel=1e-3)
    assert cluster.efficiency_score == 3
    assert cluster.estimated_travel_minutes == 233
    assert cluster.estimated_km == 63


def test_score_formula_coefficients(make_customer, today):
    rng = random.Random(3)
    members = [make_customer(i, 69 + rng.uniform(0, 0.05), 18 + rng.uniform(0, 0.1)) for i in range(8)]
    depot = GeoPoint(69.6492, 18.9553)
    scorer = EfficiencyScorer(depot=depot, service_time_minutes_per_stop=25, today=today)

    cluster = scorer.score(members)

    pts = [m.location for m in members]
    c = centroid(pts)
    n = len(pts)
    d = distance_km(depot, c)
    r = sum(distance_km(p, c) for p in pts) / n
    dens = n / bounding_box_area_km2(pts)
    raw = (dens * n * 10) / (1 + d * 0.05 + r * 0.3)

    assert cluster.efficiency_score == max(0, min(100, round_half_up(raw * 10)))
    assert cluster.estimated_travel_minutes == round_half_up(
        (d * 2 / 50) * 60 + (r * n * 1.5 / 30) * 60 + n * 25
    )
    assert cluster.estimated_km == round_half_up(d * 2 + r * n * 1.5)


def test_tight_cluster_at_depot_is_clamped_to_100(make_customer, today):
    members = [make_customer(1, 60.0, 10.0), make_customer(2, 60.0, 10.0)]
    scorer = EfficiencyScorer(depot=GeoPoint(60.0, 10.0), today=today)

    cluster = scorer.score(members)

    assert cluster.efficiency_score == 100
    assert cluster.density == pytest.approx(20.0)
    assert cluster.estimated_travel_minutes == 60
    assert cluster.estimated_km == 0


@pytest.mark.parametrize("seed", range(10))
def test_score_is_always_within_bounds(make_customer, today, seed):
    rng = random.Random(seed)
    n = rng.randint(2, 20)
    spread = rng.choice([0.0001, 0.01, 0.5, 3.0])
    members = [make_customer(i, 60 + rng.uniform(0, spread), 10 + rng.uniform(0, spread)) for i in range(n)]
    depot = GeoPoint(rng.uniform(-60, 70), rng.uniform(-170, 170))

    cluster = EfficiencyScorer(depot=depot, today=today).score(members)

    assert 0 <= cluster.efficiency_score <= 100
    assert isinstance(cluster.efficiency_score, int)


def test_overdue_and_upcoming_split(make_customer, today):
    members = [
        make_customer(1, 60.0, 10.0, due_in_days=-5),
        make_customer(2, 60.001, 10.0, due_in_days=0),
        make_customer(3, 60.002, 10.0, due_in_days=20),
        make_customer(4, 60.003, 10.0, due_in_days=-1),
    ]

    cluster = EfficiencyScorer(depot=GeoPoint(60.0, 10.0), today=today).score(members)

    assert cluster.overdue_count == 2
    assert cluster.upcoming_count == 2


def test_overdue_uses_service_records(make_customer, today):
    from route_recommendation.domain.entities import ServiceRecord

    late = make_customer(
        1, 60.0, 10.0, due_in_days=None,
        services=(ServiceRecord(last_done=today - timedelta(days=400), interval_months=12),),
    )
    fine = make_customer(2, 60.001, 10.0, due_in_days=3)

    cluster = EfficiencyScorer(depot=GeoPoint(60.0, 10.0), today=today).score([late, fine])

    assert cluster.overdue_count == 1


def test_primary_area_and_categories(make_customer, today):
    members = [
        make_customer(1, 60.0, 10.0, area="Bardu", category="El-Kontroll"),
        make_customer(2, 60.001, 10.0, area="Setermoen", category="Brannvarsling"),
        make_customer(3, 60.002, 10.0, area="Setermoen", category="El-Kontroll"),
        make_customer(4, 60.003, 10.0, area=None, category=None),
    ]

    cluster = EfficiencyScorer(depot=GeoPoint(60.0, 10.0), today=today).score(members)

    assert cluster.primary_area_name == "Setermoen"
    assert cluster.categories == ["El-Kontroll", "Brannvarsling"]


def test_primary_area_tie_goes_to_first_seen(make_customer):
    members = [
        make_customer(1, 60.0, 10.0, area=None),
        make_customer(2, 60.0, 10.0, area="Bardu"),
    ]

    assert primary_area(members) == "Unknown"


def test_single_member_cannot_be_scored(make_customer, today):
    with pytest.raises(ValueError):
        EfficiencyScorer(depot=GeoPoint(60.0, 10.0), today=today).score([make_customer(1, 60.0, 10.0)])


def test_round_half_up_and_formula_helper():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4999) == 2
    assert efficiency_score(density=0.0, n=5, distance_from_depot_km=10.0, avg_radius_km=1.0) == 0
