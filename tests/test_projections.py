"""Dashboard views and metrics."""

from types import SimpleNamespace

import pytest

from swiftaid.services.dispatch_service import (
    assign_driver,
    complete_job,
    create_request,
    rate_service,
    start_job,
)
from swiftaid.services.projection_service import (
    average_rating,
    completion_rate,
    dashboard_stats,
    driver_stats,
    driver_utilization,
    list_all_requests,
    list_available_drivers,
    list_by_requester,
    partition_requests,
)


def _req(status, rating=None, driver_id=None):
    return SimpleNamespace(status=status, rating=rating, driver_id=driver_id)


def test_available_drivers_filter(db, make):
    """Only available drivers who are off schedule are listed."""
    d1 = make.driver(name="Amani", available=True, on_schedule=False)
    make.driver(name="Baraka", available=False, on_schedule=False)
    make.driver(name="Zawadi", available=True, on_schedule=True)
    d4 = make.driver(name="Jomo", available=True, on_schedule=False)

    assert [d.id for d in list_available_drivers(db)] == [d1.id, d4.id]


def test_partition_requests():
    reqs = [
        _req("pending"),
        _req("assigned", driver_id=1),
        _req("in-progress", driver_id=2),
        _req("completed", driver_id=1),
        _req("pending"),
    ]
    parts = partition_requests(reqs)
    assert [r.status for r in parts.pending] == ["pending", "pending"]
    assert [r.status for r in parts.active] == ["assigned", "in-progress"]
    assert [r.status for r in parts.completed] == ["completed"]


def test_average_rating():
    """Mean over rated completed requests only."""
    reqs = [
        _req("completed", rating=5),
        _req("completed", rating=3),
        _req("completed", rating=4),
        _req("completed"),
        _req("pending"),
    ]
    assert average_rating(reqs) == pytest.approx(4.0)
    assert average_rating([]) == 0.0
    assert average_rating([_req("completed")]) == 0.0


def test_completion_rate():
    assert completion_rate([]) == 0.0
    reqs = [_req("completed"), _req("pending"), _req("assigned"), _req("completed")]
    assert completion_rate(reqs) == pytest.approx(0.5)


def test_driver_utilization():
    drivers = [SimpleNamespace(id=i) for i in (1, 2, 3, 4)]
    reqs = [
        _req("assigned", driver_id=1),
        _req("in-progress", driver_id=2),
        _req("in-progress", driver_id=2),
        _req("completed", driver_id=3),
    ]
    assert driver_utilization(drivers, reqs) == pytest.approx(0.5)
    assert driver_utilization([], reqs) == 0.0


def test_driver_stats():
    reqs = [
        _req("completed", rating=5, driver_id=7),
        _req("completed", rating=3, driver_id=7),
        _req("in-progress", driver_id=7),
        _req("completed", rating=1, driver_id=8),
    ]
    stats = driver_stats(reqs, 7)
    assert stats.total_jobs == 3
    assert stats.completed_jobs == 2
    assert stats.average_rating == pytest.approx(4.0)


def test_dashboard_stats_empty(db):
    stats = dashboard_stats(db)
    assert stats["total_requests"] == 0
    assert stats["total_drivers"] == 0
    assert stats["average_rating"] == 0.0
    assert stats["completion_rate"] == 0.0
    assert stats["driver_utilization"] == 0.0


def test_dashboard_stats_snapshot(db, make, payload):
    user, admin = make.user(), make.admin()
    d1, d2 = make.driver(), make.driver()
    make.driver(available=False)

    done = create_request(db, user, payload)
    assign_driver(db, admin, done.id, d1.id)
    start_job(db, d1, done.id)
    complete_job(db, d1, done.id)
    rate_service(db, user, done.id, 4)

    busy = create_request(db, user, payload)
    assign_driver(db, admin, busy.id, d2.id)

    create_request(db, user, payload)

    stats = dashboard_stats(db)
    assert stats["total_drivers"] == 3
    assert stats["available_drivers"] == 1  # d1 is free again, d2 is on a job
    assert stats["pending_requests"] == 1
    assert stats["active_requests"] == 1
    assert stats["completed_requests"] == 1
    assert stats["total_requests"] == 3
    assert stats["average_rating"] == 4.0
    assert stats["rating_count"] == 1
    assert stats["completion_rate"] == pytest.approx(0.3333)
    assert stats["driver_utilization"] == pytest.approx(0.3333)


def test_request_listings(db, make, payload):
    alice, bob = make.user(), make.user()
    first = create_request(db, alice, payload)
    create_request(db, bob, payload)
    second = create_request(db, alice, payload)

    mine = list_by_requester(db, alice.id)
    assert {r.id for r in mine} == {first.id, second.id}
    assert len(list_all_requests(db)) == 3
    assert len(list_all_requests(db, "pending")) == 3
    assert list_all_requests(db, "completed") == []
