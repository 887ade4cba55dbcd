"""Profile lookup, driver self-service and demo seeding."""

import pytest

from swiftaid.core.errors import NotFoundError
from swiftaid.core.security import verify_password
from swiftaid.models.profile import Admin, Driver
from swiftaid.services.auth_service import authenticate, get_profile_by_email
from swiftaid.services.identity_service import (
    list_drivers,
    resolve_driver,
    resolve_profile,
    set_availability,
    set_location,
    set_on_schedule,
    update_driver_profile,
)
from swiftaid.services.seed_service import DRIVER_ROSTER, seed_demo_accounts


def test_resolve_driver_only_returns_drivers(db, make):
    user, driver = make.user(), make.driver()
    assert resolve_driver(db, driver.id) is driver
    assert resolve_driver(db, user.id) is None
    assert resolve_driver(db, 9999) is None
    assert resolve_profile(db, user.id) is user


def test_polymorphic_loading(db, make):
    admin, driver = make.admin(), make.driver()
    admin_id, driver_id = admin.id, driver.id
    db.expunge_all()
    assert isinstance(resolve_profile(db, admin_id), Admin)
    assert isinstance(resolve_profile(db, driver_id), Driver)


def test_driver_setters(db, make, captured_events):
    driver = make.driver(available=True, on_schedule=False)

    assert set_availability(db, driver.id, False).available is False
    assert set_on_schedule(db, driver.id, True).on_schedule is True
    assert set_location(db, driver.id, "Westlands").location == "Westlands"
    assert driver.is_eligible is False

    assert [e for e, _ in captured_events] == ["driver.updated"] * 3
    assert captured_events[-1][1]["location"] == "Westlands"


def test_setters_reject_non_drivers(db, make):
    with pytest.raises(NotFoundError):
        set_availability(db, make.user().id, True)
    with pytest.raises(NotFoundError):
        set_location(db, 9999, "CBD")


def test_update_driver_profile_ignores_unset_fields(db, make):
    driver = make.driver(name="Old Name", vehicle_number="KAA 111A", phone="+254700000000")
    updated = update_driver_profile(db, driver.id, name="New Name", phone=None, vehicle_number=None, role="admin")
    assert updated.name == "New Name"
    assert updated.phone == "+254700000000"
    assert updated.vehicle_number == "KAA 111A"
    assert updated.role == "driver"


def test_email_lookup_is_case_insensitive(db, make):
    user = make.user(email="mixed.case@test.com")
    assert get_profile_by_email(db, "Mixed.Case@TEST.com") is user


def test_seed_is_idempotent(db):
    first = seed_demo_accounts(db)
    second = seed_demo_accounts(db)

    assert first == {"admins": 1, "drivers": len(DRIVER_ROSTER)}
    assert second == {"admins": 0, "drivers": 0}
    drivers = list_drivers(db)
    assert len(drivers) == len(DRIVER_ROSTER)
    assert sum(1 for d in drivers if d.is_eligible) == 8
    assert all(verify_password("driver123", d.hashed_password) for d in drivers[:1])


def test_seeded_admin_can_log_in(db):
    seed_demo_accounts(db)
    profile = authenticate(db, "admin@swiftaid.com", "admin123")
    assert profile is not None
    assert profile.role == "admin"
    assert authenticate(db, "admin@swiftaid.com", "wrong") is None
