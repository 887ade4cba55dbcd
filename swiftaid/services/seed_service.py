"""Demo account provisioning - the admin and the driver roster."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from swiftaid.core.config import settings
from swiftaid.core.security import hash_password
from swiftaid.models.profile import Admin, Driver
from swiftaid.services.auth_service import get_profile_by_email

logger = logging.getLogger(__name__)

# (name, email, vehicle, phone, location, available)
DRIVER_ROSTER = [
    ("Wambui Kamau", "wambui.kamau@swiftaid.com", "KBA 001X", "+254711234001", "Nairobi CBD", True),
    ("Jabari Ochieng", "jabari.ochieng@swiftaid.com", "KAZ 112Y", "+254711234002", "Westlands", True),
    ("Zawadi Mutua", "zawadi.mutua@swiftaid.com", "KCX 223H", "+254711234003", "Kilimani", True),
    ("Mwangi Ngugi", "mwangi.ngugi@swiftaid.com", "KDJ 334J", "+254711234004", "Eastleigh", True),
    ("Amani Kariuki", "amani.kariuki@swiftaid.com", "KBZ 445K", "+254711234005", "Langata", True),
    ("Baraka Mwangi", "baraka.mwangi@swiftaid.com", "KCA 556L", "+254711234006", "Karen", False),
    ("Zuri Wanjiku", "zuri.wanjiku@swiftaid.com", "KDF 667M", "+254711234007", "Ngong Road", True),
    ("Imani Njoroge", "imani.njoroge@swiftaid.com", "KBC 778N", "+254711234008", "Gigiri", True),
    ("Jomo Kamau", "jomo.kamau@swiftaid.com", "KAW 889P", "+254711234009", "Upperhill", True),
    ("Maisha Kimani", "maisha.kimani@swiftaid.com", "KCE 990Q", "+254711234010", "Embakasi", False),
]


def seed_demo_accounts(db: Session) -> dict[str, int]:
    """Create the admin and roster drivers that do not exist yet. Idempotent."""
    created = {"admins": 0, "drivers": 0}

    if not get_profile_by_email(db, settings.seed_admin_email):
        db.add(
            Admin(
                email=settings.seed_admin_email,
                hashed_password=hash_password(settings.seed_admin_password),
                name="System Administrator",
                phone="+254700123456",
            )
        )
        created["admins"] += 1

    driver_hash = hash_password(settings.seed_driver_password)
    for name, email, vehicle, phone, location, available in DRIVER_ROSTER:
        if get_profile_by_email(db, email):
            continue
        db.add(
            Driver(
                email=email,
                hashed_password=driver_hash,
                name=name,
                phone=phone,
                vehicle_number=vehicle,
                location=location,
                available=available,
                on_schedule=False,
            )
        )
        created["drivers"] += 1

    db.commit()
    logger.info("Seeded %s admin(s) and %s driver(s)", created["admins"], created["drivers"])
    return created
