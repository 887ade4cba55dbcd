"""SQLAlchemy models."""

from __future__ import annotations

from swiftaid.models.chat_message import ChatMessage
from swiftaid.models.emergency_request import EmergencyRequest
from swiftaid.models.profile import Admin, Driver, Profile, User

__all__ = [
    "Profile",
    "User",
    "Driver",
    "Admin",
    "EmergencyRequest",
    "ChatMessage",
]
