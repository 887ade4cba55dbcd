"""Dispatch error taxonomy.

Services raise these; routers translate them into HTTP responses. They
subclass ValueError so callers that only care about "the operation was
refused" can keep catching ValueError.
"""

from __future__ import annotations


class DispatchError(ValueError):
    """Base class for every failure raised by the dispatch services."""


class NotFoundError(DispatchError):
    """A referenced request or profile does not exist."""


class InvalidTransitionError(DispatchError):
    """The requested change is not legal from the request's current status."""


class ValidationError(DispatchError):
    """Input is missing or malformed (empty message, rating out of range)."""


class ForbiddenError(DispatchError):
    """The caller is not allowed to act on this request."""


class PersistenceError(DispatchError):
    """The backing store failed. Safe for the caller to retry."""
