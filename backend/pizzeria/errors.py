# Overview: Domain exception taxonomy shared by services and routes.

from __future__ import annotations


class StorefrontError(Exception):
    """Base for domain errors surfaced to API callers."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class NotFoundError(StorefrontError):
    """Referenced entity is absent (404)."""


class InsufficientInventoryError(StorefrontError):
    """Requested quantity exceeds current stock for a named product."""


class InvalidStatusError(StorefrontError):
    """Order status outside the state machine."""
