# nocturne/errors.py
from __future__ import annotations


class NocturneError(Exception):
    """Base class for errors surfaced to the caller as a user-facing message."""

    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(NocturneError):
    status_code = 400


class PermissionDenied(NocturneError):
    status_code = 403


class NotFound(NocturneError):
    status_code = 404


class InvalidTransition(NocturneError):
    """A moderation transition was requested from the wrong state."""

    status_code = 409


class GenerationError(NocturneError):
    """An external text or speech service failed. Never retried."""

    status_code = 502
