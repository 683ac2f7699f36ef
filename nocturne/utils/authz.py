# nocturne/utils/authz.py
"""
Session role helpers.

The owner flag lives in the signed session cookie next to the boot id of the
process that granted it. A restart mints a new boot id, so every owner
session ends with the process.
"""
from __future__ import annotations

from fastapi import Request

from nocturne.services.access import Role

_SESSION_KEY = "owner_boot"


def role_from_session(request: Request) -> Role:
    try:
        boot = request.session.get(_SESSION_KEY)
    except AssertionError:
        # SessionMiddleware not installed
        return Role.GUEST
    if boot and boot == request.app.state.boot_id:
        return Role.OWNER
    return Role.GUEST


def current_role(request: Request) -> Role:
    """FastAPI dependency. Prefers what the middleware attached."""
    role = getattr(request.state, "role", None)
    return role if role is not None else role_from_session(request)


def grant_owner(request: Request) -> None:
    request.session[_SESSION_KEY] = request.app.state.boot_id
    request.state.role = Role.OWNER


def revoke_owner(request: Request) -> None:
    request.session.pop(_SESSION_KEY, None)
    request.state.role = Role.GUEST
