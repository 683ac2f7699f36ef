# nocturne/routers/auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from nocturne.schemas import LoginIn, PasscodeIn
from nocturne.services import Services, get_services
from nocturne.services.access import Role
from nocturne.utils.authz import current_role, grant_owner, revoke_owner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# ========= login =========
@router.post("/login")
async def login(
    request: Request,
    payload: LoginIn,
    svc: Services = Depends(get_services),
):
    """
    Exchange the shared passcode for an owner session.
    Wrong and never-set passcodes fail the same way.
    """
    if not await svc.gate.verify(payload.passcode):
        logger.warning("Failed owner login")
        return JSONResponse({"detail": "Access denied."}, status_code=401)

    grant_owner(request)
    svc.activity.append("LOGIN", "Curator signed in")
    return {"owner": True}


# ========= logout =========
@router.post("/logout")
def logout(
    request: Request,
    role: Role = Depends(current_role),
    svc: Services = Depends(get_services),
):
    if role is Role.OWNER:
        svc.activity.append("LOGOUT", "Curator signed out")
    revoke_owner(request)
    return {"owner": False}


@router.get("/me")
def me(role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    if role is not Role.OWNER:
        return {"owner": False}
    # only the owner learns whether the default passcode still opens the gate
    return {"owner": True, "defaultPasscode": not svc.gate.has_passcode()}


# ========= passcode =========
@router.post("/passcode")
async def change_passcode(
    payload: PasscodeIn,
    role: Role = Depends(current_role),
    svc: Services = Depends(get_services),
):
    changed = await svc.gate.set_passcode(role, payload.passcode)
    if changed:
        svc.activity.append("PASSCODE_CHANGE", "Passcode updated")
    return {"updated": changed}
