# nocturne/routers/admin.py
from fastapi import APIRouter, Depends

from nocturne.schemas import CardIn, FounderIn, TextIn, ThemeIn
from nocturne.services import Services, get_services
from nocturne.services.access import Role, ensure_owner
from nocturne.services.settings import FounderProfile, ThemeSettings
from nocturne.utils.authz import current_role

router = APIRouter(prefix="/admin", tags=["admin"])


# --------------- Dashboard ----------------
@router.get("/dashboard")
def dashboard(role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    ensure_owner(role, "dashboard")
    board = svc.moderation.board(role)
    return {
        "counts": {
            "published": len(board.published),
            "drafts": len(board.drafts),
            "community": len(board.community),
            "pending": len(board.pending),
        },
        "pending": [s.to_dict() for s in board.pending],
        "drafts": [s.to_dict() for s in board.drafts],
        "treasury": svc.treasury.statement(role),
        "logs": [e.to_dict() for e in svc.activity.list()[:10]],
    }
# -----------------------------------------


# --------------- Moderation ---------------
@router.post("/stories/{story_id}/approve")
def approve_story(story_id: str, role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    return svc.moderation.approve(role, story_id).to_dict()


@router.post("/stories/{story_id}/reject")
def reject_story(story_id: str, role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    svc.moderation.reject(role, story_id)
    return {"rejected": story_id}
# -----------------------------------------


# --------------- Activity log -------------
@router.get("/logs")
def list_logs(role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    ensure_owner(role, "log view")
    return [e.to_dict() for e in svc.activity.list()]


@router.delete("/logs")
def clear_logs(role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    ensure_owner(role, "log clear")
    svc.activity.clear()
    return {"cleared": True}
# -----------------------------------------


# --------------- Settings -----------------
@router.put("/settings/subtitle")
def save_subtitle(payload: TextIn, role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    ensure_owner(role, "settings update")
    updated = svc.settings.save_subtitle(payload.value)
    if updated:
        svc.activity.append("SETTINGS_UPDATE", "Chronicle subtitle updated")
    return {"updated": updated, "subtitle": svc.settings.subtitle()}


@router.put("/settings/background")
def save_background(payload: TextIn, role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    ensure_owner(role, "settings update")
    updated = svc.settings.save_background_image(payload.value)
    if updated:
        svc.activity.append("SETTINGS_UPDATE", "Live background updated")
    return {"updated": updated, "backgroundImage": svc.settings.background_image()}


@router.put("/settings/theme")
def save_theme(payload: ThemeIn, role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    ensure_owner(role, "settings update")
    svc.settings.save_theme(ThemeSettings(accentColor=payload.accentColor, textColor=payload.textColor))
    svc.activity.append("SETTINGS_UPDATE", "Theme colors updated")
    return {"updated": True, "theme": payload.model_dump()}


@router.put("/settings/founder")
def save_founder(payload: FounderIn, role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    ensure_owner(role, "settings update")
    svc.settings.save_founder(FounderProfile(**payload.model_dump()))
    svc.activity.append("SETTINGS_UPDATE", "Founder profile updated")
    return {"updated": True, "founder": payload.model_dump()}
# -----------------------------------------


# --------------- Treasury -----------------
@router.get("/treasury")
def treasury(role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    return svc.treasury.statement(role)


@router.post("/treasury/card")
async def link_card(payload: CardIn, role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    last4 = await svc.treasury.link_card(role, payload.cardNumber)
    return {"linkedCard": last4}


@router.post("/treasury/withdraw")
def withdraw(role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    amount = svc.treasury.withdraw(role)
    return {"withdrawn": f"{amount:.2f}", "balance": svc.treasury.statement(role)["balance"]}
# -----------------------------------------
