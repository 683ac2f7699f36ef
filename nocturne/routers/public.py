# nocturne/routers/public.py
from fastapi import APIRouter, Depends

from nocturne.schemas import DonationIn
from nocturne.services import Services, get_services

router = APIRouter(tags=["public"])


@router.get("/api/settings")
def site_settings(svc: Services = Depends(get_services)):
    """Subtitle, background, theme and founder profile for the page chrome."""
    return svc.settings.snapshot()


@router.post("/treasury/donate")
async def donate(payload: DonationIn, svc: Services = Depends(get_services)):
    await svc.treasury.donate(payload.amount)
    return {"accepted": True, "message": "Your offering has been accepted. The Curator thanks you."}
