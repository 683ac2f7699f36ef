# nocturne/routers/ai.py
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from nocturne.schemas import GenerateIn, SpeechIn, TitleIn
from nocturne.services import Services, get_services

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/generate")
async def generate(payload: GenerateIn, svc: Services = Depends(get_services)):
    text = await svc.generator.generate_text(payload.text, payload.action, payload.instruction)
    return {"text": text}


@router.post("/title")
async def title(payload: TitleIn, svc: Services = Depends(get_services)):
    return {"title": await svc.generator.generate_title(payload.text)}


@router.post("/speech")
async def speech(payload: SpeechIn, svc: Services = Depends(get_services)):
    # 24kHz 16-bit mono PCM as returned by the TTS model
    audio = await svc.generator.synthesize_speech(payload.text, payload.voice)
    return Response(content=audio, media_type="application/octet-stream")
