# nocturne/services/generation.py
"""
Writing-assistant collaborators backed by the Gemini REST API.

No retries, no caching. Text and speech failures raise GenerationError;
title generation falls back to "Untitled".
"""
from __future__ import annotations

import base64
import binascii
import logging
from enum import Enum
from typing import Optional

import httpx

from nocturne import config
from nocturne.errors import GenerationError

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "Untitled"
DEFAULT_VOICE = "Fenrir"
MAX_SPEECH_CHARS = 5000
TITLE_SOURCE_CHARS = 500

STORYTELLER = (
    "You are a master storyteller specializing in dark, atmospheric, and weird fiction. "
    "You write with elegant prose."
)
WRITING_COACH = "You are a creative writing coach specializing in dark fiction."


class GenerationAction(str, Enum):
    CONTINUE = "continue"
    IMPROVE = "improve"
    IDEAS = "ideas"


def build_prompt(current_text: str, action: GenerationAction, instruction: Optional[str] = None):
    """Return (prompt, system_instruction) for an editor action."""
    system = STORYTELLER
    if action is GenerationAction.CONTINUE:
        prompt = (
            "Continue the following story. Maintain the tone and style. Do not repeat the last sentence, "
            f"just pick up where it left off.\n\nStory so far:\n{current_text}"
        )
    elif action is GenerationAction.IMPROVE:
        prompt = (
            "Rewrite the following text to be more evocative, sensory, and atmospheric. Keep the original "
            f"meaning but enhance the prose.\n\nText:\n{current_text}"
        )
    else:
        prompt = f"Give me 3 unique, dark, and twisty plot ideas based on this premise:\n{current_text}"
        system = WRITING_COACH
    if instruction:
        prompt += f"\n\nAdditional Instruction: {instruction}"
    return prompt, system


def _first_part(payload: dict) -> dict:
    try:
        return payload["candidates"][0]["content"]["parts"][0]
    except (KeyError, IndexError, TypeError):
        return {}


class StoryGenerator:
    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        tts_model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = config.GEMINI_API_KEY if api_key is None else api_key
        self.base_url = (base_url or config.GEMINI_BASE_URL).rstrip("/")
        self.model = model or config.GEMINI_MODEL
        self.tts_model = tts_model or config.GEMINI_TTS_MODEL
        self.timeout = config.GENERATION_TIMEOUT_SEC if timeout is None else timeout
        self._transport = transport

    async def _generate(self, model: str, body: dict) -> dict:
        if not self.api_key:
            raise GenerationError("API key missing. Cannot generate content.")
        url = f"{self.base_url}/models/{model}:generateContent"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(url, params={"key": self.api_key}, json=body)
            resp.raise_for_status()
            return resp.json()

    async def generate_text(
        self, current_text: str, action: GenerationAction, instruction: Optional[str] = None
    ) -> str:
        prompt, system = build_prompt(current_text, GenerationAction(action), instruction)
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "systemInstruction": {"parts": [{"text": system}]},
            "generationConfig": {"temperature": 0.8, "topK": 40, "maxOutputTokens": 1000},
        }
        try:
            payload = await self._generate(self.model, body)
        except GenerationError:
            raise
        except (httpx.HTTPError, ValueError) as e:
            logger.exception("Text generation failed")
            raise GenerationError("Failed to generate content.") from e
        return _first_part(payload).get("text") or ""

    async def generate_title(self, text: str) -> str:
        body = {
            "contents": [
                {
                    "parts": [
                        {
                            "text": "Generate a short, mysterious, and catchy title for this story. "
                            "Return ONLY the title, no quotes.\n\nStory excerpt:\n"
                            + (text or "")[:TITLE_SOURCE_CHARS]
                        }
                    ]
                }
            ]
        }
        try:
            payload = await self._generate(self.model, body)
        except (GenerationError, httpx.HTTPError, ValueError):
            logger.warning("Title generation failed; using fallback")
            return FALLBACK_TITLE
        return (_first_part(payload).get("text") or "").strip() or FALLBACK_TITLE

    async def synthesize_speech(self, text: str, voice: str = DEFAULT_VOICE) -> bytes:
        """Raw PCM samples for the given text."""
        safe_text = text if len(text) <= MAX_SPEECH_CHARS else text[:MAX_SPEECH_CHARS] + "..."
        body = {
            "contents": [{"parts": [{"text": safe_text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice or DEFAULT_VOICE}}},
            },
        }
        try:
            payload = await self._generate(self.tts_model, body)
        except GenerationError:
            raise
        except (httpx.HTTPError, ValueError) as e:
            logger.exception("Speech synthesis failed")
            raise GenerationError("Failed to synthesize speech.") from e

        data = (_first_part(payload).get("inlineData") or {}).get("data")
        if not data:
            raise GenerationError("No audio generated")
        try:
            return base64.b64decode(data)
        except (binascii.Error, ValueError) as e:
            raise GenerationError("No audio generated") from e
