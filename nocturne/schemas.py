# nocturne/schemas.py
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field

from nocturne.services.generation import DEFAULT_VOICE, GenerationAction


class LoginIn(BaseModel):
    passcode: str = ""


class PasscodeIn(BaseModel):
    passcode: str = ""


class StoryIn(BaseModel):
    title: str = ""
    content: str = ""
    tags: Union[List[str], str, None] = None
    coverImage: Optional[str] = None
    authorName: Optional[str] = None
    publish: bool = False


class TextIn(BaseModel):
    value: str = ""


class ThemeIn(BaseModel):
    accentColor: str
    textColor: str


class FounderIn(BaseModel):
    name: str = ""
    tagline: str = ""
    bio: str = ""
    imageUrl: str = ""


class DonationIn(BaseModel):
    # string or number; parsed to cents by the treasury
    amount: Union[str, float, int]


class CardIn(BaseModel):
    cardNumber: str = ""


class GenerateIn(BaseModel):
    text: str = ""
    action: GenerationAction
    instruction: Optional[str] = None


class TitleIn(BaseModel):
    text: str = ""


class SpeechIn(BaseModel):
    text: str = Field(..., min_length=1)
    voice: str = DEFAULT_VOICE
