# nocturne/services/settings.py
from __future__ import annotations

from dataclasses import asdict, dataclass

from nocturne.store.kv import (
    BG_IMAGE_KEY,
    FOUNDER_KEY,
    SUBTITLE_KEY,
    THEME_KEY,
    KeyValueStore,
    get_json,
    set_json,
)

DEFAULT_SUBTITLE = "The Official Chronicles. Tales from the curator of the dark."
DEFAULT_BACKGROUND = (
    "https://images.unsplash.com/photo-1511497584788-876760111969?q=80&w=2670&auto=format&fit=crop"
)


@dataclass
class ThemeSettings:
    accentColor: str = "#8a0000"
    textColor: str = "#e0e0e0"


@dataclass
class FounderProfile:
    name: str = "The Curator"
    tagline: str = "Weaving shadows into stories."
    bio: str = (
        "I have always been drawn to the dark. Not for the fear it brings, but for the silence it offers.\n\n"
        "Here in the Nocturne Weave, I collect the whispers that others ignore. Every story is a thread, "
        "and every thread binds us closer to the void. My work is not to scare you, but to remind you "
        "that you are not alone in the dark."
    )
    imageUrl: str = (
        "https://images.unsplash.com/photo-1500917293891-ef795e70e1f6?q=80&w=2000&auto=format&fit=crop"
    )


class SettingsStore:
    """Presentation settings. Values are not validated."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def subtitle(self) -> str:
        return self._store.get(SUBTITLE_KEY) or DEFAULT_SUBTITLE

    def save_subtitle(self, text: str) -> bool:
        if not text or not text.strip():
            return False
        self._store.set(SUBTITLE_KEY, text)
        return True

    def background_image(self) -> str:
        return self._store.get(BG_IMAGE_KEY) or DEFAULT_BACKGROUND

    def save_background_image(self, url: str) -> bool:
        if not url or not url.strip():
            return False
        self._store.set(BG_IMAGE_KEY, url.strip())
        return True

    def theme(self) -> ThemeSettings:
        data = get_json(self._store, THEME_KEY)
        return ThemeSettings(**data) if data else ThemeSettings()

    def save_theme(self, theme: ThemeSettings) -> None:
        set_json(self._store, THEME_KEY, asdict(theme))

    def founder(self) -> FounderProfile:
        data = get_json(self._store, FOUNDER_KEY)
        return FounderProfile(**data) if data else FounderProfile()

    def save_founder(self, profile: FounderProfile) -> None:
        set_json(self._store, FOUNDER_KEY, asdict(profile))

    def snapshot(self) -> dict:
        return {
            "subtitle": self.subtitle(),
            "backgroundImage": self.background_image(),
            "theme": asdict(self.theme()),
            "founder": asdict(self.founder()),
        }
