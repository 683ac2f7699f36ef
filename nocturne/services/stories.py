# nocturne/services/stories.py
"""
Story entity and repository.

The whole archive lives under one key as an ordered JSON array; every save
rewrites it under the store lock. Newest stories sit at the front.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

from nocturne.store.kv import STORIES_KEY, KeyValueStore, get_json, set_json

EXCERPT_LENGTH = 100
OWNER_AUTHOR_NAME = "The Curator"
GUEST_AUTHOR_NAME = "Anonymous"


def now_ms() -> int:
    return int(time.time() * 1000)


def make_excerpt(content: str) -> str:
    return content[:EXCERPT_LENGTH] + "..."


def placeholder_cover(seed) -> str:
    return f"https://picsum.photos/seed/{seed}/800/600?grayscale"


class AuthorType(str, Enum):
    OWNER = "OWNER"
    GUEST = "GUEST"


class StoryState(str, Enum):
    OWNER_DRAFT = "OWNER_DRAFT"
    OWNER_PUBLISHED = "OWNER_PUBLISHED"
    GUEST_PENDING = "GUEST_PENDING"
    GUEST_PUBLISHED = "GUEST_PUBLISHED"

    @property
    def author_type(self) -> AuthorType:
        if self in (StoryState.OWNER_DRAFT, StoryState.OWNER_PUBLISHED):
            return AuthorType.OWNER
        return AuthorType.GUEST

    @property
    def is_published(self) -> bool:
        return self in (StoryState.OWNER_PUBLISHED, StoryState.GUEST_PUBLISHED)

    @classmethod
    def of(cls, author_type: AuthorType, is_published: bool) -> "StoryState":
        if AuthorType(author_type) is AuthorType.OWNER:
            return cls.OWNER_PUBLISHED if is_published else cls.OWNER_DRAFT
        return cls.GUEST_PUBLISHED if is_published else cls.GUEST_PENDING


@dataclass(frozen=True)
class Story:
    id: str
    title: str
    content: str
    state: StoryState
    created_at: int
    updated_at: int
    tags: List[str] = field(default_factory=list)
    cover_image: Optional[str] = None
    author_name: Optional[str] = None
    excerpt: str = ""

    @property
    def author_type(self) -> AuthorType:
        return self.state.author_type

    @property
    def is_published(self) -> bool:
        return self.state.is_published

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "excerpt": self.excerpt,
            "content": self.content,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "tags": list(self.tags),
            "coverImage": self.cover_image,
            "isPublished": self.is_published,
            "authorType": self.author_type.value,
            "authorName": self.author_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Story":
        content = data.get("content") or ""
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            content=content,
            state=StoryState.of(AuthorType(data.get("authorType", "OWNER")), bool(data.get("isPublished"))),
            created_at=int(data.get("createdAt") or 0),
            updated_at=int(data.get("updatedAt") or 0),
            tags=list(data.get("tags") or []),
            cover_image=data.get("coverImage"),
            author_name=data.get("authorName"),
            excerpt=data.get("excerpt") if data.get("excerpt") is not None else make_excerpt(content),
        )

    def with_state(self, state: StoryState) -> "Story":
        return replace(self, state=state)


class StoryRepository:
    """CRUD over the single serialized story collection."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    @property
    def lock(self):
        return self._store.lock

    def list(self) -> List[Story]:
        return [Story.from_dict(item) for item in get_json(self._store, STORIES_KEY, [])]

    def get_by_id(self, story_id: str) -> Optional[Story]:
        for story in self.list():
            if story.id == story_id:
                return story
        return None

    def save(self, story: Story) -> None:
        """Replace in place when the id exists, otherwise prepend."""
        with self.lock:
            stories = self.list()
            for index, existing in enumerate(stories):
                if existing.id == story.id:
                    stories[index] = story
                    break
            else:
                stories.insert(0, story)
            self._write(stories)

    def delete(self, story_id: str) -> None:
        with self.lock:
            self._write([s for s in self.list() if s.id != story_id])

    def replace_all(self, stories: List[Story]) -> None:
        self._write(stories)

    def _write(self, stories: List[Story]) -> None:
        set_json(self._store, STORIES_KEY, [s.to_dict() for s in stories])
