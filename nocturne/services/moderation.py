# nocturne/services/moderation.py
"""
Publish / draft / pending state machine on top of the story repository.

    OWNER_DRAFT  <-> OWNER_PUBLISHED        owner re-saves with the other intent
    GUEST_PENDING -> GUEST_PUBLISHED        approve (owner only)
    GUEST_PENDING -> deleted                reject (owner only)
    any           -> deleted                delete (owner only)

Guest-authored stories never reach GUEST_PUBLISHED except through approve().
Role checks for all of the above happen here, not in the routers.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, List, Optional, Union

from nocturne.errors import InvalidTransition, NotFound, PermissionDenied, ValidationError
from nocturne.services.access import Role, ensure_owner
from nocturne.services.activity import ActivityLog
from nocturne.services.stories import (
    GUEST_AUTHOR_NAME,
    OWNER_AUTHOR_NAME,
    AuthorType,
    Story,
    StoryRepository,
    StoryState,
    make_excerpt,
    now_ms,
    placeholder_cover,
)

logger = logging.getLogger(__name__)


def parse_tags(raw: Union[str, Iterable[str], None]) -> List[str]:
    """'a, b,, a' -> ['a', 'b', 'a']. Order and duplicates are kept."""
    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    return [t.strip() for t in items if t and t.strip()]


@dataclass
class StoryDraft:
    """What the editor hands over on save."""

    title: str
    content: str
    tags: Union[str, List[str], None] = None
    cover_image: Optional[str] = None
    author_name: Optional[str] = None


@dataclass
class Board:
    """Read-side projection; the four lists never overlap."""

    published: List[Story] = field(default_factory=list)
    drafts: List[Story] = field(default_factory=list)
    community: List[Story] = field(default_factory=list)
    pending: List[Story] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "published": [s.to_dict() for s in self.published],
            "drafts": [s.to_dict() for s in self.drafts],
            "community": [s.to_dict() for s in self.community],
            "pending": [s.to_dict() for s in self.pending],
        }


def can_edit(role: Role, story: Story) -> bool:
    return role is Role.OWNER or story.author_type is AuthorType.GUEST


class ModerationWorkflow:
    def __init__(
        self,
        stories: StoryRepository,
        activity: ActivityLog,
        clock: Callable[[], int] = now_ms,
    ):
        self._stories = stories
        self._activity = activity
        self._clock = clock

    # ---------- saves ----------
    def submit(
        self,
        role: Role,
        draft: StoryDraft,
        *,
        publish: bool = False,
        story_id: Optional[str] = None,
    ) -> Story:
        """Create (story_id=None) or fully replace a story from the editor."""
        title = draft.title or ""
        content = draft.content or ""
        if not title.strip() or not content.strip():
            raise ValidationError("The story cannot be empty.")

        if story_id is None:
            return self._create(role, draft, title, content, publish)
        with self._stories.lock:
            return self._update(role, story_id, draft, title, content, publish)

    def _create(self, role: Role, draft: StoryDraft, title: str, content: str, publish: bool) -> Story:
        now = self._clock()
        if role is Role.OWNER:
            state = StoryState.OWNER_PUBLISHED if publish else StoryState.OWNER_DRAFT
            default_name = OWNER_AUTHOR_NAME
        else:
            # publish intent is never honoured for guests
            state = StoryState.GUEST_PENDING
            default_name = GUEST_AUTHOR_NAME

        story = Story(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            excerpt=make_excerpt(content),
            state=state,
            created_at=now,
            updated_at=now,
            tags=parse_tags(draft.tags),
            cover_image=(draft.cover_image or "").strip() or placeholder_cover(now),
            author_name=(draft.author_name or "").strip() or default_name,
        )
        self._stories.save(story)

        if role is Role.OWNER:
            self._activity.append("STORY_CREATE", f"{state.value}: {title}")
        else:
            self._activity.append("STORY_SUBMIT", f"Guest submission awaiting review: {title}")
        logger.info("Created story id=%s state=%s", story.id, state.value)
        return story

    def _update(
        self, role: Role, story_id: str, draft: StoryDraft, title: str, content: str, publish: bool
    ) -> Story:
        existing = self.open_for_edit(role, story_id)

        if existing.author_type is AuthorType.OWNER:
            state = StoryState.OWNER_PUBLISHED if publish else StoryState.OWNER_DRAFT
        elif role is Role.OWNER:
            # owner edits leave moderation state alone; approve() is the only way in
            state = existing.state
        else:
            state = StoryState.GUEST_PENDING

        updated = replace(
            existing,
            title=title,
            content=content,
            excerpt=make_excerpt(content),
            state=state,
            updated_at=max(self._clock(), existing.updated_at + 1),
            tags=parse_tags(draft.tags),
            cover_image=(draft.cover_image or "").strip() or existing.cover_image or placeholder_cover(existing.created_at),
            author_name=(draft.author_name or "").strip() or existing.author_name,
        )
        self._stories.save(updated)

        if role is Role.OWNER:
            self._activity.append("STORY_UPDATE", f"{state.value}: {title}")
        else:
            self._activity.append("STORY_SUBMIT", f"Guest revision awaiting review: {title}")
        logger.info("Updated story id=%s state=%s -> %s", story_id, existing.state.value, state.value)
        return updated

    # ---------- moderation ----------
    def approve(self, role: Role, story_id: str) -> Story:
        ensure_owner(role, "approve")
        with self._stories.lock:
            story = self._require(story_id)
            if story.state is not StoryState.GUEST_PENDING:
                raise InvalidTransition(f"Only pending submissions can be approved (story is {story.state.value}).")
            approved = story.with_state(StoryState.GUEST_PUBLISHED)
            self._stories.save(approved)
        self._activity.append("STORY_APPROVE", story.title)
        logger.info("Approved story id=%s", story_id)
        return approved

    def reject(self, role: Role, story_id: str) -> None:
        ensure_owner(role, "reject")
        with self._stories.lock:
            story = self._require(story_id)
            if story.state is not StoryState.GUEST_PENDING:
                raise InvalidTransition(f"Only pending submissions can be rejected (story is {story.state.value}).")
            self._stories.delete(story_id)
        self._activity.append("STORY_REJECT", story.title)
        logger.info("Rejected story id=%s", story_id)

    def delete(self, role: Role, story_id: str) -> None:
        ensure_owner(role, "delete")
        with self._stories.lock:
            story = self._require(story_id)
            self._stories.delete(story_id)
        self._activity.append("STORY_DELETE", story.title)
        logger.info("Deleted story id=%s", story_id)

    # ---------- reads ----------
    def open_for_edit(self, role: Role, story_id: str) -> Story:
        story = self._require(story_id)
        if not can_edit(role, story):
            logger.warning("Denied edit of owner story id=%s", story_id)
            raise PermissionDenied("Only the Curator may edit this chronicle.")
        return story

    def read(self, role: Role, story_id: str) -> Story:
        story = self._stories.get_by_id(story_id)
        if story is None or (role is not Role.OWNER and not story.is_published):
            raise NotFound("Story not found.")
        return story

    def board(self, role: Role) -> Board:
        board = Board()
        for story in self._stories.list():
            if story.state is StoryState.OWNER_PUBLISHED:
                board.published.append(story)
            elif story.state is StoryState.GUEST_PUBLISHED:
                board.community.append(story)
            elif role is Role.OWNER and story.state is StoryState.OWNER_DRAFT:
                board.drafts.append(story)
            elif role is Role.OWNER and story.state is StoryState.GUEST_PENDING:
                board.pending.append(story)
        return board

    def _require(self, story_id: str) -> Story:
        story = self._stories.get_by_id(story_id)
        if story is None:
            raise NotFound("Story not found.")
        return story
