# nocturne/routers/stories.py
from fastapi import APIRouter, Depends

from nocturne.schemas import StoryIn
from nocturne.services import Services, get_services
from nocturne.services.access import Role
from nocturne.services.moderation import StoryDraft, can_edit
from nocturne.utils.authz import current_role
from nocturne.utils.rendering import md_to_html

router = APIRouter(prefix="/stories", tags=["stories"])


def _draft(payload: StoryIn) -> StoryDraft:
    return StoryDraft(
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        cover_image=payload.coverImage,
        author_name=payload.authorName,
    )


@router.get("")
def list_stories(role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    """Board for the caller: drafts and pending only come back for the owner."""
    return svc.moderation.board(role).to_dict()


@router.post("", status_code=201)
def create_story(
    payload: StoryIn,
    role: Role = Depends(current_role),
    svc: Services = Depends(get_services),
):
    story = svc.moderation.submit(role, _draft(payload), publish=payload.publish)
    return story.to_dict()


@router.get("/{story_id}")
def read_story(story_id: str, role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    story = svc.moderation.read(role, story_id)
    out = story.to_dict()
    out["contentHtml"] = md_to_html(story.content)
    out["editable"] = can_edit(role, story)
    return out


@router.get("/{story_id}/edit")
def edit_story(story_id: str, role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    story = svc.moderation.open_for_edit(role, story_id)
    out = story.to_dict()
    # editor shows tags as one comma-separated field
    out["tagsText"] = ", ".join(story.tags)
    return out


@router.put("/{story_id}")
def update_story(
    story_id: str,
    payload: StoryIn,
    role: Role = Depends(current_role),
    svc: Services = Depends(get_services),
):
    story = svc.moderation.submit(role, _draft(payload), publish=payload.publish, story_id=story_id)
    return story.to_dict()


@router.delete("/{story_id}")
def delete_story(story_id: str, role: Role = Depends(current_role), svc: Services = Depends(get_services)):
    svc.moderation.delete(role, story_id)
    return {"deleted": story_id}
