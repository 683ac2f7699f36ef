from nocturne.services.stories import (
    AuthorType,
    Story,
    StoryState,
    make_excerpt,
    placeholder_cover,
)
from nocturne.store.kv import STORIES_KEY, get_json


def _story(story_id, state=StoryState.OWNER_PUBLISHED, title=None):
    return Story(
        id=story_id,
        title=title or f"Story {story_id}",
        content="Once upon a midnight dreary",
        excerpt=make_excerpt("Once upon a midnight dreary"),
        state=state,
        created_at=1,
        updated_at=1,
        tags=["Horror", "Horror", "Short"],
    )


def test_save_prepends_new_stories(repo):
    repo.save(_story("a"))
    repo.save(_story("b"))
    assert [s.id for s in repo.list()] == ["b", "a"]


def test_save_replaces_in_place(repo):
    for sid in ("a", "b", "c"):
        repo.save(_story(sid))
    repo.save(_story("b", title="Rewritten"))

    stories = repo.list()
    assert [s.id for s in stories] == ["c", "b", "a"]
    assert stories[1].title == "Rewritten"


def test_delete_is_idempotent(repo):
    repo.save(_story("a"))
    repo.delete("a")
    repo.delete("a")
    assert repo.list() == []
    assert repo.get_by_id("a") is None


def test_get_by_id(repo):
    repo.save(_story("a"))
    repo.save(_story("b"))
    assert repo.get_by_id("a").id == "a"
    assert repo.get_by_id("zzz") is None


def test_persisted_layout_uses_flag_pair(repo, store):
    repo.save(_story("g", state=StoryState.GUEST_PENDING))
    raw = get_json(store, STORIES_KEY)[0]
    assert raw["authorType"] == "GUEST"
    assert raw["isPublished"] is False
    assert raw["tags"] == ["Horror", "Horror", "Short"]
    assert "state" not in raw


def test_state_round_trips_through_flags():
    for state in StoryState:
        assert StoryState.of(state.author_type, state.is_published) is state
    assert StoryState.of(AuthorType.GUEST, True) is StoryState.GUEST_PUBLISHED


def test_excerpt_and_placeholder():
    assert make_excerpt("x" * 150) == "x" * 100 + "..."
    assert make_excerpt("short") == "short..."
    assert placeholder_cover(42) == "https://picsum.photos/seed/42/800/600?grayscale"


def test_from_dict_fills_missing_excerpt():
    story = Story.from_dict({"id": "1", "title": "T", "content": "Body", "authorType": "OWNER", "isPublished": True})
    assert story.excerpt == "Body..."
    assert story.state is StoryState.OWNER_PUBLISHED
