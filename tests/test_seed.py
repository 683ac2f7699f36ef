from nocturne.services.access import Role
from nocturne.services.seed import seed_initial_data
from nocturne.store.kv import STORIES_KEY


def test_seeds_once(store, repo):
    assert seed_initial_data(store) is True
    first = [s.to_dict() for s in repo.list()]
    assert [s["id"] for s in first] == ["1", "2", "3"]

    assert seed_initial_data(store) is False
    assert [s.to_dict() for s in repo.list()] == first


def test_emptied_archive_is_not_reseeded(store, repo):
    seed_initial_data(store)
    for story in repo.list():
        repo.delete(story.id)
    assert store.get(STORIES_KEY) == "[]"
    assert seed_initial_data(store) is False
    assert repo.list() == []


def test_seed_lands_in_public_sets(store, workflow):
    seed_initial_data(store)
    board = workflow.board(Role.GUEST)
    assert [s.title for s in board.published] == ["The Clockwork Heart", "Silence in the Hallway"]
    assert [s.author_name for s in board.community] == ["Anonymous Wanderer"]
