# nocturne/services/seed.py
from __future__ import annotations

import logging

from nocturne.services.stories import (
    OWNER_AUTHOR_NAME,
    Story,
    StoryRepository,
    StoryState,
    now_ms,
)
from nocturne.store.kv import STORIES_KEY, KeyValueStore

logger = logging.getLogger(__name__)

_CLOCKWORK = (
    'The artisan wiped grease from his forehead, leaving a smudge that looked uncomfortably like a bruise. '
    '"It is finished," he whispered, though the workshop was empty save for the echoes of ticking clocks.\n\n'
    "On the table lay the heart. It was a marvel of gears and springs, encased in a cage of tarnished gold. "
    "It did not thump; it clicked. A precise, mechanical staccato that seemed to count down the seconds of an "
    "unseen lifespan.\n\n"
    "He had traded his own heart for the knowledge to build it. A deal made at a crossroads where the shadows "
    "stretched longer than the light allowed. Now, staring at the creation, he wondered if the recipient, a "
    "porcelain doll that sat lifeless in the corner, would thank him, or if she would simply wind him up until "
    "he broke."
)

_HALLWAY = (
    "I live alone. That is the first fact. The second fact is that my apartment is on the top floor, and the "
    "only access is a fire escape that rusted shut in '98.\n\n"
    "So when I heard the breathing, wet and heavy, pressing against the wood of my bedroom door, I didn't reach "
    "for a weapon. I reached for the light switch. But the darkness was absolute, a physical weight that pressed "
    "against my eyes.\n\n"
    '"Let me in," the voice rasped. It sounded like my own voice, recorded and played back on a decaying tape '
    'loop. "We have so much to discuss regarding tomorrow."\n\n'
    "I don't know what happens tomorrow. I'm afraid to check the calendar."
)

_CAT = (
    "We loved that cat. It was a stray that wandered in during the storm. But after it passed away, we buried "
    "it in the garden.\n\n"
    "Last night, I felt weight on the end of the bed. Familiar weight. I reached out to pet it, expecting soft "
    "fur. Instead, my hand passed through something cold, like river water in winter. Then I heard it: the "
    "purring. It wasn't coming from the bed. It was vibrating the floorboards from beneath."
)


def initial_stories(now: int) -> list:
    return [
        Story(
            id="1",
            title="The Clockwork Heart",
            excerpt="It beat not with blood, but with the steady rhythm of a dying star trapped in brass.",
            content=_CLOCKWORK,
            created_at=now,
            updated_at=now,
            tags=["Steampunk", "Horror", "Short"],
            state=StoryState.OWNER_PUBLISHED,
            cover_image="https://picsum.photos/800/600?grayscale",
            author_name=OWNER_AUTHOR_NAME,
        ),
        Story(
            id="2",
            title="Silence in the Hallway",
            excerpt="The door was closed, but I could hear breathing from the other side.",
            content=_HALLWAY,
            created_at=now - 100000,
            updated_at=now,
            tags=["Thriller", "Psychological"],
            state=StoryState.OWNER_PUBLISHED,
            cover_image="https://picsum.photos/800/601?grayscale",
            author_name=OWNER_AUTHOR_NAME,
        ),
        Story(
            id="3",
            title="The Cat That Wasn't There",
            excerpt="It meowed, but the sound came from inside the walls.",
            content=_CAT,
            created_at=now - 200000,
            updated_at=now,
            tags=["Community", "Ghost"],
            state=StoryState.GUEST_PUBLISHED,
            cover_image="https://picsum.photos/seed/cat/800/600?grayscale",
            author_name="Anonymous Wanderer",
        ),
    ]


def seed_initial_data(store: KeyValueStore) -> bool:
    """
    Write the starter archive if the stories key was never written.
    An archive the owner emptied stays empty. Returns True when seeded.
    """
    if store.get(STORIES_KEY) is not None:
        return False
    StoryRepository(store).replace_all(initial_stories(now_ms()))
    logger.info("Seeded starter archive")
    return True
