from concurrent.futures import ThreadPoolExecutor

from nocturne.services.activity import MAX_ENTRIES, ActivityLog


def test_log_is_capped_and_newest_first(store, clock):
    log = ActivityLog(store, clock=clock)
    for i in range(105):
        log.append("TEST", f"entry {i}")
        if i % 2:
            clock.advance()

    entries = log.list()
    assert len(entries) == MAX_ENTRIES == 100
    assert [e.details for e in entries] == [f"entry {i}" for i in range(104, 4, -1)]
    timestamps = [e.timestamp for e in entries]
    assert timestamps == sorted(timestamps, reverse=True)
    assert len({e.id for e in entries}) == 100


def test_append_returns_entry(activity, clock):
    entry = activity.append("LOGIN", "Curator signed in")
    assert entry.timestamp == clock.now
    assert activity.list() == [entry]


def test_clear(activity):
    activity.append("A", "")
    activity.clear()
    assert activity.list() == []


def test_concurrent_appends_are_not_lost(store, clock):
    log = ActivityLog(store, clock=clock)

    def append_batch(worker):
        for i in range(10):
            log.append("TEST", f"{worker}-{i}")

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(append_batch, range(8)))

    assert sorted(e.details for e in log.list()) == sorted(f"{w}-{i}" for w in range(8) for i in range(10))
