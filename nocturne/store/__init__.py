from nocturne.store.kv import (  # noqa: F401
    KeyValueStore,
    MemoryStore,
    SqlStore,
    get_json,
    set_json,
)
