# Import every model so Base.metadata sees it (Alembic autogenerate relies on this)
from nocturne.models.kv_entry import KVEntry  # noqa: F401
