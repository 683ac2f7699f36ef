# nocturne/main.py
import logging
import secrets
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.sessions import SessionMiddleware

from nocturne import config
from nocturne.errors import GenerationError, NocturneError
from nocturne.logging_setup import configure_logging
from nocturne.services import Services
from nocturne.services.generation import StoryGenerator
from nocturne.services.seed import seed_initial_data
from nocturne.store.kv import KeyValueStore, MemoryStore, SqlStore
from nocturne.utils.authz import role_from_session

# ---- Routers ----
from nocturne.routers import admin as admin_router
from nocturne.routers import ai as ai_router
from nocturne.routers import auth as auth_router
from nocturne.routers import public as public_router
from nocturne.routers import stories as stories_router

logger = logging.getLogger(__name__)


# =============================================================================
# Store
# =============================================================================
def build_store() -> KeyValueStore:
    if config.STORE_BACKEND == "memory":
        logger.warning("STORE_BACKEND=memory: nothing will survive a restart")
        return MemoryStore()

    from nocturne.db.base import Base
    from nocturne.db.session import make_engine, make_session_factory
    import nocturne.models  # noqa: F401

    engine = make_engine()
    if config.DB_AUTO_CREATE:
        Base.metadata.create_all(engine)
    return SqlStore(make_session_factory(engine))


# =============================================================================
# Middleware
# =============================================================================
class RoleAttachMiddleware(BaseHTTPMiddleware):
    """
    Attaches request.state.role (OWNER or GUEST) from the session.
    MUST run *after* SessionMiddleware, so it is added *before* it
    (making it the inner middleware).
    """
    async def dispatch(self, request: Request, call_next):
        request.state.role = role_from_session(request)
        return await call_next(request)


def create_app(
    store: Optional[KeyValueStore] = None,
    *,
    latency: Optional[float] = None,
    generator: Optional[StoryGenerator] = None,
    seed: Optional[bool] = None,
) -> FastAPI:
    configure_logging()
    should_seed = config.SEED_ON_STARTUP if seed is None else seed

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        services: Services = app.state.services
        if should_seed:
            seed_initial_data(services.store)
        logger.info("Nocturne Weave ready (boot %s)", app.state.boot_id[:8])
        yield

    app = FastAPI(title="Nocturne Weave", lifespan=lifespan)

    # A fresh boot id per process: owner sessions never outlive it
    app.state.boot_id = secrets.token_hex(16)
    app.state.services = Services(
        store if store is not None else build_store(),
        latency=config.SIMULATED_LATENCY_SEC if latency is None else latency,
        generator=generator,
    )

    # Order matters:
    # 1) Add RoleAttach first (inner)
    app.add_middleware(RoleAttachMiddleware)
    # 2) Then sessions (outer of role attach)
    app.add_middleware(SessionMiddleware, secret_key=config.SECRET_KEY, same_site="lax")
    # 3) Then gzip
    app.add_middleware(GZipMiddleware, minimum_size=500)

    @app.exception_handler(GenerationError)
    async def handle_generation_error(request: Request, exc: GenerationError):
        return JSONResponse(
            {"detail": "The spirits were silent.", "reason": exc.message},
            status_code=exc.status_code,
        )

    @app.exception_handler(NocturneError)
    async def handle_domain_error(request: Request, exc: NocturneError):
        return JSONResponse({"detail": exc.message}, status_code=exc.status_code)

    app.include_router(public_router.router)
    app.include_router(auth_router.router)      # /auth/...
    app.include_router(stories_router.router)   # /stories/...
    app.include_router(admin_router.router)     # /admin/...
    app.include_router(ai_router.router)        # /ai/...
    return app


app = create_app()
