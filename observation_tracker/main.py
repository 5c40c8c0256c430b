import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from observation_tracker.api.audit import router as audit_router
from observation_tracker.api.dashboard import router as dashboard_router
from observation_tracker.api.data import router as data_router
from observation_tracker.api.frameworks import router as frameworks_router
from observation_tracker.api.health import router as health_router
from observation_tracker.api.me import router as me_router
from observation_tracker.api.observations import router as observations_router
from observation_tracker.api.root import router as root_router
from observation_tracker.api.schedule import router as schedule_router
from observation_tracker.api.teachers import router as teachers_router
from observation_tracker.api.users import router as users_router
from observation_tracker.core.config import settings
from observation_tracker.core.errors import register_exception_handlers
from observation_tracker.core.logging import configure_logging
from observation_tracker.db.base import Base
from observation_tracker.db.session import engine, session_scope
from observation_tracker.services.framework_repository import FrameworkRepository
from observation_tracker.store.change_feed import ChangeFeed
from observation_tracker.store.document_store import DocumentStore

logger = logging.getLogger(__name__)


def seed_default_frameworks(feed: ChangeFeed | None = None) -> list[str]:
    with session_scope() as db:
        store = DocumentStore(db, feed)
        added = FrameworkRepository(store).seed_defaults()
        store.commit()
    return added


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    app.state.change_feed = ChangeFeed()

    if settings.AUTO_CREATE_SCHEMA:
        Base.metadata.create_all(bind=engine)
    if settings.SEED_DEFAULT_FRAMEWORKS:
        seed_default_frameworks(app.state.change_feed)

    logger.info("Observation tracker started (env=%s)", settings.APP_ENV)
    yield


app = FastAPI(title="CRP Observation Tracker", lifespan=lifespan)

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(root_router)
app.include_router(health_router)
app.include_router(me_router)
app.include_router(users_router)
app.include_router(frameworks_router)
app.include_router(observations_router)
app.include_router(dashboard_router)
app.include_router(teachers_router)
app.include_router(schedule_router)
app.include_router(data_router)
app.include_router(audit_router)
