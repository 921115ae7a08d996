import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from leave_service.api.errors import register_exception_handlers
from leave_service.api.leaves import router as leaves_router
from leave_service.api.reports import router as reports_router
from leave_service.api.teachers import router as teachers_router
from leave_service.core.config import Settings, settings
from leave_service.core.db import build_engine, build_session_factory, init_db
from leave_service.core.sql_storage import SqlStorage
from leave_service.core.storage import MemStorage, Storage, seed_sample_data

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def create_storage(app: FastAPI, config: Settings) -> Storage:
    """STORAGE_BACKEND 설정에 따라 저장소 생성 (database면 테이블도 생성)."""
    if config.STORAGE_BACKEND == "database":
        engine = build_engine(config.DATABASE_URL, echo=config.SQL_ECHO)
        await init_db(engine)
        app.state.engine = engine
        return SqlStorage(build_session_factory(engine))
    return MemStorage()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s (storage=%s)", settings.APP_NAME, settings.STORAGE_BACKEND)
    storage = await create_storage(app, settings)
    if settings.SEED_SAMPLE_DATA:
        await seed_sample_data(storage)
    app.state.storage = storage

    yield

    engine = getattr(app.state, "engine", None)
    if engine:
        await engine.dispose()
        logger.info("Database engine disposed")


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    description="Teacher leave request tracker (REST + in-memory / SQLAlchemy storage)",
    lifespan=lifespan,
)

register_exception_handlers(app)


@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "service": "leave-service",
    }


@app.get("/")
async def root():
    return {
        "message": "Teacher Leave Service is running",
        "docs": "/docs",
    }


app.include_router(teachers_router)
app.include_router(leaves_router)
app.include_router(reports_router)
