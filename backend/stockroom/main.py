# backend/stockroom/main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockroom.api.auth_routes import router as auth_router
from stockroom.api.user_routes import router as user_router
from stockroom.core.config import Settings, get_settings
from stockroom.core.database import init_db, make_engine, make_session_factory
from stockroom.core.storage import SqlKeyValueStore
from stockroom.services.auth_service import SessionManager

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = make_engine(settings.DATABASE_URL)
        init_db(engine)

        store = SqlKeyValueStore(make_session_factory(engine))
        manager = SessionManager(store, settings)
        if settings.SEED_DEMO_USERS:
            manager.seed_demo_users()

        app.state.session_manager = manager
        logger.info("Starting up %s %s", settings.APP_NAME, settings.APP_VERSION)
        yield
        logger.info("Shutting down...")
        engine.dispose()

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(user_router, prefix="/api", tags=["users"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
