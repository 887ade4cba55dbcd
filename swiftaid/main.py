"""SwiftAid FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from swiftaid.api import auth, dashboard, drivers, health, requests, ws
from swiftaid.core.config import settings
from swiftaid.core.events import event_bus
from swiftaid.core.ws_manager import ws_manager
from swiftaid.db.base import Base
from swiftaid.db.session import SessionLocal, engine
from swiftaid.services.seed_service import seed_demo_accounts

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables:
        Base.metadata.create_all(bind=engine)
    if settings.seed_demo_accounts:
        db = SessionLocal()
        try:
            seed_demo_accounts(db)
        finally:
            db.close()
    unsubscribe = event_bus.subscribe(ws_manager.dispatch)
    logger.info("%s ready", settings.app_name)
    yield
    unsubscribe()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(requests.router)
app.include_router(drivers.router)
app.include_router(dashboard.router)
app.include_router(ws.router)
