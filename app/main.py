"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.database import AsyncSessionLocal, init_db
from app.db.seed import seed_reference_data
from app.api import health, orders
from app.api.webhooks import whatsapp as whatsapp_webhook

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    await init_db()
    if settings.seed_file:
        async with AsyncSessionLocal() as session:
            await seed_reference_data(session, settings.seed_file)
    logger.info(f"{settings.business_name} order bot started")
    yield
    # Shutdown
    pass


app = FastAPI(
    title="Pak Sayur Order Bot",
    description="WhatsApp order intake and dispatch API for fresh produce delivery",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(whatsapp_webhook.router, prefix="/webhooks", tags=["webhooks"])
app.include_router(orders.router, tags=["orders"])
