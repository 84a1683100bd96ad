# device_detect/main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI
from device_detect.config import settings
from device_detect.routes import router
import logging

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""

    logger.info("Starting Device Detect API...")
    logger.info(f"Mobile browser tokens: {', '.join(settings.mobile_browser_tokens)}")

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title="Device Detect API",
    description="Classifies browser, operating system, device and locale of a client",
    version="1.0.0",
    lifespan=lifespan,
)

# Register routes
app.include_router(router)
