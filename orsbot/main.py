from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orsbot.core.config import settings
from orsbot.api.chat import chat, router as chat_router
from orsbot.api.health import router as health_router
from orsbot.utils.logging import get_logger, setup_logging

logger = get_logger("orsbot.main")

app = FastAPI(
    title=settings.app_name,
    description="ORS Bot chat backend - multi-stage answer composition",
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify your frontend domain
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router, prefix="/api/v1")   # /api/v1/chat, /workflows, /models
app.include_router(health_router, prefix="/api")     # /api/health

# The front end still posts to the old route name
app.add_api_route("/api/direct-chat", chat, methods=["POST"], tags=["Chat"])


@app.on_event("startup")
async def on_startup():
    setup_logging(settings.log_level)
    logger.info("Starting %s (%s)...", settings.app_name, settings.environment)
