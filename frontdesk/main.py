import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401 - register tables with Base
from .config import REDIS_URL
from .database import Base, SessionLocal, engine
from .domain.classes import router as classes_router
from .domain.notifications import WATCHED_COLLECTIONS, NotificationAggregator
from .domain.notifications import router as notifications_router
from .domain.reception import router as reception_router
from .domain.scheduling import router as scheduling_router
from .exceptions import FrontDeskError
from .services.change_feed import RedisChangeFeed, SQLAlchemyChangeFeed, forward_changes

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

NOTIFICATIONS_ENABLED = os.getenv("NOTIFICATIONS_ENABLED", "true").lower() == "true"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database tables created successfully")

    local_feed = SQLAlchemyChangeFeed(SessionLocal)
    redis_feed = None
    stop_forwarding = None
    aggregator = None

    if NOTIFICATIONS_ENABLED:
        feed = local_feed
        if REDIS_URL:
            # Share changes across API processes; each process aggregates from Redis
            redis_feed = RedisChangeFeed()
            stop_forwarding = forward_changes(local_feed, redis_feed, WATCHED_COLLECTIONS)
            feed = redis_feed

        aggregator = NotificationAggregator(SessionLocal, feed).start()
        app.state.notification_aggregator = aggregator

    yield

    logger.info("Application shutting down...")
    if aggregator is not None:
        aggregator.stop()
        app.state.notification_aggregator = None
    if stop_forwarding is not None:
        stop_forwarding()
    if redis_feed is not None:
        redis_feed.close()
    local_feed.close()


app = FastAPI(title="FrontDesk API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(FrontDeskError)
async def frontdesk_exception_handler(request: Request, exc: FrontDeskError):
    if exc.status_code >= 500:
        logger.error(f"❌ {exc.__class__.__name__} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"⚠️ {exc.__class__.__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000"
).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(scheduling_router)
app.include_router(classes_router)
app.include_router(reception_router)
app.include_router(notifications_router)


@app.get("/health")
def health():
    return {"status": "healthy"}
