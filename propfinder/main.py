from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from propfinder.routers import properties
from propfinder.core.logging import setup_logging
from fastapi_limiter import FastAPILimiter
from redis.asyncio import Redis
from redis.exceptions import RedisError
from structlog import get_logger
from propfinder.config import settings
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from propfinder.database import AsyncSessionFactory

logger = get_logger()

app = FastAPI(title="Property Search Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "https://*.huggingface.co",
        "https://*.vercel.app",
        "https://*.hf.space",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(properties.router)

@app.on_event("startup")
async def startup_event():
    setup_logging()
    # Rate limiting needs Redis; without it the search route has no limiter
    if settings.REDIS_URL:
        try:
            redis = Redis.from_url(settings.REDIS_URL)
            await FastAPILimiter.init(redis)
        except (RedisError, OSError) as e:
            logger.warning("Rate limiter disabled, Redis unavailable", error=str(e))
            app.dependency_overrides[properties.search_rate_limiter] = lambda: None
    else:
        app.dependency_overrides[properties.search_rate_limiter] = lambda: None


@app.get("/health", tags=["health"])
async def health():
    details = {"status": "ok"}
    try:
        async with AsyncSessionFactory() as session:
            result = await session.execute(text("SELECT COUNT(1) FROM properties"))
            count = result.scalar() or 0
        details["database"] = "up"
        details["properties_count"] = int(count)
    except (SQLAlchemyError, OSError) as e:
        details["status"] = "degraded"
        details["database"] = f"down: {str(e)}"
    # Config presence checks (no secrets exposed)
    details["config"] = {
        "db_url_set": bool(settings.DATABASE_URL),
        "redis_url_set": bool(settings.REDIS_URL),
    }
    return details
