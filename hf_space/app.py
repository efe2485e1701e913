import uvicorn

from propfinder.config import settings

if __name__ == "__main__":
    # Spaces routes traffic to PORT (7860 unless overridden)
    uvicorn.run("propfinder.main:app", host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
