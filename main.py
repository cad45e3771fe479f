import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from homebrew.config import get_settings
from homebrew.database import get_engine
from homebrew.routers import weather_reports
from homebrew.schema import bootstrap_schema

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)

if not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)
    bootstrap_schema(get_engine(settings.database))
    logger.info("Homebrew weather reports ready on port %s", settings.port)
    yield


app = FastAPI(title="Homebrew Weather Reports", lifespan=lifespan)

# Routes
app.include_router(weather_reports.router)


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=get_settings().port,
        reload=False,
    )
