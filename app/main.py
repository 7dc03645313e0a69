import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.db.elasticsearch import es_client
from app.api.routes import beacon

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: a broken beacon.json stops the server here
    settings.beacon_info()
    if settings.QUERY_BACKEND == "elasticsearch":
        await es_client.connect()
    yield
    # Shutdown
    await es_client.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan
    )

    # CORS: echo the caller's origin
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.BACKEND_CORS_ORIGIN_REGEX,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(beacon.router, tags=["beacon"])

    return app


app = create_app()
