"""reviewdesk FastAPI application with a lifespan-managed submission pipeline."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reviewdesk.catalog import CatalogLoader
from reviewdesk.config import settings
from reviewdesk.middleware.submit_log import SubmitLogMiddleware
from reviewdesk.routes.health import router as health_router
from reviewdesk.routes.review import router as review_router
from reviewdesk.submission import build_pipeline

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Select the persistence backend and the catalog source."""
    pipeline = build_pipeline(settings)
    app.state.pipeline = pipeline
    app.state.catalog = CatalogLoader(settings.catalog_path)

    if pipeline.backend_name == "none":
        logger.warning("No persistence backend configured, submissions are dry runs")
    logger.info("reviewdesk started with backend %s", pipeline.backend_name)
    yield

    await pipeline.close()
    logger.info("reviewdesk shutdown, pipeline closed")


app = FastAPI(title="reviewdesk Application Review", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SubmitLogMiddleware)

app.include_router(health_router)
app.include_router(review_router)
