"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from corpusdb.api import documents, health, projects, reference, speakers, transcripts, users
from corpusdb.config import get_settings
from corpusdb.db.errors import CorpusError
from corpusdb.db.session import init_db

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting corpus database service...")

    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    yield

    logger.info("Shutting down corpus database service...")


app = FastAPI(
    title="Corpus Database Service",
    description="""
## Sociolinguistic corpus management

Speakers, documents and their metadata for spoken-language corpora:
- **Reference data**: roles, genders, educations, regions and places
- **Projects & corpora** that speakers and documents belong to
- **Documents** with an assignment workflow and generated labels
- **Views**: readable projections with age and education brackets

### Acting user
Every `/api` request names the acting user in the `X-User-Id` header.
Regular users see their own data, supervisors also see their supervisees'
data, admins see everything.
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CorpusError)
async def corpus_error_handler(request: Request, exc: CorpusError):
    """Turn domain errors into JSON responses."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error}: {exc.detail}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "detail": exc.detail},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


app.include_router(health.router)
app.include_router(documents.router)
app.include_router(speakers.router)
app.include_router(users.router)
app.include_router(projects.router)
app.include_router(reference.router)
app.include_router(transcripts.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with service info."""
    return {
        "service": "Corpus Database Service",
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "corpusdb.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
