"""
Job Tracker - Main Application

FastAPI backend with:
- MongoDB for job applications and resume metadata
- GridFS (or local disk) for resume PDFs
- OpenAI-compatible API for resume keyword-gap analysis
- JWT bearer authentication

Run: uvicorn jobtracker.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from jobtracker import __version__
from jobtracker.api.routes import api_router
from jobtracker.core.config import get_settings
from jobtracker.core.errors import JobTrackerError
from jobtracker.core.logger import get_logger
from jobtracker.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)
    yield


# Create FastAPI app
app = FastAPI(
    title="Job Tracker",
    description="""
    Track job applications and resumes, and check a resume against a job description.

    ## Features
    - **Jobs**: Track applications and their status
    - **Resumes**: Upload, download and delete PDF resumes
    - **Analysis**: AI keyword-gap analysis of a resume against a job description
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(JobTrackerError)
async def job_tracker_error_handler(request: Request, exc: JobTrackerError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(debug=get_settings().debug))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    return JSONResponse(
        status_code=400,
        content={"message": "; ".join(problems) or "Invalid request", "kind": "validation_error"}
    )


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    mongo_ok = test_mongo_connection()
    return {
        "status": "healthy" if mongo_ok else "degraded",
        "mongodb": "connected" if mongo_ok else "disconnected"
    }
