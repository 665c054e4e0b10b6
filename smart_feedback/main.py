"""Main FastAPI application for feedback collection and analytics."""
import logging
import math
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Depends, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from smart_feedback.aggregator import aggregate
from smart_feedback.config import config
from smart_feedback.database import init_db, get_db, list_feedback, fetch_all_feedback, delete_feedback
from smart_feedback.ingestion import submit_feedback
from smart_feedback.schemas import (
    Category,
    FeedbackListResponse,
    FeedbackRequest,
    FeedbackResponse,
    MessageResponse,
    Pagination,
    SentimentLabel,
    StatsResponse,
)

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

REQUIRED_FIELDS_ERROR = "Name and feedback message are required."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Initializing database...")
    await init_db()
    logger.info("Application started successfully")
    yield
    # Shutdown
    logger.info("Application shutting down")


app = FastAPI(
    title="Smart Feedback API",
    description="Feedback collection with lexicon-based sentiment analysis and analytics",
    version="1.0.0",
    lifespan=lifespan
)

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
async def create_feedback(
    request: FeedbackRequest,
    db: AsyncSession = Depends(get_db)
):
    """Analyze a feedback message and store it.

    The sentiment is computed once here and stored with the record;
    reads never recompute it.
    """
    record = await submit_feedback(db, request)

    return FeedbackResponse(
        data=record,
        message="Feedback submitted and analyzed successfully!"
    )


@router.get("", response_model=FeedbackListResponse)
async def get_feedback_list(
    sentiment: Optional[SentimentLabel] = None,
    category: Optional[Category] = None,
    limit: int = Query(config.DEFAULT_PAGE_LIMIT, ge=1, le=config.MAX_PAGE_LIMIT),
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_db)
):
    """List feedback newest first, with optional filters and pagination."""
    records, total = await list_feedback(
        db,
        sentiment=sentiment,
        category=category,
        limit=limit,
        page=page
    )

    return FeedbackListResponse(
        data=records,
        pagination=Pagination(
            total=total,
            page=page,
            limit=limit,
            pages=math.ceil(total / limit)
        )
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    window_days: int = Query(config.TREND_WINDOW_DAYS, ge=1),
    db: AsyncSession = Depends(get_db)
):
    """Dashboard analytics over every stored record."""
    records = await fetch_all_feedback(db)
    return StatsResponse(data=aggregate(records, window_days=window_days))


@router.delete("/{feedback_id}", response_model=MessageResponse)
async def remove_feedback(feedback_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a feedback entry by id."""
    if not await delete_feedback(db, feedback_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Feedback not found."
        )

    logger.info(f"Deleted feedback {feedback_id}")
    return MessageResponse(message="Feedback deleted successfully.")


app.include_router(router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "database": config.DATABASE_URL.split(":", 1)[0]
    }


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "service": "Smart Feedback API",
        "version": "1.0.0",
        "endpoints": {
            "submit": "POST /api/feedback",
            "list": "GET /api/feedback",
            "stats": "GET /api/feedback/stats",
            "delete": "DELETE /api/feedback/{id}",
            "health": "GET /health"
        }
    }


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    for error in errors:
        field = error["loc"][-1] if error["loc"] else None
        if field in ("name", "message") and error["type"] in ("missing", "string_too_short", "string_type"):
            return REQUIRED_FIELDS_ERROR

    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or error['loc'][0]}: {error['msg']}"
        for error in errors
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject invalid submissions and query parameters with 400."""
    message = _validation_message(exc)
    logger.info(f"Rejected request to {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": message}
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Wrap HTTP errors in the standard response envelope."""
    error = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and error == "Not Found":
        error = "Route not found"

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": error}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unexpected errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal Server Error"}
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)
