"""Turn a validated submission into an analyzed feedback record."""
import logging
from datetime import datetime, UTC
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from smart_feedback.database import save_feedback
from smart_feedback.schemas import FeedbackRecord, FeedbackRequest, SentimentResult
from smart_feedback.sentiment_analyzer import analyze

logger = logging.getLogger(__name__)


def build_record(
    request: FeedbackRequest,
    analyzer: Callable[[str], SentimentResult] = analyze,
    created_at: Optional[datetime] = None
) -> FeedbackRecord:
    """Analyze the message once and snapshot the result into a record.

    Args:
        request: Submission that already passed validation
        analyzer: Sentiment function to apply to the message
        created_at: Creation time (default: now, UTC)

    Returns:
        Unsaved FeedbackRecord
    """
    sentiment = analyzer(request.message)

    return FeedbackRecord(
        name=request.name,
        email=request.email,
        category=request.category,
        rating=request.rating,
        message=request.message,
        sentiment=sentiment,
        created_at=created_at or datetime.now(UTC)
    )


async def submit_feedback(db: AsyncSession, request: FeedbackRequest) -> FeedbackRecord:
    """Analyze and store a submission.

    Args:
        db: Database session
        request: Validated submission

    Returns:
        Stored record with its id
    """
    record = build_record(request)
    saved = await save_feedback(db, record)

    logger.info(
        f"Stored feedback {saved.id}: {saved.sentiment.label.value} "
        f"(score={saved.sentiment.score}, comparative={saved.sentiment.comparative})"
    )
    return saved
