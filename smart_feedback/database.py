"""Database connection and operations."""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from smart_feedback.config import config
from smart_feedback.models import Base, Feedback
from smart_feedback.schemas import Category, FeedbackRecord, SentimentLabel

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    # StaticPool for SQLite to avoid threading issues
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {}


# Create async engine
engine = create_async_engine(
    config.DATABASE_URL,
    echo=False,
    **_engine_options(config.DATABASE_URL)
)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def init_db():
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    """Dependency to get database session."""
    async with AsyncSessionLocal() as session:
        yield session


def get_db_session():
    """Get database session as context manager (for CLI usage).

    Returns:
        Async context manager for database session
    """
    return AsyncSessionLocal()


def _apply_filters(query, sentiment: Optional[SentimentLabel], category: Optional[Category]):
    if sentiment is not None:
        query = query.where(Feedback.sentiment_label == sentiment.value)
    if category is not None:
        query = query.where(Feedback.category == category.value)
    return query


async def save_feedback(db: AsyncSession, record: FeedbackRecord) -> FeedbackRecord:
    """Save an analyzed feedback record.

    Args:
        db: Database session
        record: Validated record carrying its sentiment snapshot

    Returns:
        The stored record with its assigned id
    """
    feedback = Feedback.from_record(record)

    try:
        db.add(feedback)
        await db.commit()
        await db.refresh(feedback)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error saving feedback from {record.name!r}: {e}")
        raise

    return feedback.to_record()


async def list_feedback(
    db: AsyncSession,
    sentiment: Optional[SentimentLabel] = None,
    category: Optional[Category] = None,
    limit: int = config.DEFAULT_PAGE_LIMIT,
    page: int = 1
) -> Tuple[List[FeedbackRecord], int]:
    """Fetch one page of feedback, newest first.

    Args:
        db: Database session
        sentiment: Only records with this label
        category: Only records in this category
        limit: Page size
        page: 1-based page number

    Returns:
        Tuple of (records on the page, total matching records)
    """
    query = _apply_filters(select(Feedback), sentiment, category)
    query = (
        query.order_by(desc(Feedback.created_at), desc(Feedback.id))
        .offset((page - 1) * limit)
        .limit(limit)
    )
    count_query = _apply_filters(select(func.count(Feedback.id)), sentiment, category)

    rows = (await db.execute(query)).scalars().all()
    total = (await db.execute(count_query)).scalar_one()

    return [row.to_record() for row in rows], total


async def fetch_all_feedback(db: AsyncSession) -> List[FeedbackRecord]:
    """Fetch every stored record for aggregation."""
    rows = (await db.execute(select(Feedback))).scalars().all()
    return [row.to_record() for row in rows]


async def delete_feedback(db: AsyncSession, feedback_id: int) -> bool:
    """Delete a record by id.

    Returns:
        True if a record was deleted, False if the id was unknown
    """
    try:
        result = await db.execute(delete(Feedback).where(Feedback.id == feedback_id))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error deleting feedback {feedback_id}: {e}")
        raise

    deleted = result.rowcount > 0
    if not deleted:
        logger.warning(f"Feedback {feedback_id} not found for deletion")
    return deleted
