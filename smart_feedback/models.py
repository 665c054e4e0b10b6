"""Database models for feedback storage."""
from datetime import datetime, UTC
from sqlalchemy import Column, Integer, String, DateTime, Text, Float, JSON
from sqlalchemy.orm import declarative_base

from smart_feedback.schemas import Category, FeedbackRecord, SentimentLabel, SentimentResult

Base = declarative_base()


class Feedback(Base):
    """Feedback database model.

    The sentiment columns hold the snapshot computed at submission time
    and are never recomputed.
    """

    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, default="")
    category = Column(String(20), nullable=False, default="General", index=True)
    rating = Column(Integer, nullable=False, default=3)
    message = Column(Text, nullable=False)
    sentiment_label = Column(String(10), nullable=False, default="Neutral", index=True)
    sentiment_score = Column(Integer, nullable=False, default=0)
    sentiment_comparative = Column(Float, nullable=False, default=0.0)
    positive_words = Column(JSON, nullable=False, default=list)
    negative_words = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True)

    @classmethod
    def from_record(cls, record: FeedbackRecord) -> "Feedback":
        """Build a row from a validated record."""
        sentiment = record.sentiment
        return cls(
            name=record.name,
            email=record.email,
            category=record.category.value,
            rating=record.rating,
            message=record.message,
            sentiment_label=sentiment.label.value,
            sentiment_score=sentiment.score,
            sentiment_comparative=sentiment.comparative,
            positive_words=list(sentiment.positive_words),
            negative_words=list(sentiment.negative_words),
            created_at=record.created_at
        )

    def to_record(self) -> FeedbackRecord:
        """Convert the stored row back into an immutable record."""
        created_at = self.created_at
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)

        return FeedbackRecord(
            id=self.id,
            name=self.name,
            email=self.email,
            category=Category(self.category),
            rating=self.rating,
            message=self.message,
            sentiment=SentimentResult(
                label=SentimentLabel(self.sentiment_label),
                score=self.sentiment_score,
                comparative=self.sentiment_comparative,
                positive_words=tuple(self.positive_words or ()),
                negative_words=tuple(self.negative_words or ())
            ),
            created_at=created_at
        )

