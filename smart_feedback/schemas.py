"""Pydantic schemas for request/response validation."""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from smart_feedback.config import config

# Comparative score bounds for the Neutral band
POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05


class SentimentLabel(str, Enum):
    """Three-way sentiment classification."""

    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


def label_for(comparative: float) -> SentimentLabel:
    """Map a comparative score onto the three-way label."""
    if comparative > POSITIVE_THRESHOLD:
        return SentimentLabel.POSITIVE
    if comparative < NEGATIVE_THRESHOLD:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def _normalize_email(value):
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip().lower()
    return value


class Category(str, Enum):
    """Feedback categories offered on the submission form."""

    GENERAL = "General"
    SERVICE = "Service"
    PRODUCT = "Product"
    EXPERIENCE = "Experience"
    SUPPORT = "Support"
    OTHER = "Other"


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SentimentResult(CamelModel):
    """Sentiment snapshot computed once when feedback is submitted.

    The label always agrees with the comparative score and each matched
    word is listed once.
    """

    model_config = ConfigDict(frozen=True)

    label: SentimentLabel = SentimentLabel.NEUTRAL
    score: int = 0
    comparative: float = 0.0
    positive_words: Tuple[str, ...] = ()
    negative_words: Tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_consistency(self):
        expected = label_for(self.comparative)
        if self.label != expected:
            raise ValueError(
                f"label {self.label.value} does not match comparative {self.comparative} "
                f"(expected {expected.value})"
            )
        for field in ("positive_words", "negative_words"):
            words = getattr(self, field)
            if len(set(words)) != len(words):
                raise ValueError(f"{field} contains duplicate entries")
        return self

    @classmethod
    def neutral(cls) -> "SentimentResult":
        """Result used for empty or non-text input."""
        return cls()


class FeedbackRequest(CamelModel):
    """Request schema for feedback submission."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": "Ada",
                "email": "ada@example.com",
                "category": "Service",
                "rating": 5,
                "message": "Excellent support, the team was wonderful."
            }
        }
    )

    name: str = Field(..., min_length=1, max_length=config.NAME_MAX_LENGTH)
    email: str = Field("", description="Optional contact email, stored lowercase")
    category: Category = Category.GENERAL
    rating: int = Field(config.DEFAULT_RATING, ge=1, le=5)
    message: str = Field(..., min_length=1, max_length=config.MESSAGE_MAX_LENGTH)

    @field_validator("email", mode="before")
    @classmethod
    def _lowercase_email(cls, value):
        return _normalize_email(value)

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value):
        # Blank category on the form means "General"
        if value is None or (isinstance(value, str) and not value.strip()):
            return Category.GENERAL
        return value

    @field_validator("rating", mode="before")
    @classmethod
    def _default_rating(cls, value):
        if value is None or value == 0 or value == "":
            return config.DEFAULT_RATING
        return value


class FeedbackRecord(CamelModel):
    """Stored feedback entry with its sentiment snapshot.

    Records are immutable: they are created once and can only be deleted.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=config.NAME_MAX_LENGTH)
    email: str = ""
    category: Category = Category.GENERAL
    rating: int = Field(config.DEFAULT_RATING, ge=1, le=5)
    message: str = Field(..., min_length=1, max_length=config.MESSAGE_MAX_LENGTH)
    sentiment: SentimentResult = Field(default_factory=SentimentResult.neutral)
    created_at: datetime

    @field_validator("email", mode="before")
    @classmethod
    def _lowercase_email(cls, value):
        return _normalize_email(value)


class CategoryCount(CamelModel):
    category: str
    count: int


class TrendPoint(CamelModel):
    """Per-day sentiment counts."""

    date: str
    positive: int = Field(0, alias="Positive")
    neutral: int = Field(0, alias="Neutral")
    negative: int = Field(0, alias="Negative")


class Statistics(CamelModel):
    """Dashboard analytics over the stored feedback."""

    total_count: int = Field(0, alias="totalFeedback")
    average_rating: float = 0.0
    sentiment_distribution: Dict[str, int]
    category_distribution: List[CategoryCount] = Field(default_factory=list)
    rating_distribution: Dict[int, int]
    trend: List[TrendPoint] = Field(default_factory=list)


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class FeedbackResponse(BaseModel):
    """Response schema for a submitted feedback entry."""

    success: bool = True
    data: FeedbackRecord
    message: Optional[str] = None


class FeedbackListResponse(BaseModel):
    """Response schema for a page of feedback entries."""

    success: bool = True
    data: List[FeedbackRecord]
    pagination: Pagination


class StatsResponse(BaseModel):
    success: bool = True
    data: Statistics


class MessageResponse(BaseModel):
    success: bool = True
    message: str
