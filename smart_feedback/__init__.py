"""Feedback collection with lexicon-based sentiment analysis and dashboard analytics."""

__version__ = "1.0.0"
