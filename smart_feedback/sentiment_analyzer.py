"""Lexicon-based sentiment analyzer for feedback messages."""
import logging
import re
from typing import Any, Iterable, List, Mapping, Optional

from smart_feedback.config import config
from smart_feedback.lexicon import NEGATORS, load_lexicon
from smart_feedback.schemas import SentimentResult, label_for

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[.,/#!?$%^&*;:{}=_`\"~()]")


def tokenize(text: str) -> List[str]:
    """Split text into lowercase word tokens.

    Apostrophes and hyphens stay inside tokens so that contractions
    such as "don't" can act as negators.
    """
    cleaned = _PUNCTUATION.sub(" ", text.lower().replace("\n", " "))
    return cleaned.split()


class SentimentAnalyzer:
    """Scores text against a fixed word-polarity lexicon.

    Instances hold only read-only tables, so one analyzer can be shared
    by every request.
    """

    def __init__(
        self,
        lexicon: Optional[Mapping[str, int]] = None,
        negators: Optional[Iterable[str]] = None
    ):
        """Initialize the analyzer.

        Args:
            lexicon: Token -> weight table (default: configured lexicon)
            negators: Tokens that flip the next word (default: NEGATORS)
        """
        self.lexicon = lexicon if lexicon is not None else load_lexicon(config.LEXICON_PATH or None)
        self.negators = frozenset(negators) if negators is not None else NEGATORS

    def analyze(self, text: Any) -> SentimentResult:
        """Analyze the sentiment of a feedback message.

        Args:
            text: Message to score; anything that is not a non-empty
                string yields the neutral result

        Returns:
            SentimentResult with label, scores and matched words
        """
        if not isinstance(text, str) or not text:
            return SentimentResult.neutral()

        tokens = tokenize(text)
        score = 0
        positive_words: List[str] = []
        negative_words: List[str] = []

        for i, token in enumerate(tokens):
            weight = self.lexicon.get(token, 0)
            if not weight:
                continue

            if i > 0 and tokens[i - 1] in self.negators:
                weight = -weight

            score += weight
            if weight > 0 and token not in positive_words:
                positive_words.append(token)
            elif weight < 0 and token not in negative_words:
                negative_words.append(token)

        comparative = round(score / len(tokens), 4) if tokens else 0.0

        result = SentimentResult(
            label=label_for(comparative),
            score=score,
            comparative=comparative,
            positive_words=tuple(positive_words),
            negative_words=tuple(negative_words)
        )

        logger.debug(
            f"Sentiment: {result.label.value} (score={score}, comparative={comparative})"
        )
        return result


default_analyzer = SentimentAnalyzer()


def analyze(text: Any) -> SentimentResult:
    """Analyze text with the process-wide analyzer."""
    return default_analyzer.analyze(text)
