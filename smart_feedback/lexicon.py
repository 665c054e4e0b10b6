"""Word-polarity lexicon used by the sentiment analyzer.

The default table is AFINN-165 as shipped with the ``afinn`` distribution:
lowercase words mapped to integer weights between -5 and 5. A replacement
table can be supplied through ``LEXICON_PATH`` as a JSON object in the
same word -> weight shape.
"""
import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from afinn import Afinn

logger = logging.getLogger(__name__)

AFINN_WORD_FILE = "AFINN-en-165.txt"

# Tokens that flip the polarity of the word right after them
NEGATORS = frozenset([
    "cant", "can't", "dont", "don't", "doesnt", "doesn't",
    "not", "non", "wont", "won't", "isnt", "isn't",
])


class LexiconError(ValueError):
    """Raised when a lexicon file cannot be used."""


def _parse_lexicon(raw, source: str) -> Mapping[str, int]:
    if not isinstance(raw, dict):
        raise LexiconError(f"Lexicon {source} must be a JSON object of word -> weight")

    table = {}
    for word, weight in raw.items():
        # bool is an int subclass but never a valid weight
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise LexiconError(f"Lexicon {source}: weight for {word!r} is not an integer")
        table[word.lower()] = weight

    return MappingProxyType(table)


def _read_afinn() -> Mapping[str, int]:
    afinn = Afinn(language="en")
    words = afinn.read_word_file(afinn.full_filename(AFINN_WORD_FILE))
    # Phrases such as "does not work" can never equal a single token
    single_words = {word: weight for word, weight in words.items() if " " not in word}
    return _parse_lexicon(single_words, AFINN_WORD_FILE)


def _read_json(lexicon_path: Path) -> Mapping[str, int]:
    try:
        with open(lexicon_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise LexiconError(f"Lexicon file not found: {lexicon_path}") from e
    except json.JSONDecodeError as e:
        raise LexiconError(f"Lexicon file is not valid JSON: {lexicon_path}: {e}") from e

    return _parse_lexicon(raw, str(lexicon_path))


@lru_cache(maxsize=None)
def load_lexicon(path: Optional[str] = None) -> Mapping[str, int]:
    """Load a lexicon table, once per path.

    Args:
        path: JSON file to read; AFINN-165 when empty

    Returns:
        Read-only mapping of token to signed weight

    Raises:
        LexiconError: If the file is missing or malformed
    """
    if path:
        table = _read_json(Path(path))
        source = path
    else:
        table = _read_afinn()
        source = AFINN_WORD_FILE

    logger.info(f"Loaded sentiment lexicon with {len(table)} entries from {source}")
    return table
