import sys
from pathlib import Path
from types import MappingProxyType

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rhyme_scheme.core.collector import WordOccurrence
from rhyme_scheme.core.features import extract_rhyme_features


PRONUNCIATIONS = {
    "cat": "K AE1 T",
    "hat": "HH AE1 T",
    "mat": "M AE1 T",
    "dog": "D AO1 G",
    "back": "B AE1 K",
    "boat": "B OW1 T",
    "night": "N AY1 T",
    "light": "L AY1 T",
    "fight": "F AY1 T",
    "go": "G OW1",
    "saw": "S AO1",
    "long": "L AO1 NG",
    "running": "R AH1 N IH0 NG",
    "jumping": "JH AH1 M P IH0 NG",
    "happy": "HH AE1 P IY0",
    "sloppy": "S L AA1 P IY0",
    "played": "P L EY1 D",
    "loved": "L AH1 V D",
    "happily": "HH AE1 P AH0 L IY0",
    "lovely": "L AH1 V L IY0",
    "see": "S IY1",
    "free": "F R IY1",
    "bit": "B IH1 T",
    "bite": "B AY1 T",
    "cake": "K EY1 K",
    "ask": "AE1 S K",
    "time": "T AY1 M",
    "rhyme": "R AY1 M",
    "game": "G EY1 M",
    "room": "R UW1 M",
    "blew": "B L UW1",
    "acrobat": "AE1 K R AH0 B AE2 T",
    "the": "DH AH0",
    "b": "B",
}


@pytest.fixture
def dictionary():
    """Small read-only pronunciation dictionary shared by the tests."""

    return MappingProxyType(dict(PRONUNCIATIONS))


@pytest.fixture
def features():
    """Return a helper that builds features for a word in the test dictionary."""

    def _features(word: str):
        return extract_rhyme_features(PRONUNCIATIONS[word])

    return _features


@pytest.fixture
def occurrence():
    """Return a helper that builds a rhymable occurrence for a dictionary word."""

    def _occurrence(word: str, line_index: int = 0, word_index: int = 0):
        return WordOccurrence(
            line_index=line_index,
            word_index=word_index,
            raw_text=word,
            cleaned_text=word,
            features=extract_rhyme_features(PRONUNCIATIONS[word]),
        )

    return _occurrence
