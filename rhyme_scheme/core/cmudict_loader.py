"""Build pronunciation dictionaries from CMU formatted sources."""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, Optional, Tuple

import pronouncing

from rhyme_scheme.utils.observability import get_logger

VOWEL_PHONEMES: FrozenSet[str] = frozenset(
    "AA AE AH AO AW AY EH ER EY IH IY OW OY UH UW".split()
)

_VARIANT_SUFFIX = re.compile(r"\(\d+\)$")

_logger = get_logger(__name__).bind(component="cmudict_loader")


def _headword(raw: str) -> str:
    return _VARIANT_SUFFIX.sub("", raw).lower()


def _parse_entries(lines: Iterable[str]) -> Iterator[Tuple[str, str]]:
    for line in lines:
        entry = line.strip()
        if not entry or entry.startswith(";;;"):
            continue

        parts = entry.split()
        if len(parts) < 2:
            continue

        raw_word, *phones = parts
        word = _headword(raw_word)
        if word:
            yield word, " ".join(phones)


class CMUDictLoader(Mapping):
    """Lazy, read-only word -> phoneme string mapping backed by a cmudict file.

    Only the first pronunciation of each word is kept, which matches the
    shape the rhyme engine consumes. A missing file leaves the loader empty
    and the next access retries, so a dictionary downloaded after start-up is
    picked up without rebuilding the loader.
    """

    def __init__(self, dict_path: Path | str) -> None:
        self.dict_path: Path = Path(dict_path)
        self._pronunciations: Dict[str, str] = {}
        self._loaded: bool = False

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return

        if not self.dict_path.exists():
            _logger.warning(
                "Pronunciation dictionary not found",
                context={"dict_path": str(self.dict_path)},
            )
            return

        pronunciations: Dict[str, str] = {}
        with self.dict_path.open("r", encoding="utf-8", errors="replace") as handle:
            for word, phones in _parse_entries(handle):
                pronunciations.setdefault(word, phones)

        self._pronunciations = pronunciations
        self._loaded = True
        _logger.info(
            "Pronunciation dictionary loaded",
            context={"dict_path": str(self.dict_path), "entries": len(pronunciations)},
        )

    def __getitem__(self, word: str) -> str:
        self._ensure_loaded()
        return self._pronunciations[word.lower()]

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        self._ensure_loaded()
        return word.lower() in self._pronunciations

    def __iter__(self) -> Iterator[str]:
        self._ensure_loaded()
        return iter(self._pronunciations)

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._pronunciations)


def load_pronouncing_dictionary(words: Optional[Iterable[str]] = None) -> Mapping:
    """Return the CMU dictionary bundled with :mod:`pronouncing`.

    Args:
        words: Optional vocabulary to restrict the mapping to, e.g. the words
            of one song. ``None`` returns the whole dictionary.

    Returns:
        A read-only mapping from lowercase word to its first pronunciation.
    """

    pronouncing.init_cmu()
    wanted = None if words is None else {word.lower() for word in words}

    pronunciations: Dict[str, str] = {}
    for word, phones in pronouncing.pronunciations:
        if wanted is not None and word not in wanted:
            continue
        pronunciations.setdefault(word, phones)

    return MappingProxyType(pronunciations)


__all__ = [
    "CMUDictLoader",
    "VOWEL_PHONEMES",
    "load_pronouncing_dictionary",
]
