"""Runtime configuration for the rhyme analysis entry points."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from rhyme_scheme.core.clustering import DEFAULT_MIN_SIMILARITY
from rhyme_scheme.utils.observability import get_logger

MIN_SIMILARITY_ENV = "RHYME_SCHEME_MIN_SIMILARITY"
MAX_CANDIDATES_ENV = "RHYME_SCHEME_MAX_CANDIDATES"

# Clustering is cubic in the candidate count; a few hundred rhymable words
# cover a long song.
DEFAULT_MAX_CANDIDATES = 600

_logger = get_logger(__name__).bind(component="settings")


def _read_number(environ: Mapping[str, str], name: str, default, cast):
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except (TypeError, ValueError):
        _logger.warning(
            "Ignoring invalid numeric setting",
            context={"variable": name, "value": raw, "default": default},
        )
        return default
    if not math.isfinite(value) or value < 0:
        _logger.warning(
            "Ignoring negative or non-finite numeric setting",
            context={"variable": name, "value": raw, "default": default},
        )
        return default
    return value


@dataclass(frozen=True)
class AnalyzerSettings:
    """Tunable knobs for one analyzer.

    Attributes:
        min_similarity: Average-linkage threshold for merging clusters.
        max_candidates: Largest number of rhymable words accepted before the
            analysis is refused with :class:`LyricsTooLargeError`.
    """

    min_similarity: float = DEFAULT_MIN_SIMILARITY
    max_candidates: int = DEFAULT_MAX_CANDIDATES

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AnalyzerSettings":
        env = os.environ if environ is None else environ
        return cls(
            min_similarity=_read_number(env, MIN_SIMILARITY_ENV, DEFAULT_MIN_SIMILARITY, float),
            max_candidates=_read_number(env, MAX_CANDIDATES_ENV, DEFAULT_MAX_CANDIDATES, int),
        )

    def override(
        self,
        *,
        min_similarity: Optional[float] = None,
        max_candidates: Optional[int] = None,
    ) -> "AnalyzerSettings":
        """Return a copy with the given values replaced when not ``None``.

        Raises:
            ValueError: ``min_similarity`` is negative or not finite.
        """

        changes = {}
        if min_similarity is not None:
            value = float(min_similarity)
            if not math.isfinite(value) or value < 0:
                raise ValueError(
                    f"min_similarity must be a finite number >= 0, got {min_similarity!r}"
                )
            changes["min_similarity"] = value
        if max_candidates is not None:
            changes["max_candidates"] = int(max_candidates)
        return replace(self, **changes) if changes else self


__all__ = [
    "AnalyzerSettings",
    "DEFAULT_MAX_CANDIDATES",
    "MAX_CANDIDATES_ENV",
    "MIN_SIMILARITY_ENV",
]
