"""Exceptions raised by the rhyme analysis entry points."""

from __future__ import annotations


class LyricsTooLargeError(ValueError):
    """Raised when lyrics hold more rhyme candidates than the analysis allows."""

    def __init__(self, candidate_count: int, limit: int) -> None:
        self.candidate_count = candidate_count
        self.limit = limit
        super().__init__(
            f"Lyrics contain {candidate_count} rhymable words; "
            f"the analysis accepts at most {limit}"
        )


__all__ = ["LyricsTooLargeError"]
