#!/usr/bin/env python3
"""CLI helper to run the rhyme analysis on lyrics files."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Sequence

from rhyme_scheme import (
    CMUDictLoader,
    LyricsTooLargeError,
    RhymeSchemeAnalyzer,
    load_pronouncing_dictionary,
)
from rhyme_scheme.config import AnalyzerSettings
from rhyme_scheme.core.collector import clean_word
from rhyme_scheme.utils.logging_config import configure_logging

DICTIONARY_PREVIEW_GROUPS = 20


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Detect rhyme groups and rhyme statistics in song lyrics."
    )
    parser.add_argument(
        "lyrics",
        nargs="+",
        help="UTF-8 lyrics file(s); several only with --rhyming-dictionary.",
    )
    parser.add_argument(
        "--dictionary",
        help=(
            "Path to a cmudict formatted pronunciation file. Defaults to the "
            "CMU dictionary bundled with the pronouncing package."
        ),
    )
    parser.add_argument(
        "--min-similarity",
        type=float,
        help="Average-linkage threshold for grouping rhymes (default 77).",
    )
    parser.add_argument(
        "--max-candidates",
        type=int,
        help="Refuse lyrics with more rhymable words than this.",
    )
    parser.add_argument(
        "--statistics",
        action="store_true",
        help="Report rhyme statistics instead of the labeled lyrics.",
    )
    parser.add_argument(
        "--rhyming-dictionary",
        action="store_true",
        help="List the words of all given songs grouped by rhyme.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit JSON instead of annotated text.",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (defaults to RHYME_SCHEME_LOG_LEVEL, then INFO).",
    )
    return parser


def _load_dictionary(path: str | None, lyrics: str):
    if path:
        return CMUDictLoader(path)
    words = {clean_word(token) for token in lyrics.split()}
    return load_pronouncing_dictionary(word for word in words if word)


def _format_lines(lines) -> str:
    rendered: List[str] = []
    for line in lines:
        parts = [
            f"{word.text}[{word.rhyme_group}]" if word.rhyme_group else word.text
            for word in line
        ]
        rendered.append(" ".join(parts))
    return "\n".join(rendered)


def _format_rhyming_dictionary(groups) -> str:
    rendered = [
        f"-{group.sound}: {', '.join(group.words)}"
        for group in groups[:DICTIONARY_PREVIEW_GROUPS]
    ]
    if len(groups) > DICTIONARY_PREVIEW_GROUPS:
        rendered.append(
            f"Showing first {DICTIONARY_PREVIEW_GROUPS} rhyme groups. Total: {len(groups)}"
        )
    return "\n".join(rendered)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    if len(args.lyrics) > 1 and not args.rhyming_dictionary:
        parser.error("several lyrics files need --rhyming-dictionary")

    songs = [Path(path).read_text(encoding="utf-8") for path in args.lyrics]
    lyrics = songs[0]
    dictionary = _load_dictionary(args.dictionary, "\n".join(songs))
    try:
        settings = AnalyzerSettings.from_env().override(
            min_similarity=args.min_similarity,
            max_candidates=args.max_candidates,
        )
    except ValueError as error:
        parser.error(str(error))
    analyzer = RhymeSchemeAnalyzer(dictionary, settings=settings)

    if args.rhyming_dictionary:
        groups = analyzer.build_rhyming_dictionary(songs)
        if args.json:
            json.dump([group.as_dict() for group in groups], sys.stdout, ensure_ascii=False)
            sys.stdout.write("\n")
        else:
            print(_format_rhyming_dictionary(groups))
        return 0

    try:
        if args.statistics:
            payload = analyzer.analyze_statistics(lyrics).as_dict()
            json.dump(payload, sys.stdout, indent=2 if not args.json else None, sort_keys=True)
            sys.stdout.write("\n")
            return 0

        lines = analyzer.analyze_scheme(lyrics)
    except LyricsTooLargeError as error:
        print(f"error: {error}", file=sys.stderr)
        return 2

    if args.json:
        json.dump(
            [[word.as_dict() for word in line] for line in lines],
            sys.stdout,
            ensure_ascii=False,
        )
        sys.stdout.write("\n")
        return 0

    print(_format_lines(lines))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
