"""
Corpus ingestion: feed lines of text into a chain.

Sources are local files or plain-text documents fetched over HTTP, such
as Project Gutenberg books. Each non-empty, trimmed line is parsed as one
sentence.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

import requests

from ..config import FETCH_TIMEOUT
from ..engine.chain import MarkovChain

logger = logging.getLogger(__name__)

GUTENBERG_TEXT_URL = "https://www.gutenberg.org/cache/epub/{id}/pg{id}.txt"

_START_MARKERS = ("*** START OF THE PROJECT GUTENBERG", "*** START OF THIS PROJECT GUTENBERG")
_END_MARKERS = ("*** END OF THE PROJECT GUTENBERG", "*** END OF THIS PROJECT GUTENBERG")


def iter_lines(text: str) -> Iterator[str]:
    """Yield the trimmed, non-empty lines of text."""
    for line in text.splitlines():
        line = line.strip()
        if line:
            yield line


def iter_file_lines(path: str | Path) -> Iterator[str]:
    """Yield the trimmed, non-empty lines of a UTF-8 text file."""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            line = line.strip()
            if line:
                yield line


def gutenberg_url(book_id: int) -> str:
    """Plain-text download URL for a Project Gutenberg book."""
    return GUTENBERG_TEXT_URL.format(id=book_id)


def strip_gutenberg_boilerplate(text: str) -> str:
    """Drop the licence header and footer around a Gutenberg book body.

    Text without the markers is returned unchanged.
    """
    lines = text.splitlines()
    start, end = 0, len(lines)

    for i, line in enumerate(lines):
        upper = line.strip().upper()
        if start == 0 and upper.startswith(_START_MARKERS):
            start = i + 1
        elif upper.startswith(_END_MARKERS):
            end = i
            break

    return "\n".join(lines[start:end])


def fetch_text(url: str, timeout: float = FETCH_TIMEOUT) -> str:
    """Download a plain-text document."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    if response.encoding is None:
        response.encoding = "utf-8"
    return response.text


def feed_lines(chain: MarkovChain, lines: Iterable[str]) -> int:
    """Parse each line into chain; returns how many lines were fed."""
    count = 0
    for line in lines:
        chain.parse_sentence(line)
        count += 1
    return count


def load_sources(
    chain: MarkovChain,
    paths: Iterable[str | Path] = (),
    urls: Iterable[str] = (),
) -> int:
    """Feed every readable file and URL into chain.

    A source that cannot be read is logged and skipped. Returns the total
    number of lines ingested.
    """
    total = 0

    for path in paths:
        try:
            n = feed_lines(chain, iter_file_lines(path))
        except OSError as exc:
            logger.warning("Error reading file %s: %s", path, exc)
            continue
        logger.info("Ingested %d lines from %s", n, path)
        total += n

    for url in urls:
        try:
            text = fetch_text(url)
        except requests.RequestException as exc:
            logger.warning("Error fetching %s: %s", url, exc)
            continue
        n = feed_lines(chain, iter_lines(strip_gutenberg_boilerplate(text)))
        logger.info("Ingested %d lines from %s", n, url)
        total += n

    return total
