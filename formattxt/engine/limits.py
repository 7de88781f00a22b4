"""Paragraph, line and character limits for mixed HTML and plain text.

All three limits cut at structural boundaries. Paragraph and line limits
work on ``<p>``/``<br>`` markup when the document uses it and on blank
lines and newlines otherwise. The character limit counts visible
characters only: tags are skipped and each entity reference counts once.
Tags are never removed by the character limit, so every element that was
opened is still closed in the result.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from .tokenizer import split_segments, visible_length, visible_units
from .types import TruncationBudget

logger = logging.getLogger(__name__)

_P_BLOCK_RE = re.compile(r"(<p\b[^>]*>)(.*?)(</p\s*>)", re.IGNORECASE | re.DOTALL)
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BR_SPLIT_RE = re.compile(r"(<br\s*/?>)", re.IGNORECASE)
_TRAILING_BREAKS_RE = re.compile(r"(?:\s|<br\s*/?>)+$", re.IGNORECASE)
_BLANK_LINES_RE = re.compile(r"\n(?:[ \t]*\n)+")


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n")


def paragraph_limit(text: str, limit: int, line_count: Optional[int] = None) -> str:
    """Keep the first ``limit`` paragraphs of ``text``.

    Paragraphs are ``<p>...</p>`` blocks when the text contains any, else
    runs of text separated by blank lines. Anything after the last kept
    paragraph is dropped. When ``line_count`` is given every kept paragraph
    is also passed through :func:`line_limit`.
    """

    text = _normalize_newlines(text)
    if limit <= 0:
        return ""

    if _P_BLOCK_RE.search(text):
        pattern = re.compile(
            r"(?:.*?<p\b[^>]*>.*?</p\s*>){0,%d}" % limit,
            re.IGNORECASE | re.DOTALL,
        )
        kept = pattern.match(text).group(0)
        if line_count is not None:
            kept = _P_BLOCK_RE.sub(
                lambda block: block.group(1) + line_limit(block.group(2), line_count) + block.group(3),
                kept,
            )
        return kept

    lead = re.match(r"\n*", text).group(0)
    parts = re.split(r"(\n{2,})", text[len(lead):])
    paragraphs = parts[0::2][:limit]
    separators = parts[1::2]
    if line_count is not None:
        paragraphs = [line_limit(paragraph, line_count) for paragraph in paragraphs]

    pieces: List[str] = [lead]
    for position, paragraph in enumerate(paragraphs):
        if position:
            pieces.append(separators[position - 1])
        pieces.append(paragraph)
    return "".join(pieces)


def line_limit(text: str, limit: int) -> str:
    """Keep the first ``limit`` lines of a paragraph.

    Lines are separated by ``<br>`` tags when present, otherwise by
    newlines. Break markers and whitespace left dangling at the end of the
    cut are removed. Text made only of whitespace is returned as is.
    """

    if not text.strip():
        return text
    text = _normalize_newlines(text)
    if _BR_RE.search(text):
        parts = _BR_SPLIT_RE.split(text)
    else:
        parts = re.split(r"(\n)", text)

    if len(parts[0::2]) <= limit:
        return text
    if limit <= 0:
        return ""
    kept = "".join(parts[: 2 * limit - 1])
    return _TRAILING_BREAKS_RE.sub("", kept)


def squeeze_blank_lines(text: str) -> str:
    """Reduce every run of blank lines to a single blank line."""

    return _BLANK_LINES_RE.sub("\n\n", _normalize_newlines(text))


def char_limit(
    text: str,
    limit: int,
    ellipsis: str = "&hellip;",
    collapse_blank_lines: bool = True,
) -> str:
    """Cut ``text`` to ``limit`` visible characters and append ``ellipsis``.

    Text within budget is returned unchanged. Otherwise characters are
    removed from the end of the text segments, walking backwards and leaving
    every tag in place, and the ellipsis is attached where the cut ends.
    """

    if visible_length(text) <= limit:
        return text
    if collapse_blank_lines:
        text = squeeze_blank_lines(text)

    segments = split_segments(text)
    overflow = visible_length(text) - max(limit, 0)
    if overflow <= 0:
        return text

    contents = [segment.content for segment in segments]
    cut_index: Optional[int] = None
    for segment in reversed(segments):
        if overflow <= 0:
            break
        if segment.is_markup:
            continue
        units = visible_units(segment.content)
        if len(units) <= overflow:
            overflow -= len(units)
            contents[segment.index] = ""
        else:
            contents[segment.index] = "".join(units[: len(units) - overflow])
            overflow = 0
            cut_index = segment.index

    if cut_index is None:
        cut_index = next(
            (
                segment.index
                for segment in reversed(segments)
                if not segment.is_markup and contents[segment.index]
            ),
            0,
        )
    contents[cut_index] += ellipsis
    logger.debug("char_limit cut %d visible characters to %d", visible_length(text), limit)
    return "".join(contents)


def apply_budget(text: str, budget: TruncationBudget) -> str:
    """Apply a :class:`TruncationBudget` to ``text``."""

    if budget.unit == TruncationBudget.PARAGRAPHS:
        return paragraph_limit(text, budget.count, budget.line_count)
    if budget.unit == TruncationBudget.LINES:
        return line_limit(text, budget.count)
    if budget.unit == TruncationBudget.CHARACTERS:
        return char_limit(text, budget.count)
    raise ValueError(f"Unknown truncation unit: {budget.unit}")
