"""Splitting documents into text and tag segments.

Every pass in the engine works on the same segmentation: a single
delimiter-preserving split on ``<...>`` tokens. Even positions of the split
are literal text (possibly empty), odd positions are tags. Malformed angle
brackets never form a tag and stay inside the surrounding text, so joining
the segments always reproduces the input exactly.

The opacity tracker walks that sequence and reports which text segments sit
inside a tag whose content must never be rewritten (code blocks, scripts,
existing links and so on).
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional, Tuple

from .types import MARKUP, TEXT, Segment

# Tags inside which links should never be inserted
IGNORE_TAGS: Tuple[str, ...] = (
    "head",
    "link",
    "a",
    "script",
    "style",
    "code",
    "pre",
    "select",
    "textarea",
    "button",
)

_TAG_SPLIT_RE = re.compile(r"(<[^>]+>)")

_OPEN_IGNORE_RE = re.compile(
    r"<({names})(?=[\s/>]).*(?<!/)>$".format(names="|".join(IGNORE_TAGS)),
    re.IGNORECASE | re.DOTALL,
)

# A named, decimal or hexadecimal character reference, or any other single character
_VISIBLE_UNIT_RE = re.compile(
    r"&(?:[a-z][a-z0-9]*|#[0-9]+|#x[0-9a-f]+);|.",
    re.IGNORECASE | re.DOTALL,
)


def split_segments(text: str) -> List[Segment]:
    """Return the alternating text/markup segments of ``text``."""

    parts = _TAG_SPLIT_RE.split(text)
    return [
        Segment(kind=MARKUP if position % 2 else TEXT, content=part, index=position)
        for position, part in enumerate(parts)
    ]


def join_segments(segments: Iterable[Segment]) -> str:
    return "".join(segment.content for segment in segments)


class OpacityTracker:
    """Track whether the scan is currently inside an ignored tag.

    Only one open tag is remembered at a time. While a ``<pre>`` is open,
    an inner ``<code>`` is plain markup and only ``</pre>`` reopens the
    document for rewriting.
    """

    def __init__(self) -> None:
        self.open_tag: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.open_tag is not None

    def feed(self, segment: Segment) -> None:
        """Update the open-tag state from a markup segment."""

        if not segment.is_markup:
            return
        if self.open_tag is None:
            match = _OPEN_IGNORE_RE.match(segment.content)
            if match:
                self.open_tag = match.group(1).lower()
            return
        closing = re.search(
            r"</\s*{name}\s*>".format(name=re.escape(self.open_tag)),
            segment.content,
            re.IGNORECASE,
        )
        if closing:
            self.open_tag = None


def iter_eligible(segments: Iterable[Segment]) -> Iterator[Tuple[Segment, bool]]:
    """Yield each segment with a flag telling whether it may be rewritten.

    Markup segments are never eligible; text segments are eligible when no
    ignored tag is open.
    """

    tracker = OpacityTracker()
    for segment in segments:
        if segment.is_markup:
            tracker.feed(segment)
            yield segment, False
        else:
            yield segment, not tracker.is_open


def visible_units(text: str) -> List[str]:
    """Split plain text into visible units, one per character or entity."""

    return _VISIBLE_UNIT_RE.findall(text)


def visible_length(text: str) -> int:
    """Return the number of visible characters in ``text``.

    Tags are not counted and every entity reference counts as one character.
    """

    return sum(
        len(visible_units(segment.content))
        for segment in split_segments(text)
        if not segment.is_markup
    )
