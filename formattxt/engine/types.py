"""Typed data structures used by the formatting engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

TEXT = "text"
MARKUP = "markup"

URL = "url"
EMAIL = "email"

DEFAULT_PROTOCOLS: Tuple[str, ...] = ("http", "https", "ftp", "email")

# (href, caption, is_email) -> replacement markup, or None to keep the default anchor
LinkCallback = Callable[[str, str, bool], Optional[str]]


@dataclass(frozen=True)
class Segment:
    """A contiguous slice of a document, either literal text or a tag."""

    kind: str
    content: str
    index: int

    @property
    def is_markup(self) -> bool:
        return self.kind == MARKUP


@dataclass(frozen=True)
class Match:
    """A URL or email span found inside a text segment."""

    kind: str
    start: int
    end: int
    text: str
    scheme: Optional[str]
    domain: str

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class LinkOptions:
    """Options controlling how matched URLs and emails are rendered."""

    strip_scheme: bool = True
    max_caption_length: int = 40
    attributes: Dict[str, str] = field(default_factory=dict)
    callback: Optional[LinkCallback] = None
    ellipsis: str = "&hellip;"
    email_first: bool = True
    max_text_length: Optional[int] = 1_000_000

    @classmethod
    def from_config(cls, config, callback: Optional[LinkCallback] = None) -> "LinkOptions":
        """Build options from an :class:`~formattxt.engine.config.EngineConfig`."""

        return cls(
            strip_scheme=bool(config.get("strip_scheme", True)),
            max_caption_length=int(config.get("max_caption_length", 40)),
            attributes=dict(config.get("attributes") or {}),
            callback=callback,
            ellipsis=str(config.get("ellipsis", "&hellip;")),
            email_first=bool(config.get("email_first", True)),
            max_text_length=config.get("max_text_length"),
        )


@dataclass(frozen=True)
class Anchor:
    """Rendered hyperlink for one match."""

    href: str
    caption: str
    attributes: str = ""

    def render(self) -> str:
        href = self.href.replace('"', "&quot;")
        return f'<a href="{href}"{self.attributes}>{self.caption}</a>'


@dataclass(frozen=True)
class TruncationBudget:
    """How much of a document to keep: paragraphs, lines or visible characters."""

    unit: str
    count: int
    line_count: Optional[int] = None

    PARAGRAPHS = "paragraphs"
    LINES = "lines"
    CHARACTERS = "characters"
