"""Rendering matched URLs and email addresses as anchors."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .exceptions import InvalidAttribute
from .obfuscate import obfuscate, obfuscate_email
from .patterns import has_scheme, strip_scheme
from .tokenizer import visible_units
from .types import Anchor, LinkOptions, Match


@dataclass(frozen=True)
class RewriteContext:
    """Options shared by every rewrite in one linkify pass."""

    schemes: Tuple[str, ...]
    options: LinkOptions
    attributes: str
    rng: Optional[random.Random] = None


def build_attributes(attributes: Dict[str, str]) -> str:
    """Serialize anchor attributes, each prefixed by a space.

    Values are wrapped in whichever quote character they do not contain, so
    no escaping is ever needed. A value containing both is rejected.
    """

    rendered: List[str] = []
    for name, value in attributes.items():
        value = str(value)
        if '"' in value and "'" in value:
            raise InvalidAttribute(name, value)
        if "'" in value:
            rendered.append(f' {name}="{value}"')
        else:
            rendered.append(f" {name}='{value}'")
    return "".join(rendered)


def build_context(
    schemes: Sequence[str],
    options: LinkOptions,
    rng: Optional[random.Random] = None,
) -> RewriteContext:
    return RewriteContext(
        schemes=tuple(schemes),
        options=options,
        attributes=build_attributes(options.attributes),
        rng=rng,
    )


def shorten_caption(caption: str, max_length: int, ellipsis: str = "&hellip;") -> str:
    """Cut ``caption`` to ``max_length`` visible characters including the ellipsis."""

    if not max_length or max_length < 1:
        return caption
    units = visible_units(caption)
    if len(units) <= max_length:
        return caption
    return "".join(units[: max_length - 1]) + ellipsis


def render_url(match: Match, context: RewriteContext) -> str:
    options = context.options
    href = caption = match.text
    if not has_scheme(href, context.schemes):
        href = "http://" + href
    if options.strip_scheme:
        caption = strip_scheme(caption, context.schemes) or caption
    caption = shorten_caption(caption, options.max_caption_length, options.ellipsis)

    if options.callback is not None:
        replacement = options.callback(href, caption, False)
        if replacement is not None:
            return replacement

    return Anchor(href=href, caption=caption, attributes=context.attributes).render()


def render_email(match: Match, context: RewriteContext) -> str:
    options = context.options
    if options.callback is not None:
        replacement = options.callback(match.text, match.text, True)
        if replacement is not None:
            return replacement

    href = obfuscate("mailto:", context.rng) + obfuscate_email(match.text, context.rng)
    caption = obfuscate_email(match.text, context.rng)
    return Anchor(href=href, caption=caption, attributes=context.attributes).render()


def rewrite_text(
    text: str,
    matches: Sequence[Match],
    render: Callable[[Match], str],
    escape: Optional[Callable[[str], str]] = None,
) -> str:
    """Replace each match span in ``text`` with its rendered markup.

    When ``escape`` is given it is applied to the text between matches.
    """

    escape = escape or str
    if not matches:
        return escape(text)
    pieces: List[str] = []
    cursor = 0
    for match in matches:
        pieces.append(escape(text[cursor:match.start]))
        pieces.append(render(match))
        cursor = match.end
    pieces.append(escape(text[cursor:]))
    return "".join(pieces)
