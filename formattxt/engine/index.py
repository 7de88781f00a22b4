"""Coordinator for the linkify pipeline."""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from functools import partial
from operator import attrgetter
from typing import Callable, Iterable, List, Optional, Tuple

from django.utils.html import escape, linebreaks

from .patterns import find_emails, find_urls, split_protocols
from .rewrite import RewriteContext, build_context, render_email, render_url, rewrite_text
from .tokenizer import iter_eligible, split_segments
from .types import DEFAULT_PROTOCOLS, EMAIL, LinkOptions, Match

logger = logging.getLogger(__name__)

Finder = Callable[[str], List[Match]]


def linkify(
    text: str,
    protocols: Iterable[str] = DEFAULT_PROTOCOLS,
    options: LinkOptions | None = None,
    *,
    rng: Optional[random.Random] = None,
) -> str:
    """Wrap URLs and email addresses found in ``text`` in anchors.

    Text inside ignored tags (existing links, code, scripts, form controls
    and so on) and the tags themselves are left untouched. Emails are
    matched in their own pass, before URLs unless ``options.email_first``
    is off; the second pass sees the anchors made by the first as ignored
    ``<a>`` scopes, so nothing is linked twice.

    Raises :class:`~formattxt.engine.exceptions.InvalidAttribute` when an
    attribute value contains both quote characters.
    """

    link_options = options or LinkOptions()
    schemes, emails = split_protocols(protocols)
    context = build_context(schemes, link_options, rng)

    if not text:
        return text
    limit = link_options.max_text_length
    if limit is not None and len(text) > limit:
        logger.warning("Skipping linkify for %d characters of text (limit %d)", len(text), limit)
        return text

    passes = [_url_pass(context)]
    if emails:
        if link_options.email_first:
            passes.insert(0, _email_pass(context))
        else:
            passes.append(_email_pass(context))

    for run_pass in passes:
        text = run_pass(text)
    return text


def linkify_plain(
    text: str,
    protocols: Iterable[str] = DEFAULT_PROTOCOLS,
    options: LinkOptions | None = None,
    *,
    rng: Optional[random.Random] = None,
) -> str:
    """Linkify untrusted plain text, escaping everything outside the anchors.

    Addresses are matched before anything is escaped, as Django's ``urlize``
    does, so quotes and angle brackets around a URL never leak into its
    link. The second pass only searches the text between first-pass matches.
    """

    link_options = options or LinkOptions()
    schemes, emails = split_protocols(protocols)
    context = build_context(schemes, link_options, rng)

    text = str(text)
    limit = link_options.max_text_length
    if limit is not None and len(text) > limit:
        logger.warning("Skipping linkify for %d characters of text (limit %d)", len(text), limit)
        return escape(text)

    finders: List[Tuple[str, Finder]] = [("url", partial(find_urls, schemes=context.schemes))]
    if emails:
        if link_options.email_first:
            finders.insert(0, ("email", find_emails))
        else:
            finders.append(("email", find_emails))

    matches: List[Match] = []
    for label, finder in finders:
        found = _find_between(text, matches, finder)
        logger.debug("Linked %d %s matches", len(found), label)
        matches = sorted(matches + found, key=attrgetter("start"))
    return rewrite_text(text, matches, partial(_render_plain, context=context), escape=escape)


def _find_between(text: str, taken: List[Match], finder: Finder) -> List[Match]:
    bounds = [0]
    for match in taken:
        bounds.extend((match.start, match.end))
    bounds.append(len(text))

    found: List[Match] = []
    for start, end in zip(bounds[0::2], bounds[1::2]):
        for match in finder(text[start:end]):
            found.append(replace(match, start=match.start + start, end=match.end + start))
    return found


def _render_plain(match: Match, context: RewriteContext) -> str:
    if match.kind == EMAIL:
        return render_email(match, context)
    return render_url(replace(match, text=str(escape(match.text))), context)


def _url_pass(context: RewriteContext) -> Callable[[str], str]:
    return partial(
        _rewrite_document,
        finder=partial(find_urls, schemes=context.schemes),
        render=partial(render_url, context=context),
        label="url",
    )


def _email_pass(context: RewriteContext) -> Callable[[str], str]:
    return partial(
        _rewrite_document,
        finder=find_emails,
        render=partial(render_email, context=context),
        label="email",
    )


def _rewrite_document(
    text: str,
    *,
    finder: Finder,
    render: Callable[[Match], str],
    label: str,
) -> str:
    """Run one match/render pass over the eligible text segments of ``text``."""

    pieces: List[str] = []
    total = 0
    for segment, eligible in iter_eligible(split_segments(text)):
        if not eligible or not segment.content:
            pieces.append(segment.content)
            continue
        matches = finder(segment.content)
        total += len(matches)
        pieces.append(rewrite_text(segment.content, matches, render))
    logger.debug("Linked %d %s matches", total, label)
    return "".join(pieces)


def beautify(
    text: str,
    protocols: Iterable[str] = DEFAULT_PROTOCOLS,
    options: LinkOptions | None = None,
    *,
    plain: bool = False,
) -> str:
    """Linkify ``text`` and convert its line breaks into paragraphs.

    With ``plain`` the text is treated as untrusted plain text and escaped,
    see :func:`linkify_plain`.
    """

    linked = linkify_plain(text, protocols, options) if plain else linkify(text, protocols, options)
    return linebreaks(linked)
