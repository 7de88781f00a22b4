"""Template filters exposing the formatting engine to Django templates.

Usage::

    {% load formattxt %}
    {{ comment.body|linkify }}
    {{ post.body|beautify|paragraph_limit:"3,4" }}
    {{ post.summary|char_limit:140 }}

Filters follow the autoescaping rules of Django's own ``urlize``. Input that
is not already marked safe is plain text: links are matched first and only
the text around them is escaped. The output is always marked safe.
"""

from __future__ import annotations

import html
from functools import lru_cache
from typing import Any

from django import template
from django.conf import settings
from django.utils.html import escape
from django.utils.safestring import SafeData, mark_safe

from formattxt.engine.config import EngineConfig, load_config
from formattxt.engine.index import beautify as beautify_text
from formattxt.engine.index import linkify as linkify_text
from formattxt.engine.index import linkify_plain
from formattxt.engine.limits import apply_budget
from formattxt.engine.limits import char_limit as limit_chars
from formattxt.engine.obfuscate import obfuscate_email as obfuscate_address
from formattxt.engine.types import LinkOptions, TruncationBudget

register = template.Library()


@lru_cache(maxsize=1)
def engine_config() -> EngineConfig:
    """Return the engine configuration named by ``settings.FORMATTXT_CONFIG``."""

    return load_config(getattr(settings, 'FORMATTXT_CONFIG', None))


def _is_unsafe(value: Any, autoescape: bool) -> bool:
    return autoescape and not isinstance(value, SafeData)


def _source(value: Any, autoescape: bool) -> str:
    if _is_unsafe(value, autoescape):
        return escape(value)
    return str(value)


def _parse_counts(arg: Any) -> tuple[int, int | None]:
    """Parse ``"3"`` or ``"3,4"`` into a paragraph count and optional line count."""

    pieces = [piece.strip() for piece in str(arg).split(',')]
    try:
        count = int(pieces[0])
        line_count = int(pieces[1]) if len(pieces) > 1 and pieces[1] else None
    except ValueError as exc:
        raise template.TemplateSyntaxError(f'Invalid limit argument: {arg!r}') from exc
    return count, line_count


@register.filter(is_safe=True, needs_autoescape=True)
def linkify(value: Any, autoescape: bool = True) -> str:
    config = engine_config()
    options = LinkOptions.from_config(config)
    if _is_unsafe(value, autoescape):
        return mark_safe(linkify_plain(str(value), config.protocols, options))
    return mark_safe(linkify_text(str(value), config.protocols, options))


@register.filter(is_safe=True, needs_autoescape=True)
def beautify(value: Any, autoescape: bool = True) -> str:
    config = engine_config()
    options = LinkOptions.from_config(config)
    plain = _is_unsafe(value, autoescape)
    return mark_safe(beautify_text(str(value), config.protocols, options, plain=plain))


@register.filter(is_safe=True)
def paragraph_limit(value: Any, arg: Any) -> str:
    count, line_count = _parse_counts(arg)
    return apply_budget(str(value), TruncationBudget(TruncationBudget.PARAGRAPHS, count, line_count))


@register.filter(is_safe=True)
def line_limit(value: Any, arg: Any) -> str:
    count, _ = _parse_counts(arg)
    return apply_budget(str(value), TruncationBudget(TruncationBudget.LINES, count))


@register.filter(is_safe=True, needs_autoescape=True)
def char_limit(value: Any, arg: Any, autoescape: bool = True) -> str:
    count, _ = _parse_counts(arg)
    config = engine_config()
    text = limit_chars(
        _source(value, autoescape),
        count,
        ellipsis=config.get('ellipsis', '&hellip;'),
        collapse_blank_lines=config.get('collapse_blank_lines', True),
    )
    return mark_safe(text)


@register.filter(is_safe=True, needs_autoescape=True)
def obfuscate_email(value: Any, autoescape: bool = True) -> str:
    address = str(value) if _is_unsafe(value, autoescape) else html.unescape(str(value))
    return mark_safe(obfuscate_address(address))
