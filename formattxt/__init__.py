"""Linkify, obfuscate and truncate HTML-bearing text."""

from .engine.exceptions import FormatTxtError, InvalidAttribute
from .engine.index import beautify, linkify, linkify_plain
from .engine.limits import char_limit, line_limit, paragraph_limit
from .engine.obfuscate import obfuscate, obfuscate_email
from .engine.types import LinkOptions

__all__ = [
    'FormatTxtError',
    'InvalidAttribute',
    'LinkOptions',
    'beautify',
    'char_limit',
    'line_limit',
    'linkify',
    'linkify_plain',
    'obfuscate',
    'obfuscate_email',
    'paragraph_limit',
]
