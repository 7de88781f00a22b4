"""URL and email matchers.

Both matchers run over plain text only; the caller is responsible for
keeping them away from markup. Prefixes of the URL pattern are tried in
priority order: an explicit scheme, ``www`` hosts, ``www-`` hosts and
finally anything that looks like a bare domain name.

Matching cost stays linear in the length of the text. A bare domain and an
email username may only start where a run of name characters starts, so
``finditer`` never rescans the same run from every offset inside it.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

from .types import EMAIL, URL, Match

# Escaped markup characters end a URL the way the raw characters do
_URL_BODY = r"""
    (?:                                     # zero or more:
        (?!&(?:lt|gt|quot|\#x27|\#39);)     #   not an escaped < > " or '
        [^\s()<>]                           #   a non-space, non-()<> character
      | \((?:[^\s()<>]|\([^\s()<>]+\))*\)   #   balanced parens, up to 2 levels
    )*
    (?:                                     # end with:
        \((?:[^\s()<>]|\([^\s()<>]+\))*\)   #   balanced parens, up to 2 levels
      | (?!&(?:lt|gt|quot|\#x27|\#39);)
        [^\s`!\-()\[\]{};:'".,<>?«»“”‘’]    #   not a space or trailing punctuation
    )
"""

_PREFIXES = (
    r"www\d{0,3}\.",  # "www.", "www1.", "www2." ... "www999."
    r"www\-",
    r"(?<![a-z0-9.\-])[a-z0-9.\-]+\.[a-z]{2,}",  # looks like a domain name
)

_EMAIL_CHARS = r"[A-Z0-9._'%+-]"

EMAIL_RE = re.compile(
    r"""
    (?<!{chars})        # start of a run of username characters
    {chars}+            # username
    @
    [A-Z0-9.-]+         # domain
    \.
    [A-Z]{{2,4}}        # top-level label
    """.format(chars=_EMAIL_CHARS),
    re.IGNORECASE | re.ASCII | re.VERBOSE,
)

# Where a username may begin inside the run: a word boundary not preceded
# by "=", so addresses in query strings are left alone
_USERNAME_START_RE = re.compile(r"\b(?<!=)", re.ASCII)


def split_protocols(protocols: Iterable[str]) -> Tuple[Tuple[str, ...], bool]:
    """Separate URL schemes from the ``email`` pseudo-protocol.

    Returns the schemes in their given order (duplicates and blanks dropped)
    and whether email matching is enabled.
    """

    schemes: List[str] = []
    emails = False
    for protocol in protocols:
        name = str(protocol).strip().lower()
        if not name:
            continue
        if name == "email":
            emails = True
            continue
        if name not in schemes:
            schemes.append(name)
    return tuple(schemes), emails


@lru_cache(maxsize=32)
def url_pattern(schemes: Tuple[str, ...]) -> re.Pattern[str]:
    """Compile the URL matcher for the given schemes."""

    prefixes = list(_PREFIXES)
    if schemes:
        alternation = "|".join(re.escape(scheme) for scheme in schemes)
        prefixes.insert(0, rf"(?P<scheme>{alternation}):(?://)?")
    source = "(?:{prefixes}){body}".format(prefixes="|".join(prefixes), body=_URL_BODY)
    return re.compile(source, re.IGNORECASE | re.VERBOSE)


@lru_cache(maxsize=32)
def scheme_prefix_pattern(schemes: Tuple[str, ...]) -> Optional[re.Pattern[str]]:
    """Compile a pattern matching a leading ``scheme:`` or ``scheme://``."""

    if not schemes:
        return None
    alternation = "|".join(re.escape(scheme) for scheme in schemes)
    return re.compile(rf"^(?:{alternation}):(?://)?", re.IGNORECASE)


def has_scheme(text: str, schemes: Sequence[str]) -> bool:
    pattern = scheme_prefix_pattern(tuple(schemes))
    return bool(pattern and pattern.match(text))


def strip_scheme(text: str, schemes: Sequence[str]) -> str:
    """Remove a leading scheme and then a leading ``www.`` from ``text``."""

    pattern = scheme_prefix_pattern(tuple(schemes))
    if pattern is not None:
        text = pattern.sub("", text, count=1)
    if text[:4].lower() == "www.":
        text = text[4:]
    return text


def _host(text: str, scheme: Optional[str]) -> str:
    rest = text
    if scheme:
        rest = text[len(scheme) + 1:]
        if rest.startswith("//"):
            rest = rest[2:]
    return re.split(r"[/?#:]", rest, maxsplit=1)[0]


def find_urls(text: str, schemes: Sequence[str]) -> List[Match]:
    """Return URL matches in ``text`` in document order."""

    matches: List[Match] = []
    for found in url_pattern(tuple(schemes)).finditer(text):
        scheme = found.groupdict().get("scheme")
        matches.append(
            Match(
                kind=URL,
                start=found.start(),
                end=found.end(),
                text=found.group(0),
                scheme=scheme.lower() if scheme else None,
                domain=_host(found.group(0), scheme),
            )
        )
    return matches


def find_emails(text: str) -> List[Match]:
    """Return email address matches in ``text`` in document order."""

    matches: List[Match] = []
    position = 0
    while True:
        found = EMAIL_RE.search(text, position)
        if found is None:
            return matches
        at = text.index("@", found.start())
        username = _USERNAME_START_RE.search(text, found.start(), at)
        if username is None or username.start() >= at:
            position = at + 1
            continue
        matches.append(
            Match(
                kind=EMAIL,
                start=username.start(),
                end=found.end(),
                text=text[username.start():found.end()],
                scheme=None,
                domain=text[at + 1:found.end()],
            )
        )
        position = found.end()
