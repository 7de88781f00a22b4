"""URL and email matcher tests."""

from __future__ import annotations

import time

import pytest

from formattxt.engine.patterns import (
    find_emails,
    find_urls,
    has_scheme,
    split_protocols,
    strip_scheme,
)
from formattxt.engine.types import EMAIL, URL

SCHEMES = ("http", "https", "ftp")


def _texts(matches):
    return [match.text for match in matches]


def test_split_protocols_separates_email():
    assert split_protocols(["http", "email", "HTTP", " ", "ftp"]) == (("http", "ftp"), True)
    assert split_protocols(["https"]) == (("https",), False)


def test_scheme_url_excludes_trailing_period():
    matches = find_urls("Visit http://example.com/path.", SCHEMES)

    assert len(matches) == 1
    match = matches[0]
    assert match.kind == URL
    assert match.text == "http://example.com/path"
    assert match.scheme == "http"
    assert match.domain == "example.com"
    assert (match.start, match.length) == (6, len("http://example.com/path"))


def test_www_url_inside_parentheses():
    matches = find_urls("(see www.example.com)", SCHEMES)

    assert _texts(matches) == ["www.example.com"]
    assert matches[0].scheme is None
    assert matches[0].domain == "www.example.com"


def test_balanced_parentheses_are_kept():
    text = "Docs: http://en.wikipedia.org/wiki/Python_(programming_language), enjoy"

    assert _texts(find_urls(text, SCHEMES)) == [
        "http://en.wikipedia.org/wiki/Python_(programming_language)"
    ]


def test_trailing_quotes_and_question_marks_are_excluded():
    assert _texts(find_urls('Is it "example.com/a?"', SCHEMES)) == ["example.com/a"]
    assert _texts(find_urls("Hello, example.com!", SCHEMES)) == ["example.com"]


def test_bare_domains_need_alphabetic_top_level_label():
    assert find_urls("pi is 3.14 and e.g. nothing", SCHEMES) == []
    assert _texts(find_urls("mirror at www2.example.net/files", SCHEMES)) == [
        "www2.example.net/files"
    ]


def test_scheme_set_controls_explicit_schemes():
    matches = find_urls("get ftp://files.example.com/a.txt now", SCHEMES)

    assert _texts(matches) == ["ftp://files.example.com/a.txt"]
    assert matches[0].scheme == "ftp"
    assert matches[0].domain == "files.example.com"


def test_urls_without_schemes_still_match_domains():
    matches = find_urls("see example.org", ())

    assert _texts(matches) == ["example.org"]
    assert matches[0].scheme is None


def test_email_matches():
    matches = find_emails("Mail user.name+tag@mail.example.com now.")

    assert _texts(matches) == ["user.name+tag@mail.example.com"]
    assert matches[0].kind == EMAIL
    assert matches[0].domain == "mail.example.com"


def test_email_in_query_string_is_ignored():
    assert find_emails("http://x.com/?to=user@example.com") == []


def test_has_and_strip_scheme():
    assert has_scheme("HTTPS://example.com", SCHEMES)
    assert not has_scheme("www.example.com", SCHEMES)
    assert not has_scheme("http://example.com", ())
    assert strip_scheme("http://www.example.com/a", SCHEMES) == "example.com/a"
    assert strip_scheme("ftp:files.example.com", SCHEMES) == "files.example.com"
    assert strip_scheme("www2.example.com", SCHEMES) == "www2.example.com"


@pytest.mark.parametrize(
    "text, expected, scheme",
    [
        ("go http://www.example.com/a now", "http://www.example.com/a", "http"),
        ("go www.x now", "www.x", None),
        ("go www-x now", "www-x", None),
        ("go www-cache.example.org/a now", "www-cache.example.org/a", None),
        ("go example.org/a now", "example.org/a", None),
    ],
)
def test_url_prefixes_in_priority_order(text, expected, scheme):
    matches = find_urls(text, SCHEMES)

    assert _texts(matches) == [expected]
    assert matches[0].scheme == scheme


def test_bare_domains_start_at_name_boundaries():
    assert _texts(find_urls("user@example.com", SCHEMES)) == ["example.com"]
    assert find_urls("a.b.c.d.e", SCHEMES) == []


@pytest.mark.parametrize(
    "text, expected",
    [
        ("&lt;example.org&gt;", ["example.org"]),
        ("&#x27;example.com&#x27;", ["example.com"]),
        ("&quot;http://example.com/a?b=1&amp;c=2&quot;", ["http://example.com/a?b=1&amp;c=2"]),
    ],
)
def test_escaped_markup_characters_end_urls(text, expected):
    assert _texts(find_urls(text, SCHEMES)) == expected


def test_email_username_starts_at_word_boundary():
    matches = find_emails("(.user@example.com)")

    assert _texts(matches) == ["user@example.com"]
    assert matches[0].start == 2
    assert _texts(find_emails("o'neil@example.com")) == ["o'neil@example.com"]


@pytest.mark.parametrize("text", ["a." * 10000, "a" * 20000, "a." * 10000 + "@", "www." * 5000])
def test_matching_time_grows_linearly(text):
    started = time.perf_counter()
    find_urls(text, SCHEMES)
    find_emails(text)

    assert time.perf_counter() - started < 1.0
