"""Obfuscation tests.

Output is random, so these tests only check what every draw must satisfy:
it decodes back to the input and it is reproducible for a seeded source.
"""

from __future__ import annotations

import html
import random
import re

import pytest

from formattxt.engine.obfuscate import obfuscate, obfuscate_email


@pytest.mark.parametrize("seed", range(10))
def test_obfuscated_text_decodes_to_original(seed):
    value = "mailto:user.name+tag@example.com"

    assert html.unescape(obfuscate(value, random.Random(seed))) == value


def test_seeded_sources_are_reproducible():
    value = "someone@example.org"

    assert obfuscate(value, random.Random(7)) == obfuscate(value, random.Random(7))


def test_all_three_encodings_are_used():
    rendered = obfuscate("a" * 200, random.Random(1))

    assert "&#97;" in rendered
    assert "&#x61;" in rendered
    assert "a" in rendered.replace("&#x61;", "")


@pytest.mark.parametrize("seed", range(10))
def test_email_at_sign_is_always_hidden(seed):
    rendered = obfuscate_email("user@example.com", random.Random(seed))

    assert "@" not in rendered
    assert html.unescape(rendered) == "user@example.com"


def test_default_source_is_used_without_rng():
    assert html.unescape(obfuscate("hello")) == "hello"


def test_first_non_ascii_character_ends_output():
    # Everything before and after the first character above U+0080 is dropped.
    assert obfuscate("café ok", random.Random(0)) == "é"
    assert obfuscate_email("ü@example.com", random.Random(0)) == "ü"


def test_code_point_128_is_still_encoded():
    assert obfuscate("\x80", random.Random(3)) in {"&#128;", "&#x80;", "\x80"}


@pytest.mark.parametrize("seed", range(10))
def test_markup_characters_are_always_encoded(seed):
    value = "<b title=\"o'neil\">&</b>"
    rendered = obfuscate(value, random.Random(seed))

    bare = re.sub(r"&#x?[0-9a-f]+;", "", rendered)
    assert not set(bare) & set("&<>\"'")
    assert html.unescape(rendered) == value
