"""Shared fixtures for engine tests."""

from __future__ import annotations

import random

import pytest
from bs4 import BeautifulSoup

from formattxt.engine.config import load_config
from formattxt.engine.types import LinkOptions


@pytest.fixture()
def engine_config():
    """Provide a fresh copy of the default engine configuration."""

    return load_config(None)


@pytest.fixture()
def options():
    return LinkOptions()


@pytest.fixture()
def rng():
    """Seeded random source so obfuscated output is reproducible within a test."""

    return random.Random(1234)


@pytest.fixture()
def parse():
    """Parse an HTML fragment with BeautifulSoup."""

    def _parse(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    return _parse
