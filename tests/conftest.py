"""Shared pytest fixtures for hexfield tests."""

import pytest

from hexfield.codec import normalize, to_bits
from hexfield.templates import TemplateStore


@pytest.fixture
def bits_of():
    """Factory: hex text -> BitSequence."""
    def _bits_of(hex_text):
        return to_bits(normalize(hex_text))

    return _bits_of


@pytest.fixture
def store(tmp_path):
    with TemplateStore(tmp_path / "templates.db") as s:
        yield s


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "cli.db")
