"""Fixture loading for table_verifier."""

from .loader import load_fixture, read_fixture_document

__all__ = [
    "load_fixture",
    "read_fixture_document",
]
