"""Deterministic serialization helpers for the console runtime."""

from .canonical_json import CanonicalJsonError, canonical_dumps
from .schema_hash import schema_hash

__all__ = [
    "CanonicalJsonError",
    "canonical_dumps",
    "schema_hash",
]
