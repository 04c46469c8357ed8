"""Fingerprints for content-type field lists."""

from __future__ import annotations

import hashlib
from typing import Any, Iterable

from .canonical_json import canonical_dumps


def _as_plain(field: Any) -> Any:
    to_dict = getattr(field, "to_dict", None)
    return to_dict() if callable(to_dict) else field


def schema_hash(fields: Iterable[Any]) -> str:
    """Return ``sha256:<hex>`` over the ordered field declarations.

    Accepts parsed declarations (anything with ``to_dict``) or raw dicts.
    """
    plain = [_as_plain(f) for f in fields]
    digest = hashlib.sha256(canonical_dumps(plain).encode("utf-8")).hexdigest()
    return f"sha256:{digest}"
