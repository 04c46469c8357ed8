"""Canonical JSON encoding used to fingerprint server-declared schemas."""

from __future__ import annotations

import json
import math
from typing import Any


class CanonicalJsonError(TypeError):
    """Raised when a value has no canonical JSON form."""


_SCALARS = (str, int, bool)


def _normalize(obj: Any, path: str) -> Any:
    if obj is None or isinstance(obj, _SCALARS):
        return obj
    if isinstance(obj, float):
        if not math.isfinite(obj):
            raise ValueError(f"Non-finite float at {path}: {obj!r}")
        return obj
    if isinstance(obj, dict):
        out = {}
        for key, value in obj.items():
            if not isinstance(key, str):
                raise CanonicalJsonError(f"Unsupported key type at {path}: {type(key).__name__}")
            out[key] = _normalize(value, f"{path}.{key}")
        return out
    # field options arrive as tuples once parsed; encode them like lists
    if isinstance(obj, (list, tuple)):
        return [_normalize(item, f"{path}[{idx}]") for idx, item in enumerate(obj)]
    raise CanonicalJsonError(f"Unsupported type at {path}: {type(obj).__name__}")


def canonical_dumps(obj: Any) -> str:
    """Encode ``obj`` so that equal content always yields equal text.

    Dict keys are sorted at every depth, sequence order is kept, non-ASCII
    text is written as-is and no insignificant whitespace is emitted.
    """
    return json.dumps(
        _normalize(obj, "$"),
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    )
