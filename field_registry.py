"""Field type registry: type tag -> (validation rule builder, UI handler id)."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Tuple

from content_model import FieldDeclaration


Issue = Dict[str, Any]


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


# Marks a field with no value at all in the submitted mapping.
MISSING: Any = _Missing()

FALLBACK_UI_HANDLER = "raw_input"
MEDIA_MULTIPLE_OPTION = "multiple"


def _issue(code: str, message: str, path: str | None = None, detail: dict | None = None) -> Issue:
    return {"code": code, "message": message, "path": path, "detail": detail}


def is_absent(value: Any) -> bool:
    return value is MISSING or value is None


def is_empty(value: Any) -> bool:
    if is_absent(value):
        return True
    if isinstance(value, str) and value == "":
        return True
    if isinstance(value, list) and not value:
        return True
    return False


Check = Callable[[Any], "Issue | None"]


@dataclass(frozen=True)
class ValidationRule:
    """Ordered checks for one field; every failing check is reported."""

    field_name: str
    checks: Tuple[Check, ...] = ()
    required: bool = False

    def check(self, value: Any = MISSING) -> List[Issue]:
        issues: List[Issue] = []
        for check in self.checks:
            issue = check(value)
            if issue is not None:
                issues.append(issue)
        return issues

    def is_valid(self, value: Any = MISSING) -> bool:
        return not self.check(value)


def typed_rule(field: FieldDeclaration, accepts: Callable[[Any], bool], message: str, code: str = "TYPE_MISMATCH", detail: dict | None = None) -> ValidationRule:
    """Rule that applies ``accepts`` to present values only."""
    name = field.field_name

    def check(value: Any) -> Issue | None:
        if is_absent(value) or accepts(value):
            return None
        return _issue(code, message, path=name, detail=detail)

    return ValidationRule(field_name=name, checks=(check,))


def require_non_empty(rule: ValidationRule) -> ValidationRule:
    """Compose ``rule`` with a non-empty check; the base checks still run."""
    if rule.required:
        return rule
    name = rule.field_name

    def check(value: Any) -> Issue | None:
        if is_empty(value):
            return _issue("REQUIRED_FIELD", f"{name} is required", path=name)
        return None

    return replace(rule, checks=(check,) + rule.checks, required=True)


def permissive_rule(field: FieldDeclaration) -> ValidationRule:
    return ValidationRule(field_name=field.field_name)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def build_text_rule(field: FieldDeclaration) -> ValidationRule:
    return typed_rule(field, lambda v: isinstance(v, str), f"{field.field_name} must be a string")


def build_number_rule(field: FieldDeclaration) -> ValidationRule:
    return typed_rule(field, _is_number, f"{field.field_name} must be a number")


def build_boolean_rule(field: FieldDeclaration) -> ValidationRule:
    return typed_rule(field, lambda v: isinstance(v, bool), f"{field.field_name} must be a boolean")


def build_select_rule(field: FieldDeclaration) -> ValidationRule:
    allowed = tuple(field.options)
    return typed_rule(
        field,
        lambda v: isinstance(v, str) and v in allowed,
        f"Must be one of: {', '.join(allowed)}",
        code="INVALID_OPTION",
        detail={"allowed": list(allowed)},
    )


def build_media_rule(field: FieldDeclaration) -> ValidationRule:
    # media ids are only checked for shape here; existence is the server's call
    if MEDIA_MULTIPLE_OPTION in field.options:
        return typed_rule(
            field,
            lambda v: isinstance(v, list) and all(isinstance(i, str) for i in v),
            f"{field.field_name} must be a list of media ids",
        )
    return typed_rule(field, lambda v: isinstance(v, str), f"{field.field_name} must be a media id")


@dataclass(frozen=True)
class FieldType:
    tag: str
    build_rule: Callable[[FieldDeclaration], ValidationRule]
    ui_handler: str


DEFAULT_FIELD_TYPES: Tuple[FieldType, ...] = (
    FieldType("text", build_text_rule, "text_input"),
    FieldType("textarea", build_text_rule, "textarea"),
    FieldType("number", build_number_rule, "number_input"),
    FieldType("boolean", build_boolean_rule, "checkbox"),
    FieldType("select", build_select_rule, "select"),
    FieldType("media", build_media_rule, "media_picker"),
)


class FieldTypeRegistry:
    def __init__(self, field_types: Iterable[FieldType] = ()) -> None:
        self._types: Dict[str, FieldType] = {}
        for field_type in field_types:
            self.register(field_type)

    def register(self, field_type: FieldType, replace_existing: bool = False) -> None:
        if not isinstance(field_type.tag, str) or not field_type.tag:
            raise ValueError("field type tag must be a non-empty string")
        if field_type.tag in self._types and not replace_existing:
            raise ValueError(f"field type already registered: {field_type.tag}")
        self._types[field_type.tag] = field_type

    def unregister(self, tag: str) -> bool:
        return self._types.pop(tag, None) is not None

    def resolve(self, tag: str) -> FieldType | None:
        return self._types.get(tag)

    def tags(self) -> list[str]:
        return list(self._types.keys())

    def __contains__(self, tag: object) -> bool:
        return tag in self._types

    def copy(self) -> "FieldTypeRegistry":
        return FieldTypeRegistry(self._types.values())


def default_registry() -> FieldTypeRegistry:
    return FieldTypeRegistry(DEFAULT_FIELD_TYPES)
