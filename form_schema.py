"""Compile content-type field declarations into a form validation schema."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from content_model import ContentType, FieldDeclaration, SchemaConfigError, parse_fields
from field_registry import (
    FALLBACK_UI_HANDLER,
    MISSING,
    FieldTypeRegistry,
    Issue,
    ValidationRule,
    default_registry,
    permissive_rule,
    require_non_empty,
)


logger = logging.getLogger("vcms.forms")

_DEFAULT_REGISTRY = default_registry()


def _issue(code: str, message: str, path: str | None = None, detail: dict | None = None) -> Issue:
    return {"code": code, "message": message, "path": path, "detail": detail}


@dataclass(frozen=True)
class CompiledField:
    declaration: FieldDeclaration
    rule: ValidationRule
    ui_handler: str
    supported: bool = True

    @property
    def field_name(self) -> str:
        return self.declaration.field_name


class CompiledFormSchema:
    """Validation-ready form for one content type.

    Instances are never patched: a changed field list means a new compile.
    """

    def __init__(self, fields: Tuple[CompiledField, ...], warnings: List[Issue]) -> None:
        self._fields = fields
        self._rules = MappingProxyType({f.field_name: f.rule for f in fields})
        self._warnings = tuple(warnings)

    @property
    def field_names(self) -> list[str]:
        return [f.field_name for f in self._fields]

    @property
    def rules(self) -> Mapping[str, ValidationRule]:
        return self._rules

    @property
    def warnings(self) -> list[Issue]:
        return [dict(w) for w in self._warnings]

    def validate(self, values: Any, allow_unknown: bool = False) -> dict:
        """Check every field and report all failures at once.

        Returns ``{"ok", "field_errors", "errors"}`` where ``field_errors`` maps
        a field name to its first message and ``errors`` keeps every issue.
        """
        if not isinstance(values, Mapping):
            issue = _issue("INVALID_PAYLOAD", "Form values must be an object")
            return {"ok": False, "field_errors": {}, "errors": [issue]}

        errors: List[Issue] = []
        field_errors: Dict[str, str] = {}

        if not allow_unknown:
            for key in values.keys():
                if key not in self._rules:
                    issue = _issue("UNKNOWN_FIELD", f"Field {key} is not defined in content type", path=str(key))
                    errors.append(issue)
                    field_errors.setdefault(str(key), issue["message"])

        for compiled in self._fields:
            name = compiled.field_name
            issues = compiled.rule.check(values.get(name, MISSING))
            if issues:
                errors.extend(issues)
                field_errors.setdefault(name, issues[0]["message"])

        return {"ok": not errors, "field_errors": field_errors, "errors": errors}

    def ui_plan(self) -> list[dict]:
        return [
            {
                "field_name": f.field_name,
                "ui_handler": f.ui_handler,
                "required": f.declaration.is_required,
                "options": list(f.declaration.options),
                "supported": f.supported,
            }
            for f in self._fields
        ]

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._rules


def compile_field(field: FieldDeclaration, registry: FieldTypeRegistry, warnings: List[Issue] | None = None) -> CompiledField:
    field_type = registry.resolve(field.field_type)
    if field_type is None:
        logger.warning("field_type_unsupported field=%s type=%s", field.field_name, field.field_type)
        if warnings is not None:
            warnings.append(
                _issue(
                    "UNSUPPORTED_FIELD_TYPE",
                    f"Unsupported field type {field.field_type} for field {field.field_name}",
                    path=field.field_name,
                    detail={"field_type": field.field_type},
                )
            )
        rule = permissive_rule(field)
        ui_handler = FALLBACK_UI_HANDLER
        supported = False
    else:
        rule = field_type.build_rule(field)
        ui_handler = field_type.ui_handler
        supported = True
    if field.is_required:
        rule = require_non_empty(rule)
    return CompiledField(declaration=field, rule=rule, ui_handler=ui_handler, supported=supported)


def compile_form_schema(fields: Iterable[Any], registry: FieldTypeRegistry | None = None) -> CompiledFormSchema:
    """Build the form schema for an ordered list of field declarations.

    Raises SchemaConfigError for malformed declarations or a repeated
    ``field_name``; in that case no schema is produced.
    """
    if registry is None:
        registry = _DEFAULT_REGISTRY
    declarations = parse_fields(fields if isinstance(fields, (list, tuple, ContentType)) else list(fields))

    seen: Dict[str, int] = {}
    for idx, field in enumerate(declarations):
        if field.field_name in seen:
            raise SchemaConfigError(
                code="DUPLICATE_FIELD_NAME",
                message=f"field_name {field.field_name!r} is declared more than once",
                path=f"fields[{idx}].field_name",
            )
        seen[field.field_name] = idx

    warnings: List[Issue] = []
    compiled = []
    for field in declarations:
        if field.field_type == "select" and not field.options:
            warnings.append(
                _issue("SELECT_NO_OPTIONS", f"select field {field.field_name} has no options", path=field.field_name)
            )
        compiled.append(compile_field(field, registry, warnings))
    return CompiledFormSchema(tuple(compiled), warnings)


__all__ = [
    "CompiledField",
    "CompiledFormSchema",
    "SchemaConfigError",
    "compile_field",
    "compile_form_schema",
]
