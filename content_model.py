"""Content model records parsed from the repository config."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class SchemaConfigError(Exception):
    """A server-declared schema that cannot be turned into a form.

    This is an integration mistake, not bad user input: it is raised to the
    caller and never routed through the user-facing notifier.
    """

    code: str
    message: str
    path: str | None = None

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        base = f"{self.code}: {self.message}"
        return f"{base} (path={self.path})" if self.path else base


def _raise(code: str, message: str, path: str | None = None) -> None:
    raise SchemaConfigError(code=code, message=message, path=path)


@dataclass(frozen=True)
class FieldDeclaration:
    field_name: str
    field_type: str
    is_required: bool = False
    options: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any, path: str = "field") -> "FieldDeclaration":
        if isinstance(data, FieldDeclaration):
            return data
        if not isinstance(data, dict):
            _raise("FIELD_INVALID", "field declaration must be an object", path)
        name = data.get("field_name")
        if not isinstance(name, str) or not name.strip():
            _raise("FIELD_NAME_INVALID", "field_name must be a non-empty string", f"{path}.field_name")
        ftype = data.get("field_type")
        if not isinstance(ftype, str) or not ftype:
            _raise("FIELD_TYPE_INVALID", "field_type must be a non-empty string", f"{path}.field_type")
        options = data.get("options")
        if options is None:
            options = []
        if not isinstance(options, (list, tuple)) or not all(isinstance(o, str) for o in options):
            _raise("FIELD_OPTIONS_INVALID", "options must be a list of strings", f"{path}.options")
        return cls(
            field_name=name,
            field_type=ftype,
            is_required=bool(data.get("is_required")),
            options=tuple(options),
        )

    def to_dict(self) -> dict:
        return {
            "field_name": self.field_name,
            "field_type": self.field_type,
            "is_required": self.is_required,
            "options": list(self.options),
        }


@dataclass(frozen=True)
class ContentType:
    name: str
    slug: str
    fields: Tuple[FieldDeclaration, ...] = ()
    id: str | None = None

    @classmethod
    def from_dict(cls, data: Any, path: str = "content_type") -> "ContentType":
        if not isinstance(data, dict):
            _raise("CONTENT_TYPE_INVALID", "content type must be an object", path)
        name = data.get("name")
        slug = data.get("slug")
        if not isinstance(name, str) or not name:
            _raise("CONTENT_TYPE_NAME_INVALID", "name must be a non-empty string", f"{path}.name")
        if not isinstance(slug, str) or not slug:
            _raise("CONTENT_TYPE_SLUG_INVALID", "slug must be a non-empty string", f"{path}.slug")
        raw_fields = data.get("fields") or []
        if not isinstance(raw_fields, list):
            _raise("CONTENT_TYPE_FIELDS_INVALID", "fields must be a list", f"{path}.fields")
        fields = tuple(
            FieldDeclaration.from_dict(item, f"{path}.fields[{idx}]") for idx, item in enumerate(raw_fields)
        )
        ct_id = data.get("id")
        return cls(name=name, slug=slug, fields=fields, id=ct_id if isinstance(ct_id, str) and ct_id else None)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass(frozen=True)
class RepoConfig:
    site_name: str
    content_types: Tuple[ContentType, ...] = ()
    initialization_date: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "RepoConfig":
        if not isinstance(data, dict):
            _raise("CONFIG_INVALID", "repository config must be an object", "config")
        raw_types = data.get("content_types") or []
        if not isinstance(raw_types, list):
            _raise("CONFIG_CONTENT_TYPES_INVALID", "content_types must be a list", "config.content_types")
        content_types = tuple(
            ContentType.from_dict(item, f"config.content_types[{idx}]") for idx, item in enumerate(raw_types)
        )
        seen: Dict[str, int] = {}
        for idx, ct in enumerate(content_types):
            if ct.slug in seen:
                _raise(
                    "CONTENT_TYPE_SLUG_DUPLICATE",
                    f"slug {ct.slug!r} is used by more than one content type",
                    f"config.content_types[{idx}].slug",
                )
            seen[ct.slug] = idx
        return cls(
            site_name=str(data.get("site_name") or ""),
            content_types=content_types,
            initialization_date=data.get("initialization_date"),
        )

    def content_type(self, slug: str) -> ContentType | None:
        for ct in self.content_types:
            if ct.slug == slug:
                return ct
        return None


@dataclass(frozen=True)
class User:
    login: str
    display_name: str = ""
    avatar_url: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        if not isinstance(data, dict):
            raise ValueError("user payload must be an object")
        return cls(
            login=str(data.get("login") or ""),
            display_name=str(data.get("name") or data.get("display_name") or ""),
            avatar_url=str(data.get("avatar_url") or ""),
        )


@dataclass(frozen=True)
class RepoConfigEntry:
    repo_key: str
    initialized: bool = False
    base_url: str | None = None
    fetch_error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.fetch_error is not None

    @classmethod
    def from_pages_response(cls, repo_key: str, data: Any) -> "RepoConfigEntry":
        if not isinstance(data, dict):
            raise ValueError("pages config response must be an object")
        base_url = data.get("baseUrl")
        return cls(
            repo_key=repo_key,
            initialized=bool(data.get("initialized")),
            base_url=base_url if isinstance(base_url, str) and base_url else None,
        )


def repo_key(owner: str, repo: str) -> str:
    return f"{owner}/{repo}"


def parse_fields(fields: Any) -> List[FieldDeclaration]:
    if isinstance(fields, ContentType):
        return list(fields.fields)
    if not isinstance(fields, (list, tuple)):
        _raise("FIELDS_INVALID", "fields must be a list", "fields")
    return [FieldDeclaration.from_dict(item, f"fields[{idx}]") for idx, item in enumerate(fields)]


@dataclass
class ContentEntry:
    values: Dict[str, Any] = field(default_factory=dict)
    id: str | None = None
    slug: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "ContentEntry":
        values = data.get("values")
        return cls(
            values=dict(values) if isinstance(values, dict) else {},
            id=data.get("id") or None,
            slug=data.get("slug") or None,
        )
