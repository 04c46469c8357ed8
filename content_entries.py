"""Client-side gate for content entry submission."""

from __future__ import annotations

import logging
import re
from collections import OrderedDict
from typing import Any, Protocol

from content_model import ContentEntry, ContentType
from field_registry import FieldTypeRegistry
from form_schema import CompiledFormSchema, compile_form_schema
from vcms.schema_hash import schema_hash


logger = logging.getLogger("vcms.entries")

SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


class EntryApi(Protocol):
    async def create_entry(self, owner: str, repo: str, ct_slug: str, values: dict, slug: str | None = None) -> dict:
        ...


def validate_slug(slug: str | None) -> bool:
    if slug is None or slug == "":
        return True
    return bool(SLUG_RE.match(slug))


class ContentEntryService:
    def __init__(self, api: EntryApi, registry: FieldTypeRegistry | None = None, max_schemas: int = 32) -> None:
        if max_schemas < 1:
            raise ValueError("max_schemas must be >= 1")
        self._api = api
        self._registry = registry
        self._max_schemas = max_schemas
        self._schemas: "OrderedDict[str, CompiledFormSchema]" = OrderedDict()

    def schema_for(self, content_type: ContentType) -> CompiledFormSchema:
        # keyed by content so a replaced field list always gets a fresh compile
        key = schema_hash(content_type.fields)
        schema = self._schemas.get(key)
        if schema is not None:
            self._schemas.move_to_end(key)
            return schema
        schema = compile_form_schema(content_type.fields, registry=self._registry)
        self._schemas[key] = schema
        logger.debug("form_schema_compiled content_type=%s key=%s", content_type.slug, key)
        while len(self._schemas) > self._max_schemas:
            evicted, _ = self._schemas.popitem(last=False)
            logger.debug("form_schema_evicted key=%s", evicted)
        return schema

    @property
    def cached_schemas(self) -> int:
        return len(self._schemas)

    def clear(self) -> None:
        self._schemas.clear()

    def validate(self, content_type: ContentType, values: Any, slug: str | None = None) -> dict:
        result = self.schema_for(content_type).validate(values)
        if not validate_slug(slug):
            message = "Invalid slug format. Slug must be lowercase alphanumeric with hyphens (e.g., 'my-blog-post')"
            result["errors"].append({"code": "INVALID_SLUG", "message": message, "path": "slug", "detail": None})
            result["field_errors"].setdefault("slug", message)
            result["ok"] = False
        return result

    async def submit(self, owner: str, repo: str, content_type: ContentType, values: Any, slug: str | None = None) -> dict:
        """Validate locally and post the entry only when it is valid.

        Invalid input returns the validation result without a network call.
        Transport failures raise ApiError for the caller's guard to report.
        """
        result = self.validate(content_type, values, slug)
        if not result["ok"]:
            logger.info("entry_rejected content_type=%s errors=%d", content_type.slug, len(result["errors"]))
            return {**result, "entry": None}
        created = await self._api.create_entry(owner, repo, content_type.slug, dict(values), slug=slug or None)
        entry = ContentEntry.from_dict(created) if isinstance(created, dict) else None
        logger.info("entry_created content_type=%s id=%s", content_type.slug, entry.id if entry else None)
        return {**result, "entry": entry}
