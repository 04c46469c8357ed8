import os
import sys
import unittest


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from content_model import FieldDeclaration
from field_registry import (
    MISSING,
    FieldType,
    FieldTypeRegistry,
    build_text_rule,
    default_registry,
    require_non_empty,
)


def _rule(field_type: str, options=(), required: bool = False):
    field = FieldDeclaration("f", field_type, required, tuple(options))
    rule = default_registry().resolve(field_type).build_rule(field)
    return require_non_empty(rule) if required else rule


def _codes(issues) -> list:
    return [i["code"] for i in issues]


class TestFieldTypeRegistry(unittest.TestCase):
    def test_default_tags(self) -> None:
        registry = default_registry()
        for tag in ("text", "textarea", "number", "boolean", "select", "media"):
            self.assertIn(tag, registry)

    def test_resolve_unknown_returns_none(self) -> None:
        self.assertIsNone(default_registry().resolve("geo_point"))

    def test_ui_handlers(self) -> None:
        registry = default_registry()
        self.assertEqual(registry.resolve("boolean").ui_handler, "checkbox")
        self.assertEqual(registry.resolve("media").ui_handler, "media_picker")

    def test_register_new_type(self) -> None:
        registry = default_registry()
        registry.register(FieldType("email", build_text_rule, "email_input"))
        self.assertEqual(registry.resolve("email").ui_handler, "email_input")

    def test_register_duplicate_rejected(self) -> None:
        registry = default_registry()
        with self.assertRaises(ValueError):
            registry.register(FieldType("text", build_text_rule, "other"))
        registry.register(FieldType("text", build_text_rule, "other"), replace_existing=True)
        self.assertEqual(registry.resolve("text").ui_handler, "other")

    def test_registries_are_independent(self) -> None:
        a = default_registry()
        b = a.copy()
        b.unregister("media")
        self.assertIn("media", a)
        self.assertNotIn("media", b)


class TestBaseRules(unittest.TestCase):
    def test_text_accepts_any_string(self) -> None:
        rule = _rule("text")
        self.assertTrue(rule.is_valid("hello"))
        self.assertTrue(rule.is_valid(""))
        self.assertEqual(_codes(rule.check(5)), ["TYPE_MISMATCH"])

    def test_textarea_accepts_multiline(self) -> None:
        self.assertTrue(_rule("textarea").is_valid("line 1\nline 2"))

    def test_number_rejects_non_numeric(self) -> None:
        rule = _rule("number")
        self.assertTrue(rule.is_valid(3))
        self.assertTrue(rule.is_valid(2.5))
        for bad in ("3", True, float("nan"), [1]):
            self.assertEqual(_codes(rule.check(bad)), ["TYPE_MISMATCH"], bad)

    def test_boolean(self) -> None:
        rule = _rule("boolean")
        self.assertTrue(rule.is_valid(False))
        self.assertFalse(rule.is_valid("true"))
        self.assertFalse(rule.is_valid(0))

    def test_select_accepts_only_options(self) -> None:
        rule = _rule("select", options=("draft", "published"))
        self.assertTrue(rule.is_valid("draft"))
        self.assertTrue(rule.is_valid("published"))
        for bad in ("archived", "Draft", 1):
            issues = rule.check(bad)
            self.assertEqual(_codes(issues), ["INVALID_OPTION"])
            self.assertEqual(issues[0]["message"], "Must be one of: draft, published")

    def test_media_single_and_multiple(self) -> None:
        single = _rule("media")
        self.assertTrue(single.is_valid("media-123"))
        self.assertFalse(single.is_valid(["media-123"]))
        multiple = _rule("media", options=("multiple",))
        self.assertTrue(multiple.is_valid(["a", "b"]))
        self.assertFalse(multiple.is_valid("a"))
        self.assertFalse(multiple.is_valid(["a", 2]))

    def test_absent_optional_passes(self) -> None:
        for tag in ("text", "number", "boolean", "select", "media"):
            rule = _rule(tag, options=("x",))
            self.assertTrue(rule.is_valid(MISSING), tag)
            self.assertTrue(rule.is_valid(None), tag)


class TestRequiredComposition(unittest.TestCase):
    def test_required_rejects_empty_values(self) -> None:
        rule = _rule("text", required=True)
        for empty in (MISSING, None, ""):
            self.assertIn("REQUIRED_FIELD", _codes(rule.check(empty)))
        self.assertTrue(rule.is_valid("x"))

    def test_required_number_two_causes(self) -> None:
        rule = _rule("number", required=True)
        self.assertEqual(rule.check("")[0]["code"], "REQUIRED_FIELD")
        self.assertEqual(_codes(rule.check("abc")), ["TYPE_MISMATCH"])
        self.assertEqual(rule.check(MISSING)[0]["message"], "f is required")
        self.assertTrue(rule.is_valid(0))

    def test_required_keeps_base_checks(self) -> None:
        rule = _rule("select", options=("a",), required=True)
        self.assertEqual(_codes(rule.check("b")), ["INVALID_OPTION"])
        self.assertTrue(rule.required)

    def test_required_is_idempotent(self) -> None:
        rule = _rule("text", required=True)
        self.assertIs(require_non_empty(rule), rule)

    def test_required_multiple_media_rejects_empty_list(self) -> None:
        rule = _rule("media", options=("multiple",), required=True)
        self.assertEqual(_codes(rule.check([])), ["REQUIRED_FIELD"])

    def test_custom_registry_used_standalone(self) -> None:
        registry = FieldTypeRegistry()
        self.assertEqual(registry.tags(), [])


if __name__ == "__main__":
    unittest.main()
