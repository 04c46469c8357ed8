import os
import sys
import unittest


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from content_model import FieldDeclaration, RepoConfig, RepoConfigEntry, SchemaConfigError, User
from repo_store import RepoStore


CONFIG = {
    "site_name": "Docs",
    "initialization_date": "2026-01-01",
    "content_types": [
        {
            "id": "ct-1",
            "name": "Blog Post",
            "slug": "blog-post",
            "fields": [
                {"field_name": "title", "field_type": "text", "is_required": True},
                {"field_name": "tags", "field_type": "select", "options": ["news", "howto"]},
            ],
        },
        {"name": "Author", "slug": "author", "fields": []},
    ],
}


class TestContentModel(unittest.TestCase):
    def test_parse_config(self) -> None:
        config = RepoConfig.from_dict(CONFIG)
        self.assertEqual(config.site_name, "Docs")
        post = config.content_type("blog-post")
        self.assertEqual(post.id, "ct-1")
        self.assertEqual(post.fields[1].options, ("news", "howto"))
        self.assertFalse(post.fields[1].is_required)
        self.assertIsNone(config.content_type("missing"))

    def test_field_declaration_is_immutable(self) -> None:
        field = FieldDeclaration.from_dict({"field_name": "a", "field_type": "text"})
        with self.assertRaises(Exception):
            field.field_name = "b"

    def test_duplicate_slug_rejected(self) -> None:
        data = {"site_name": "x", "content_types": [{"name": "A", "slug": "a"}, {"name": "B", "slug": "a"}]}
        with self.assertRaises(SchemaConfigError) as ctx:
            RepoConfig.from_dict(data)
        self.assertEqual(ctx.exception.code, "CONTENT_TYPE_SLUG_DUPLICATE")

    def test_bad_options_rejected(self) -> None:
        with self.assertRaises(SchemaConfigError) as ctx:
            FieldDeclaration.from_dict({"field_name": "a", "field_type": "select", "options": "a,b"})
        self.assertEqual(ctx.exception.path, "field.options")

    def test_pages_response(self) -> None:
        entry = RepoConfigEntry.from_pages_response("a/b", {"initialized": True, "baseUrl": "https://a.test"})
        self.assertEqual(entry.base_url, "https://a.test")
        self.assertFalse(entry.degraded)
        bare = RepoConfigEntry.from_pages_response("a/b", {"initialized": False})
        self.assertIsNone(bare.base_url)

    def test_user_requires_object(self) -> None:
        self.assertEqual(User.from_dict({"login": "octo"}).login, "octo")
        with self.assertRaises(ValueError):
            User.from_dict(["octo"])


class TestRepoStore(unittest.TestCase):
    def test_select_and_config(self) -> None:
        store = RepoStore()
        self.assertTrue(store.select_repo("octo", "site"))
        self.assertFalse(store.select_repo("octo", "site"))
        store.set_config(CONFIG)
        self.assertEqual(store.selected_key, "octo/site")
        self.assertEqual([ct.slug for ct in store.content_types()], ["blog-post", "author"])
        self.assertEqual(store.content_type("author").name, "Author")

    def test_switching_repo_drops_config(self) -> None:
        store = RepoStore()
        store.select_repo("octo", "site")
        store.set_config(CONFIG)
        store.select_repo("octo", "other")
        self.assertIsNone(store.config)
        self.assertIsNone(store.content_type("author"))

    def test_select_requires_names(self) -> None:
        with self.assertRaises(ValueError):
            RepoStore().select_repo("", "site")

    def test_clear(self) -> None:
        store = RepoStore()
        store.select_repo("octo", "site")
        store.clear()
        self.assertIsNone(store.selected)
        self.assertIsNone(store.selected_key)


if __name__ == "__main__":
    unittest.main()
