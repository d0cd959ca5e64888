"""Tests for relative import resolution."""

import pytest

from repoviz.resolver import is_relative, normalize_path, resolve_import


class TestNormalizePath:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("src/./utils", "src/utils"),
            ("src/components/../main", "src/main"),
            ("src//double", "src/double"),
            ("/src/abs", "src/abs"),
            ("../../outside", "outside"),
            ("a/b/../../c", "c"),
            ("", ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_path(raw) == expected


class TestResolveImport:

    def test_extensionless_import(self):
        assert resolve_import("./util", "src/main.ts", {"src/util.ts"}) == "src/util.ts"

    def test_package_imports_are_not_resolved(self):
        known = {"react.ts", "src/react.ts"}
        assert resolve_import("react", "src/main.ts", known) is None
        assert resolve_import("@scope/pkg", "src/main.ts", known) is None

    def test_explicit_extension_must_match_exactly(self):
        known = {"src/util.ts"}
        assert resolve_import("./util.js", "src/main.ts", known) is None
        assert resolve_import("./util.ts", "src/main.ts", known) == "src/util.ts"

    def test_suffix_precedence(self):
        known = {"src/util.tsx", "src/util.js", "src/util/index.ts"}
        assert resolve_import("./util", "src/main.ts", known) == "src/util.tsx"

    def test_index_file(self):
        known = {"src/utils/index.ts"}
        assert resolve_import("./utils", "src/main.ts", known) == "src/utils/index.ts"

    def test_parent_directory(self):
        known = {"src/models.ts"}
        assert resolve_import("../models", "src/utils/index.ts", known) == "src/models.ts"

    def test_file_at_root(self):
        assert resolve_import("./b", "a.ts", {"b.js"}) == "b.js"

    def test_escaping_the_root_is_clamped(self):
        assert resolve_import("../../b", "a.ts", {"b.ts"}) == "b.ts"

    def test_unknown_target(self):
        assert resolve_import("./missing", "src/main.ts", {"src/main.ts"}) is None

    def test_dotted_name_gets_source_extension(self):
        known = {"src/data.json.ts"}
        assert resolve_import("./data.json", "src/main.ts", known) == "src/data.json.ts"


def test_is_relative():
    assert is_relative("./a")
    assert is_relative("../a")
    assert not is_relative("a")
    assert not is_relative("/abs/path")
