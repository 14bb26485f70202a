"""Tests for the coverage taxonomy loader."""

from testcompanion.area import DEFAULT_TAXONOMY, format_tree, load_taxonomy, load_taxonomy_file, parse_taxonomy


def _shape(nodes):
    return [(node.name, _shape(node.children)) for node in nodes]


def test_parse_builds_forest_in_first_seen_order():
    """Paths merge into trees keeping first-seen order."""
    roots = parse_taxonomy("Web | Login\nAPI | REST\nWeb | Logout\n")

    assert [r.name for r in roots] == ["Web", "API"]
    assert [c.name for c in roots[0].children] == ["Login", "Logout"]


def test_case_insensitive_merge_keeps_first_spelling():
    """'A|B' and 'a|C' produce one root 'A' with children B and C."""
    roots = parse_taxonomy("A|B\na|C")

    assert len(roots) == 1
    assert roots[0].name == "A"
    assert [c.name for c in roots[0].children] == ["B", "C"]


def test_comments_blank_and_empty_segments_skipped():
    content = "# comment\n; other comment\n\n   \n | | \nWeb || Login |\n"

    roots = parse_taxonomy(content)

    assert _shape(roots) == [("Web", [("Login", [])])]


def test_segments_are_trimmed():
    roots = parse_taxonomy("  Web   |   Dashboard  \r\n")
    assert roots[0].name == "Web"
    assert roots[0].children[0].name == "Dashboard"


def test_parse_is_idempotent():
    """Parsing the same text twice yields identical trees."""
    assert _shape(parse_taxonomy(DEFAULT_TAXONOMY)) == _shape(parse_taxonomy(DEFAULT_TAXONOMY))


def test_empty_input_is_valid():
    assert parse_taxonomy("") == []
    assert parse_taxonomy("# only comments\n") == []


def test_find_child_is_case_insensitive():
    root = parse_taxonomy("Web | Dashboard")[0]
    assert root.find_child("DASHBOARD").name == "Dashboard"
    assert root.find_child("missing") is None


def test_default_taxonomy_roots():
    roots = parse_taxonomy(DEFAULT_TAXONOMY)
    assert [r.name for r in roots] == ["Web", "API", "Mobile", "Database"]


class TestLoading:
    """Tests for file loading and fallback."""

    def test_missing_file_returns_empty(self, tmp_path):
        assert load_taxonomy_file(tmp_path / "nope.ini") == []

    def test_load_file(self, tmp_path):
        path = tmp_path / "coverage.ini"
        path.write_text("Mobile | iOS\n", encoding="utf-8")

        roots = load_taxonomy_file(path)

        assert _shape(roots) == [("Mobile", [("iOS", [])])]

    def test_load_taxonomy_uses_first_existing_candidate(self, tmp_path):
        first = tmp_path / "first.ini"
        second = tmp_path / "second.ini"
        first.write_text("First\n", encoding="utf-8")
        second.write_text("Second\n", encoding="utf-8")

        roots = load_taxonomy([tmp_path / "missing.ini", first, second])

        assert [r.name for r in roots] == ["First"]

    def test_load_taxonomy_falls_back_to_default(self, tmp_path):
        empty = tmp_path / "empty.ini"
        empty.write_text("# nothing here\n", encoding="utf-8")

        roots = load_taxonomy([empty])

        assert _shape(roots) == _shape(parse_taxonomy(DEFAULT_TAXONOMY))

    def test_unreadable_file_falls_back_to_default(self, tmp_path):
        path = tmp_path / "coverage.ini"
        path.write_bytes(b"Web | \xff\xfe Login\n")

        assert load_taxonomy_file(path) == []
        assert _shape(load_taxonomy([path])) == _shape(parse_taxonomy(DEFAULT_TAXONOMY))

    def test_load_taxonomy_without_candidates(self):
        assert [r.name for r in load_taxonomy()] == ["Web", "API", "Mobile", "Database"]


def test_format_tree_indents_children():
    roots = parse_taxonomy("Web | Login\nAPI")
    assert format_tree(roots) == "Web\n  Login\nAPI"
