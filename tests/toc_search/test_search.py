import pytest

from search_plugins.toc_search.models import LinkRecord, SearchResult
from search_plugins.toc_search.search import compile_query, excerpt_bounds, highlight, search

MARK = '<em class="search-keyword">{}</em>'


def record(content, name="Guide", url="/guide#x", depth=None):
    return LinkRecord(name=name, url=url, content=content, depth=depth)


class TestBlankQueries:
    @pytest.mark.parametrize("query", ["", "   ", "\t\n", None, 42])
    def test_blank_or_invalid_query_is_inactive(self, query):
        """Test: Blank or invalid query is inactive."""
        assert compile_query(query) is None
        assert search([record("anything")], query) is None

    def test_blank_query_on_missing_index(self):
        """Test: Blank query on missing index."""
        assert search(None, "") is None


class TestExcerpt:
    def test_match_near_start_clamps_to_zero(self):
        """Test: Match near start clamps to zero."""
        index = [record("the quick brown fox jumps over the lazy dog")]

        results = search(index, "fox")

        assert results == [
            SearchResult(
                name="Guide",
                url="/guide#x",
                content="the quick brown " + MARK.format("fox") + " jumps over the lazy ",
                depth=None,
            )
        ]

    def test_match_is_centred_when_possible(self):
        """Test: Match is centred when possible."""
        content = "a" * 30 + "needle" + "b" * 30

        results = search([record(content)], "needle")

        assert excerpt_bounds(30) == (10, 50)
        assert results[0].content == "a" * 20 + MARK.format("needle") + "b" * 14

    def test_every_match_in_window_is_highlighted_keeping_its_case(self):
        """Test: Every match in window is highlighted keeping its case."""
        results = search([record("Fox and fox")], "FOX")
        assert results[0].content == MARK.format("Fox") + " and " + MARK.format("fox")

    def test_markup_in_content_is_escaped(self):
        """Test: Markup in content is escaped."""
        results = search([record("<b> tag")], "tag")
        assert results[0].content == "&lt;b&gt; " + MARK.format("tag")


class TestMatching:
    def test_query_is_literal_text(self):
        """Test: Query is literal text."""
        index = [record("axb"), record("a.b"), record("call(x)")]

        assert [r.content for r in search(index, "a.b")] == [MARK.format("a.b")]
        assert [r.content for r in search(index, "(x")] == ["call" + MARK.format("(x") + ")"]

    def test_no_match_gives_empty_list(self):
        """Test: No match gives empty list."""
        assert search([record("install")], "usage") == []

    def test_results_keep_index_order(self):
        """Test: Results keep index order."""
        index = [
            record("usage notes", url="/a"),
            record("install", url="/b"),
            record("advanced usage", url="/c"),
            record("Usage", url="/d"),
        ]

        results = search(index, "usage")

        assert [r.url for r in results] == ["/a", "/c", "/d"]

    def test_record_fields_are_carried_over(self):
        """Test: Record fields are carried over."""
        results = search([record("Install", name="Setup", url="/setup#install", depth=2)], "inst")
        assert (results[0].name, results[0].url, results[0].depth) == ("Setup", "/setup#install", 2)

    def test_search_does_not_touch_index(self):
        """Test: Search does not touch index."""
        index = (record("install"), record("usage"))
        first = search(index, "install")
        second = search(index, "install")
        assert first == second
        assert index == (record("install"), record("usage"))


def test_highlight_without_matches_escapes_only():
    """Test: Highlight without matches escapes only."""
    assert highlight("a < b", compile_query("zzz")) == "a &lt; b"
