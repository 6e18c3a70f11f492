import asyncio

from search_plugins.toc_search.options import TocSearchOptions
from search_plugins.toc_search.service import TocSearch

DOCS = {
    "docs/a.md": "# Alpha\n\n## Install\n",
    "docs/b.md": "# Beta\n\n## Usage\n",
    "docs/SUMMARY.md": "- [Alpha](a.md)\n- [Beta](b.md)\n",
}


class TestTocSearch:
    def test_unconfigured_search_is_inactive(self, make_fetcher, locations):
        """Test: Unconfigured search is inactive."""
        toc = TocSearch(make_fetcher(DOCS), locations)

        assert asyncio.run(toc.refresh()) is None
        assert toc.search_index is None
        assert toc.search("install") is None
        assert toc.search_results is None

    def test_refresh_builds_index_from_paths(self, make_fetcher, locations):
        """Test: Refresh builds index from paths."""
        toc = TocSearch(make_fetcher(DOCS), locations, TocSearchOptions(paths="a,b"))

        index = asyncio.run(toc.refresh())

        assert toc.search_index == index
        assert [r.content for r in index] == ["Alpha", "Install", "Beta", "Usage"]
        assert toc.paths == ("a", "b")

    def test_summary_supplies_paths(self, make_fetcher, locations):
        """Test: Summary supplies paths."""
        toc = TocSearch(make_fetcher(DOCS), locations, TocSearchOptions(summary="SUMMARY.md"))

        asyncio.run(toc.refresh())

        assert toc.paths == ("a.md", "b.md")
        assert [r.name for r in toc.search_index] == ["Alpha", "Alpha", "Beta", "Beta"]

    def test_explicit_paths_win_over_summary(self, make_fetcher, locations):
        """Test: Explicit paths win over summary."""
        fetcher = make_fetcher(DOCS)
        toc = TocSearch(fetcher, locations, TocSearchOptions(paths=["b"], summary="SUMMARY.md"))

        asyncio.run(toc.refresh())

        assert "docs/SUMMARY.md" not in fetcher.requests
        assert [r.name for r in toc.search_index] == ["Beta", "Beta"]

    def test_search_states(self, make_fetcher, locations):
        """Test: Search states."""
        toc = TocSearch(make_fetcher(DOCS), locations, TocSearchOptions(paths=["a", "b"]))
        asyncio.run(toc.refresh())

        assert toc.search("   ") is None
        assert toc.search("nothing here") == []
        results = toc.search("usage")
        assert [r.url for r in results] == ["/b#usage"]
        assert toc.search_results is results

    def test_all_missing_documents_give_empty_index(self, make_fetcher, locations):
        """Test: All missing documents give empty index."""
        toc = TocSearch(make_fetcher({}), locations, TocSearchOptions(paths=["a", "b"]))

        assert asyncio.run(toc.refresh()) == ()
        assert toc.search("alpha") == []

    def test_configure_replaces_options(self, make_fetcher, locations):
        """Test: Configure replaces options."""
        toc = TocSearch(make_fetcher(DOCS), locations, TocSearchOptions(paths=["a"]))

        options = toc.configure(paths="b", max_depth=1)

        assert options.paths == ("b",)
        assert options.max_depth == 1
        asyncio.run(toc.refresh())
        assert [r.content for r in toc.search_index] == ["Beta"]

    def test_stale_build_does_not_overwrite_newer_index(self, make_fetcher, locations):
        """Test: Stale build does not overwrite newer index."""
        fetcher = make_fetcher(DOCS, delays={"docs/a.md": 0.05})
        toc = TocSearch(fetcher, locations, TocSearchOptions(paths=["a"]))

        async def overlapping_builds():
            slow = asyncio.create_task(toc.refresh())
            await asyncio.sleep(0)
            toc.configure(paths=["b"])
            await toc.refresh()
            await slow

        asyncio.run(overlapping_builds())

        assert [r.name for r in toc.search_index] == ["Beta", "Beta"]
        assert toc.paths == ("b",)
