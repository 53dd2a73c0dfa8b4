from __future__ import annotations

from hypothesis import given

from chatextractor.rendering.links import Source, SourceMap, extract_links
from tests.strategies import link_text_strategy


def _harvest(text: str) -> list[Source]:
    sources = SourceMap()
    extract_links(text, sources)
    return list(sources)


def test_markdown_link_keeps_its_title() -> None:
    assert _harvest("See [the docs](https://a.example/docs) for more.") == [
        Source("https://a.example/docs", "the docs")
    ]


def test_markdown_link_with_empty_title_uses_url() -> None:
    assert _harvest("[](https://a.example/x)") == [Source("https://a.example/x", "https://a.example/x")]


def test_anchor_inner_text_is_stripped_of_tags() -> None:
    text = '<a class="c" href="https://a.example/p"><b>Bold</b>   name</a>'
    assert _harvest(text) == [Source("https://a.example/p", "Bold name")]


def test_src_reference_is_recorded_with_url_title() -> None:
    assert _harvest('<img src="https://a.example/i.png">') == [
        Source("https://a.example/i.png", "https://a.example/i.png")
    ]


def test_bare_url_trailing_punctuation_is_trimmed() -> None:
    assert _harvest("Go to https://a.example/page. Or https://b.example/x!") == [
        Source("https://a.example/page", "https://a.example/page"),
        Source("https://b.example/x", "https://b.example/x"),
    ]


def test_markdown_and_bare_duplicate_keeps_markdown_title() -> None:
    text = "[Title](https://a.example/t) and again https://a.example/t"
    assert _harvest(text) == [Source("https://a.example/t", "Title")]


def test_markdown_url_ending_in_punctuation_is_not_duplicated() -> None:
    text = "[Dot](https://a.example/v1.)"
    assert _harvest(text) == [Source("https://a.example/v1.", "Dot")]


def test_markdown_url_with_parentheses_is_one_source() -> None:
    text = "See [Foo](https://en.wikipedia.org/wiki/Foo_(bar)) here."
    assert _harvest(text) == [Source("https://en.wikipedia.org/wiki/Foo_(bar)", "Foo")]


def test_bare_url_keeps_balanced_parentheses() -> None:
    text = "Read https://en.wikipedia.org/wiki/Foo_(bar) (or not)."
    assert [source.url for source in _harvest(text)] == ["https://en.wikipedia.org/wiki/Foo_(bar)"]


def test_bare_url_inside_parenthetical_drops_closing_paren() -> None:
    assert [source.url for source in _harvest("(see https://a.example/x)")] == ["https://a.example/x"]


def test_anchor_href_is_not_harvested_again_as_bare_url() -> None:
    text = '<a href="https://a.example/q?x=(1)">Query</a>'
    assert _harvest(text) == [Source("https://a.example/q?x=(1)", "Query")]


def test_only_http_links_are_harvested() -> None:
    assert _harvest("[mail](mailto:me@example.com) ftp://a.example/file") == []


def test_cite_overwrites_and_add_does_not() -> None:
    sources = SourceMap()
    sources.add("https://a.example", "Found")
    sources.cite("https://a.example", "Cited")
    sources.add("https://a.example", "Later")
    assert list(sources) == [Source("https://a.example", "Cited")]


def test_cite_ignores_incomplete_pairs() -> None:
    sources = SourceMap()
    sources.cite(None, "Title")
    sources.cite("https://a.example", None)
    assert not sources


def test_add_upgrades_placeholder_title() -> None:
    sources = SourceMap()
    sources.add("https://a.example")
    assert sources.get("https://a.example").is_placeholder
    assert sources.add("https://a.example", "Real") is True
    assert sources.get("https://a.example").title == "Real"


def test_extraction_fills_gaps_after_citation() -> None:
    sources = SourceMap()
    sources.cite("https://a.example/c", "Cited")
    extract_links("[Other](https://a.example/c) https://a.example/new", sources)
    assert list(sources) == [
        Source("https://a.example/c", "Cited"),
        Source("https://a.example/new", "https://a.example/new"),
    ]


@given(link_text_strategy())
def test_extraction_is_idempotent(text: str) -> None:
    sources = SourceMap()
    extract_links(text, sources)
    first = list(sources)
    extract_links(text, sources)
    assert list(sources) == first


@given(link_text_strategy())
def test_harvested_urls_are_unique_and_http(text: str) -> None:
    urls = [source.url for source in _harvest(text)]
    assert len(urls) == len(set(urls))
    assert all(url.startswith(("http://", "https://")) for url in urls)
