"""Tests for the keyword-index and keyword-page extractors."""

from __future__ import annotations

from backend.engine.html_extractor import (
    MAX_QUOTES_PER_PAGE,
    decode_entities,
    extract_keywords,
    extract_quotes,
    split_attribution,
)
from backend.engine.records import UNKNOWN_AUTHOR

INDEX_HTML = """
<div class="card">
  <a class="stretched-link text-dark" href="../keywords/love">Love</a>
</div>
<div class="card">
  <a class="stretched-link" href="../keywords/hope">Hope</a>
</div>
<div class="card">
  <a class="stretched-link" href="../keywords/love">Love again</a>
</div>
<a class="nav-link" href="../keywords/ignored">Not a card</a>
"""


def _page(*blocks: str) -> str:
    body = "\n".join(f'<blockquote class="blockquote">{b}</blockquote>' for b in blocks)
    return f"<html><body>{body}</body></html>"


class TestExtractKeywords:
    def test_dedup_preserves_first_seen_order(self):
        keywords = extract_keywords(INDEX_HTML)
        assert [k.name for k in keywords] == ["love", "hope"]

    def test_source_url_built_from_base(self):
        keywords = extract_keywords(INDEX_HTML, base_url="https://example.test/")
        assert keywords[0].source_url == "https://example.test/keywords/love"

    def test_attribute_order_does_not_matter(self):
        html = '<a href="../keywords/wisdom" class="stretched-link">Wisdom</a>'
        assert [k.name for k in extract_keywords(html)] == ["wisdom"]

    def test_links_without_stretched_class_are_skipped(self):
        html = '<a class="btn" href="../keywords/love">Love</a>'
        assert extract_keywords(html) == []

    def test_percent_encoded_name_is_decoded(self):
        html = '<a class="stretched-link" href="../keywords/new%20year">New Year</a>'
        keyword = extract_keywords(html, base_url="https://example.test")[0]
        assert keyword.name == "new year"
        assert keyword.source_url == "https://example.test/keywords/new%20year"

    def test_malformed_html_returns_empty(self):
        assert extract_keywords("<a class=stretched-link href=../keywords/") == []
        assert extract_keywords("") == []
        assert extract_keywords(None) == []


class TestDecodeEntities:
    def test_named_entities(self):
        raw = "&ldquo;A &amp; B&rdquo; &lt;x&gt; &quot;q&quot; it&#39;s &lsquo;s&rsquo; &mdash; &ndash;"
        assert decode_entities(raw) == "\"A & B\" <x> \"q\" it's 's' — –"

    def test_unknown_entities_left_alone(self):
        assert decode_entities("caf&eacute;") == "caf&eacute;"

    def test_single_pass(self):
        assert decode_entities("&amp;lt;") == "&lt;"


class TestExtractQuotes:
    def test_stay_hungry(self):
        html = '<blockquote class="blockquote">&ldquo;Stay hungry&rdquo; — Steve Jobs</blockquote>'
        quotes = extract_quotes(html, "success")
        assert len(quotes) == 1
        assert quotes[0].text == "Stay hungry"
        assert quotes[0].author == "Steve Jobs"
        assert quotes[0].category == "success"

    def test_mdash_entity_separator(self):
        html = _page("&ldquo;Be yourself.&rdquo; &mdash; Oscar Wilde")
        quote = extract_quotes(html, "life")[0]
        assert (quote.text, quote.author) == ("Be yourself.", "Oscar Wilde")

    def test_unmatched_block_keeps_full_text(self):
        html = _page("Just some words &amp; more")
        quote = extract_quotes(html, "life")[0]
        assert quote.text == "Just some words & more"
        assert quote.author == UNKNOWN_AUTHOR

    def test_cap_at_fifty(self):
        html = _page(*[f"&ldquo;Quote {i}&rdquo; — Author {i}" for i in range(80)])
        quotes = extract_quotes(html, "many")
        assert len(quotes) == MAX_QUOTES_PER_PAGE
        assert quotes[-1].text == "Quote 49"

    def test_limit_lower_than_cap(self):
        html = _page(*[f"&ldquo;Q{i}&rdquo; — A" for i in range(10)])
        assert len(extract_quotes(html, "k", limit=3)) == 3

    def test_limit_never_exceeds_cap(self):
        html = _page(*[f"&ldquo;Q{i}&rdquo; — A" for i in range(60)])
        assert len(extract_quotes(html, "k", limit=500)) == MAX_QUOTES_PER_PAGE

    def test_ids_unique_in_order(self):
        html = _page("&ldquo;One&rdquo; — A", "&ldquo;Two&rdquo; — B")
        assert [q.id for q in extract_quotes(html, "k")] == [1, 2]

    def test_inline_markup_inside_block(self):
        html = '<blockquote class="blockquote">&ldquo;Stay hungry&rdquo; &mdash; <span>Steve Jobs</span></blockquote>'
        quote = extract_quotes(html, "k")[0]
        assert (quote.text, quote.author) == ("Stay hungry", "Steve Jobs")

    def test_typographic_quotes_are_straightened(self):
        html = _page("\u201cIt\u2019s fine\u201d \u2014\n   <em>Someone</em>")
        quote = extract_quotes(html, "k")[0]
        assert (quote.text, quote.author) == ("It's fine", "Someone")

    def test_other_markup_yields_nothing(self):
        html = "<div class='quote'><p>Not a blockquote</p></div><blockquote>No class</blockquote>"
        assert extract_quotes(html, "k") == []


class TestSplitAttribution:
    def test_splits_on_em_dash(self):
        assert split_attribution('"X" — Y') == ("X", "Y")

    def test_hyphen_is_not_a_separator(self):
        assert split_attribution('"X" - Y') == ('"X" - Y', UNKNOWN_AUTHOR)
