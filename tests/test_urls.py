"""Tests for URL helpers."""

from search_arena.utils.urls import extract_urls, host_label, truncate


class TestHostLabel:
    def test_strips_www(self):
        assert host_label("https://www.example.com/path?q=1") == "example.com"

    def test_keeps_other_subdomains(self):
        assert host_label("https://docs.python.org/3/") == "docs.python.org"

    def test_no_host(self):
        assert host_label("not a url") == ""
        assert host_label("") == ""


class TestExtractUrls:
    def test_finds_urls_in_prose(self):
        text = (
            "According to https://example.com/a, and (see https://www.test.org/b). "
            "More at [docs](https://docs.example.com/c)."
        )
        assert extract_urls(text) == [
            "https://example.com/a",
            "https://www.test.org/b",
            "https://docs.example.com/c",
        ]

    def test_deduplicates_by_exact_match(self):
        text = "https://a.com/x then https://a.com/x again and https://a.com/x/"
        assert extract_urls(text) == ["https://a.com/x", "https://a.com/x/"]

    def test_caps_at_limit(self):
        text = " ".join(f"https://site{i}.com" for i in range(10))
        assert extract_urls(text, limit=3) == [
            "https://site0.com",
            "https://site1.com",
            "https://site2.com",
        ]

    def test_keeps_balanced_parentheses(self):
        text = "See https://en.wikipedia.org/wiki/Python_(programming_language). Also (https://a.com/x)"
        assert extract_urls(text) == [
            "https://en.wikipedia.org/wiki/Python_(programming_language)",
            "https://a.com/x",
        ]

    def test_no_urls(self):
        assert extract_urls("nothing to see here") == []
        assert extract_urls("") == []


def test_truncate():
    assert truncate("abcdef", 3) == "abc"
    assert truncate(None, 3) == ""
    assert truncate("ab", 300) == "ab"
