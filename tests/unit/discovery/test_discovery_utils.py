"""Tests for discovery.utils and discovery.settings."""

from datetime import datetime, timezone

from discovery.settings import SiteConfig
from discovery.utils import (
    absolute_url,
    is_section_url,
    parse_dot_date,
    parse_iso_datetime,
    parse_page_meta,
    same_domain,
)


class TestUrlHelpers:
    def test_absolute_url_resolves_relative(self) -> None:
        assert absolute_url("/blog/a", "https://windly.cc/") == "https://windly.cc/blog/a"

    def test_absolute_url_drops_fragment(self) -> None:
        assert absolute_url("https://windly.cc/blog/a#comments", "https://windly.cc/") == "https://windly.cc/blog/a"

    def test_same_domain_accepts_subdomains(self) -> None:
        assert same_domain("https://www.windly.cc/blog/a", "windly.cc")
        assert not same_domain("https://notwindly.cc/blog/a", "windly.cc")

    def test_is_section_url(self) -> None:
        assert is_section_url("https://windly.cc/blog/post", "/blog/")
        assert is_section_url("https://windly.cc/ko/blog/post", "/blog/")
        assert not is_section_url("https://windly.cc/blog/", "/blog/")
        assert not is_section_url("https://windly.cc/blog", "/blog/")
        assert not is_section_url("https://windly.cc/courses/blog-like", "/blog/")


class TestDateHelpers:
    def test_parse_iso_with_offset(self) -> None:
        assert parse_iso_datetime("2024-05-01T09:00:00+09:00") == datetime(2024, 5, 1, 0, 0, tzinfo=timezone.utc)

    def test_parse_iso_with_z(self) -> None:
        assert parse_iso_datetime("2024-05-01T09:00:00Z") == datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

    def test_parse_iso_falls_back_to_date(self) -> None:
        assert parse_iso_datetime("2024-05-01 sometime") == datetime(2024, 5, 1, tzinfo=timezone.utc)

    def test_parse_iso_rejects_garbage(self) -> None:
        assert parse_iso_datetime("yesterday") is None
        assert parse_iso_datetime("") is None
        assert parse_iso_datetime(None) is None

    def test_parse_dot_date(self) -> None:
        assert parse_dot_date("Posted 2023.11.30 by admin") == datetime(2023, 11, 30, tzinfo=timezone.utc)
        assert parse_dot_date("no date") is None


class TestParsePageMeta:
    def test_prefers_open_graph(self) -> None:
        html = (
            '<html><head><title>Fallback</title>'
            '<meta property="og:title" content="  OG   title ">'
            '<meta property="article:published_time" content="2024-01-02T03:04:05Z">'
            '</head></html>'
        )
        title, published = parse_page_meta(html)
        assert title == "OG title"
        assert published == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_falls_back_to_title_tag(self) -> None:
        assert parse_page_meta("<html><head><title>Plain title</title></head></html>") == ("Plain title", None)

    def test_empty_document(self) -> None:
        assert parse_page_meta("") == ("", None)


class TestSiteConfig:
    def test_defaults(self) -> None:
        site = SiteConfig()
        assert site.feed_urls[0] == "https://windly.cc/blog/rss.xml"
        assert site.sitemap_url == "https://windly.cc/sitemap.xml"
        assert site.listing_url == "https://windly.cc/blog"
        assert site.domain == "windly.cc"

    def test_from_dict_overrides(self) -> None:
        site = SiteConfig.from_dict({
            "origin": "https://example.com/",
            "feed_paths": ["/feed.xml"],
            "request_timeout_seconds": 3,
        })
        assert site.origin == "https://example.com"
        assert site.feed_urls == ["https://example.com/feed.xml"]
        assert site.section_path == "/blog/"
        assert site.timeout_seconds == 3.0

    def test_from_dict_none(self) -> None:
        assert SiteConfig.from_dict(None) == SiteConfig()
