"""
Limits and target-site settings for the blog discovery chain.

The numeric caps bound how many requests one discovery run can make; there is
no retry or cancellation beyond them and the per-request timeout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urljoin

# Final output size of one discovery run; also the "filled" threshold that
# decides whether the next tier is entered.
MAX_POSTS = 5

# Stop trying further feed URLs once this many candidates exist.
FEED_CANDIDATE_CAP = 5

# Sitemap tier: how many section URLs are visited at most, and the running
# candidate count at which visiting stops.
SITEMAP_SCAN_LIMIT = 20
SITEMAP_CANDIDATE_CAP = 8

# Listing tier: links enriched at most, and the slice of HTML inspected after
# each link for a title/date.
LISTING_LINK_LIMIT = 15
LISTING_CONTEXT_CHARS = 2000

# Listing-tier titles shorter than this are navigation noise.
MIN_TITLE_LENGTH = 6

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; WindlyBot/1.0)"
FEED_ACCEPT = "application/rss+xml, application/xml;q=0.9, */*;q=0.8"
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class SiteConfig:
    origin: str = "https://windly.cc"
    section_path: str = "/blog/"
    feed_paths: tuple[str, ...] = field(default=(
        "/blog/rss.xml",
        "/rss.xml",
        "/feed",
        "/feed.xml",
        "/atom.xml",
    ))
    sitemap_path: str = "/sitemap.xml"
    listing_path: str = "/blog"
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_dict(cls, data: dict | None) -> "SiteConfig":
        """Builds a SiteConfig from the `blog_source` config section, keeping defaults for missing keys."""
        data = data or {}
        defaults = cls()
        return cls(
            origin=(data.get("origin") or defaults.origin).rstrip("/"),
            section_path=data.get("section_path") or defaults.section_path,
            feed_paths=tuple(data.get("feed_paths") or defaults.feed_paths),
            sitemap_path=data.get("sitemap_path") or defaults.sitemap_path,
            listing_path=data.get("listing_path") or defaults.listing_path,
            user_agent=data.get("user_agent") or defaults.user_agent,
            timeout_seconds=float(data.get("request_timeout_seconds") or defaults.timeout_seconds),
        )

    @property
    def domain(self) -> str:
        return self.origin.split("://", 1)[-1].split("/", 1)[0]

    @property
    def feed_urls(self) -> list[str]:
        return [urljoin(self.origin + "/", p) for p in self.feed_paths]

    @property
    def sitemap_url(self) -> str:
        return urljoin(self.origin + "/", self.sitemap_path)

    @property
    def listing_url(self) -> str:
        return urljoin(self.origin + "/", self.listing_path)
