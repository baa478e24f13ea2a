"""Fake target site for discovery tests, served through httpx.MockTransport."""

import asyncio

import httpx
import pytest


class FakeSite:
    """
    Serves canned responses keyed by absolute URL. Unknown URLs answer 404.
    A value may be a body string, a (status, body) tuple, or an exception to raise.
    """

    def __init__(self, pages: dict) -> None:
        self.pages = pages
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        value = self.pages.get(str(request.url))
        if value is None:
            return httpx.Response(404, text="not found")
        if isinstance(value, Exception):
            raise value
        if isinstance(value, tuple):
            status, body = value
            return httpx.Response(status, text=body)
        return httpx.Response(200, text=value)

    @property
    def requested_urls(self) -> list[str]:
        return [str(r.url) for r in self.requests]

    def count(self, url: str) -> int:
        return self.requested_urls.count(url)

    def run(self, fn):
        """Runs `fn(client)` against this site and returns its result."""
        async def _go():
            async with httpx.AsyncClient(transport=httpx.MockTransport(self.handler), follow_redirects=True) as client:
                return await fn(client)
        return asyncio.run(_go())


@pytest.fixture
def fake_site():
    return FakeSite


def _rss(items) -> str:
    body = "".join(
        "<item>"
        f"<title>{title}</title>"
        f"<link>{link}</link>"
        + (f"<pubDate>{date}</pubDate>" if date else "")
        + "</item>"
        for title, link, date in items
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>Windly</title><link>https://windly.cc/blog</link>'
        f"{body}</channel></rss>"
    )


def _atom(entries) -> str:
    body = "".join(
        "<entry>"
        f"<title>{title}</title>"
        f'<link rel="alternate" href="{link}"/>'
        f"<id>{link}</id>"
        + (f"<updated>{updated}</updated>" if updated else "")
        + "</entry>"
        for title, link, updated in entries
    )
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<feed xmlns="http://www.w3.org/2005/Atom"><title>Windly</title>'
        f"{body}</feed>"
    )


def _page(title, published=None, og=True) -> str:
    head = f'<meta property="og:title" content="{title}">' if og else ""
    if published:
        head += f'<meta property="article:published_time" content="{published}">'
    return f"<html><head>{head}<title>{title} | Windly</title></head><body><p>body</p></body></html>"


def _sitemap(urls, namespaced=True) -> str:
    ns = ' xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"' if namespaced else ""
    body = "".join(f"<url><loc>{u}</loc></url>" for u in urls)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset{ns}>{body}</urlset>'


@pytest.fixture
def rss_feed():
    return _rss


@pytest.fixture
def atom_feed():
    return _atom


@pytest.fixture
def page_html():
    return _page


@pytest.fixture
def sitemap_xml():
    return _sitemap
