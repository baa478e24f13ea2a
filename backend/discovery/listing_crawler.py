from __future__ import annotations

import logging
import re
from datetime import datetime

import httpx
from bs4 import BeautifulSoup

from .models import Candidate, DiscoveryContext
from .settings import LISTING_CONTEXT_CHARS, LISTING_LINK_LIMIT, MIN_TITLE_LENGTH, SiteConfig
from .utils import (
    absolute_url,
    clean_title,
    fetch_text,
    is_section_url,
    parse_dot_date,
    parse_page_meta,
    same_domain,
)

logger = logging.getLogger(__name__)


def _line_starts(html: str) -> list[int]:
    return [0] + [m.end() for m in re.finditer("\n", html)]


def extract_section_links(html: str, site: SiteConfig) -> list[tuple[str, int]]:
    """
    Returns (absolute url, character offset) for every anchor pointing into the
    content section, in document order. Duplicates are kept; callers dedupe.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    starts = _line_starts(html or "")
    links: list[tuple[str, int]] = []
    search_from = 0
    for a in soup.find_all("a", href=True):
        href = a.get("href") or ""
        url = absolute_url(href, site.listing_url)
        if not url or not same_domain(url, site.domain):
            continue
        if not is_section_url(url, site.section_path):
            continue
        # html.parser records where each tag starts; fall back to a text search
        if a.sourceline is not None and a.sourcepos is not None and a.sourceline - 1 < len(starts):
            offset = starts[a.sourceline - 1] + a.sourcepos
        else:
            found = html.find(href, search_from)
            offset = found if found >= 0 else search_from
        search_from = max(search_from, offset)
        links.append((url, offset))
    return links


def enrich_from_context(snippet: str) -> tuple[str, datetime | None]:
    """Picks a title (alt text, then heading) and a YYYY.MM.DD date out of the HTML following a link."""
    soup = BeautifulSoup(snippet or "", "html.parser")
    title = ""
    img = soup.find(attrs={"alt": True})
    if img is not None:
        alt = clean_title(img.get("alt"))
        if len(alt) > MIN_TITLE_LENGTH:
            title = alt
    if not title:
        heading = soup.find(["h2", "h3"])
        if heading is not None:
            title = clean_title(heading.get_text())
    published = parse_dot_date(snippet)
    return title, published


async def discover(site: SiteConfig, client: httpx.AsyncClient, context: DiscoveryContext) -> DiscoveryContext:
    html = await fetch_text(site.listing_url, client, site)
    if not html:
        return context

    pending: list[tuple[str, int]] = []
    for url, offset in extract_section_links(html, site):
        if context.has_seen(url):
            continue
        context.mark_seen(url)
        pending.append((url, offset))
    logger.info(f"Listing {site.listing_url}: {len(pending)} new section links")

    for url, offset in pending[:LISTING_LINK_LIMIT]:
        try:
            title, published = enrich_from_context(html[offset:offset + LISTING_CONTEXT_CHARS])
        except Exception as e:
            logger.warning(f"Context parse failed for {url}: {e}")
            title, published = "", None
        if not title:
            page = await fetch_text(url, client, site)
            if page:
                try:
                    title, _ = parse_page_meta(page)
                except Exception as e:
                    logger.warning(f"Page parse failed for {url}: {e}")
        if len(title) < MIN_TITLE_LENGTH:
            continue
        context.add(Candidate(title=title, url=url, published=published, source="listing"))
    return context
