from __future__ import annotations

import io
import logging
from datetime import datetime

import httpx
import feedparser  # type: ignore

from .models import Candidate, DiscoveryContext
from .settings import FEED_ACCEPT, FEED_CANDIDATE_CAP, SiteConfig
from .utils import absolute_url, clean_title, fetch_bytes, is_section_url, to_utc

logger = logging.getLogger(__name__)


def _entry_date(entry, atom: bool) -> datetime | None:
    # RSS items are dated by pubDate, Atom entries by updated
    v = entry.get("updated_parsed" if atom else "published_parsed")
    if not v:
        return None
    try:
        return to_utc(datetime(*v[:6]))
    except Exception:
        return None


def _entry_link(entry) -> str:
    link = entry.get("link") or ""
    if link:
        return link
    # Atom entries without a rel="alternate" link may still carry a self link
    for ln in entry.get("links") or []:
        if ln.get("rel") in ("alternate", "self", None) and ln.get("href"):
            return ln["href"]
    return ""


def parse_feed(document: bytes | str, site: SiteConfig) -> list[Candidate]:
    """Parses an RSS 2.0 or Atom document into section candidates, in feed order."""
    if isinstance(document, str):
        document = document.encode("utf-8")
    # feedparser treats a bare string as a URL or file path to open, so hand it a stream
    parsed = feedparser.parse(io.BytesIO(document))
    atom = (parsed.get("version") or "").startswith("atom")
    out: list[Candidate] = []
    for e in parsed.entries or []:
        link = _entry_link(e)
        title = clean_title(e.get("title"))
        if not link or not title:
            continue
        url = absolute_url(link, site.origin + "/")
        if not is_section_url(url, site.section_path):
            continue
        out.append(Candidate(title=title, url=url, published=_entry_date(e, atom), source="feed"))
    return out


async def discover(site: SiteConfig, client: httpx.AsyncClient, context: DiscoveryContext) -> DiscoveryContext:
    for feed_url in site.feed_urls:
        if len(context) >= FEED_CANDIDATE_CAP:
            break
        body = await fetch_bytes(feed_url, client, site, accept=FEED_ACCEPT)
        if not body:
            continue
        try:
            items = parse_feed(body, site)
        except Exception as e:
            logger.warning(f"Feed parse failed for {feed_url}: {e}")
            continue
        added = sum(1 for it in items if context.add(it))
        logger.info(f"Feed {feed_url}: {len(items)} section entries, {added} new")
    return context
