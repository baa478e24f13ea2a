from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

import httpx

from .models import Candidate, DiscoveryContext
from .settings import SITEMAP_CANDIDATE_CAP, SITEMAP_SCAN_LIMIT, SiteConfig
from .utils import fetch_text, is_section_url, parse_page_meta

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def parse_sitemap_locs(xml_text: str, section_path: str) -> list[str]:
    """Returns the <loc> URLs inside the content section, in listed order."""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError:
        return []
    locs: list[str] = []
    # Match on the local name so sitemaps with or without the 0.9 namespace both work
    for el in root.iter():
        if _local_name(el.tag) != "loc":
            continue
        loc = (el.text or "").strip()
        if loc and is_section_url(loc, section_path) and loc not in locs:
            locs.append(loc)
    return locs


async def discover(site: SiteConfig, client: httpx.AsyncClient, context: DiscoveryContext) -> DiscoveryContext:
    xml_text = await fetch_text(site.sitemap_url, client, site)
    if not xml_text or not xml_text.strip():
        return context
    locs = parse_sitemap_locs(xml_text, site.section_path)
    logger.info(f"Sitemap {site.sitemap_url}: {len(locs)} section URLs")

    # Newest posts are usually listed first
    for url in locs[:SITEMAP_SCAN_LIMIT]:
        if len(context) >= SITEMAP_CANDIDATE_CAP:
            break
        if context.has_seen(url):
            continue
        html = await fetch_text(url, client, site)
        if not html:
            continue
        try:
            title, published = parse_page_meta(html)
        except Exception as e:
            logger.warning(f"Page parse failed for {url}: {e}")
            continue
        if title:
            context.add(Candidate(title=title, url=url, published=published, source="sitemap"))
    return context
