import logging
import re
from datetime import datetime, timezone
from urllib.parse import urldefrag, urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from .settings import SiteConfig

logger = logging.getLogger(__name__)

DOT_DATE_RE = re.compile(r"(\d{4})\.(\d{2})\.(\d{2})")


def absolute_url(href: str, base_url: str) -> str:
    """Resolves `href` against `base_url` and drops any fragment."""
    try:
        return urldefrag(urljoin(base_url, (href or "").strip()))[0]
    except Exception:
        return ""


def same_domain(url: str, domain: str) -> bool:
    try:
        host = urlparse(url).netloc.lower()
        return host == domain.lower() or host.endswith("." + domain.lower())
    except Exception:
        return False


def is_section_url(url: str, section_path: str) -> bool:
    """True when the URL path points at an item below the section, not the section index itself."""
    try:
        path = urlparse(url).path or "/"
    except Exception:
        return False
    idx = path.find(section_path)
    if idx < 0:
        return False
    return bool(path[idx + len(section_path):].strip("/"))


def clean_title(value: str | None) -> str:
    return re.sub(r"\s+", " ", value or "").strip()


def to_utc(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_datetime(value: str | None) -> datetime | None:
    if not value or not value.strip():
        return None
    try:
        return to_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
    except ValueError:
        pass
    # Fall back to the calendar date alone, e.g. "2024-05-01T09:00:00.000+0900"
    try:
        return datetime.strptime(value.strip()[:10], "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_dot_date(text: str | None) -> datetime | None:
    """Finds the first YYYY.MM.DD token in `text`."""
    m = DOT_DATE_RE.search(text or "")
    if not m:
        return None
    try:
        return datetime(int(m.group(1)), int(m.group(2)), int(m.group(3)), tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_page_meta(html: str) -> tuple[str, datetime | None]:
    """Returns (title, published) of an article page from Open Graph tags, falling back to <title>."""
    soup = BeautifulSoup(html or "", "html.parser")
    title = ""
    og_title = soup.find("meta", attrs={"property": "og:title"})
    if og_title is not None:
        title = clean_title(og_title.get("content"))
    if not title and soup.title is not None:
        title = clean_title(soup.title.get_text())
    published = None
    og_time = soup.find("meta", attrs={"property": "article:published_time"})
    if og_time is not None:
        published = parse_iso_datetime(og_time.get("content"))
    return title, published


async def _get(
    url: str,
    client: httpx.AsyncClient,
    site: SiteConfig,
    accept: str | None = None,
) -> httpx.Response | None:
    """GETs `url` once. Any failure or non-200 answer is logged and returns None."""
    headers = {"User-Agent": site.user_agent}
    if accept:
        headers["Accept"] = accept
    try:
        resp = await client.get(url, headers=headers, timeout=site.timeout_seconds)
    except httpx.HTTPError as e:
        logger.warning(f"Request to {url} failed: {e}")
        return None
    if resp.status_code != 200:
        logger.info(f"Skipping {url}: HTTP {resp.status_code}")
        return None
    return resp


async def fetch_text(
    url: str,
    client: httpx.AsyncClient,
    site: SiteConfig,
    accept: str | None = None,
) -> str | None:
    resp = await _get(url, client, site, accept=accept)
    return resp.text if resp is not None else None


async def fetch_bytes(
    url: str,
    client: httpx.AsyncClient,
    site: SiteConfig,
    accept: str | None = None,
) -> bytes | None:
    """Like fetch_text, but returns the undecoded body so parsers can sniff the declared encoding."""
    resp = await _get(url, client, site, accept=accept)
    return resp.content if resp is not None else None
