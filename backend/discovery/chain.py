"""
Tiered discovery of the latest blog posts of one site.

Feeds are tried first, then the sitemap, then the blog listing page itself;
each tier only runs while fewer than MAX_POSTS candidates have been found.
"""

from __future__ import annotations

import logging

import httpx

from . import listing_crawler, rss_provider, sitemap_provider
from .models import Candidate, DiscoveryContext, NoPostsFoundError
from .ranking import rank_candidates
from .settings import MAX_POSTS, SiteConfig

logger = logging.getLogger(__name__)

TIERS = (
    ("feed", rss_provider.discover),
    ("sitemap", sitemap_provider.discover),
    ("listing", listing_crawler.discover),
)


async def collect_candidates(site: SiteConfig, client: httpx.AsyncClient) -> DiscoveryContext:
    context = DiscoveryContext()
    for name, tier in TIERS:
        if len(context) >= MAX_POSTS:
            break
        before = len(context)
        try:
            context = await tier(site, client, context)
        except Exception as e:
            logger.error(f"Discovery tier '{name}' failed: {e}", exc_info=True)
            continue
        logger.info(f"Tier '{name}' added {len(context) - before} candidates ({len(context)} total)")
    return context


async def discover_posts(site: SiteConfig | None = None, client: httpx.AsyncClient | None = None) -> list[Candidate]:
    """
    Runs the fallback chain and returns at most MAX_POSTS ranked posts.

    Raises NoPostsFoundError when no tier produced a usable post.
    """
    site = site or SiteConfig()
    if client is None:
        async with httpx.AsyncClient(follow_redirects=True) as own_client:
            context = await collect_candidates(site, own_client)
    else:
        context = await collect_candidates(site, client)

    posts = rank_candidates(context.candidates)
    if not posts:
        raise NoPostsFoundError(f"No blog posts found on {site.origin}")
    logger.info(f"Discovered {len(context)} raw candidates, returning {len(posts)} posts")
    return posts
