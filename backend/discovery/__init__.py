"""
Blog post discovery for the best-posts banner.

Modules:
- rss_provider: Feed tier, RSS/Atom documents
- sitemap_provider: Sitemap tier, visits section URLs for Open Graph titles
- listing_crawler: Last resort, scans the blog listing page for post links
- ranking: Orders and caps the collected candidates
- chain: Runs the tiers in order and returns the ranked result
"""
