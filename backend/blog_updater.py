import asyncio
import logging
from datetime import datetime

import httpx
import pytz

import database
import utils
from discovery import chain
from discovery.models import Candidate, NoPostsFoundError
from discovery.settings import SiteConfig

logger = logging.getLogger(__name__)

# On-demand and scheduled runs share one process; never let them overlap
_update_lock = asyncio.Lock()


def _post_pairs(posts) -> list[tuple[str, str]]:
    return [(p['title'], p['url']) for p in posts]


async def _record_history(posts: list[Candidate], success: bool, changed: bool = False, error_message: str = None):
    await database.add_update_history(
        posts_fetched=len(posts),
        posts_data=[p.to_dict() for p in posts],
        success=success,
        changed=changed,
        error_message=error_message,
    )


async def update_blog_posts(client: httpx.AsyncClient = None) -> dict:
    """
    Discovers the latest blog posts and stores them when they differ from the stored set.

    Every run appends one update history record. Returns the success envelope;
    raises NoPostsFoundError when nothing was found and re-raises storage errors,
    after recording the failure.
    """
    async with _update_lock:
        site = SiteConfig.from_dict(utils.config.get("blog_source"))
        logger.info(f"Starting blog posts update for {site.origin}")

        try:
            posts = await chain.discover_posts(site, client=client)
        except NoPostsFoundError as e:
            logger.warning(str(e))
            await _record_history([], success=False, error_message=str(e))
            raise
        except Exception as e:
            logger.error(f"Blog post discovery failed: {e}", exc_info=True)
            await _record_history([], success=False, error_message=str(e))
            raise

        new_posts = [{"title": p.title, "url": p.url} for p in posts]
        stored = await database.get_best_posts()

        if _post_pairs(stored) == _post_pairs(new_posts):
            logger.info("Blog posts unchanged, keeping stored posts")
            await _record_history(posts, success=True, changed=False)
            message = "No changes in blog posts"
            changed = False
        else:
            try:
                await database.replace_best_posts(new_posts)
            except Exception as e:
                logger.error(f"Failed to store blog posts: {e}", exc_info=True)
                try:
                    await _record_history(posts, success=False, error_message=str(e))
                except Exception as history_error:
                    logger.error(f"Failed to record update history: {history_error}")
                raise
            await _record_history(posts, success=True, changed=True)
            logger.info(f"Stored {len(new_posts)} blog posts")
            message = f"Successfully updated {len(new_posts)} blog posts"
            changed = True

        return {
            "success": True,
            "message": message,
            "posts": new_posts,
            "changed": changed,
            "timestamp": datetime.now(pytz.utc).isoformat(),
        }
