import asyncio
import logging
import random
from datetime import datetime, timedelta
import pytz
import blog_updater
import utils
from discovery.models import NoPostsFoundError

logger = logging.getLogger(__name__)

LOCAL_TZ = pytz.timezone(utils.config.get("timezone", "Asia/Seoul"))

class BlogUpdateScheduler:
    def __init__(self, schedule_config: dict = None):
        self.is_running = False
        self.last_run = None
        self.schedule = schedule_config if schedule_config is not None else utils.config.get('scheduler', {})

    def calculate_next_run_time(self, now: datetime = None) -> datetime:
        """
        Calculate the next daily run time.

        Args:
            now: Reference time, defaults to the current local time

        Returns:
            datetime: The next scheduled run time
        """
        now = now or datetime.now(LOCAL_TZ)
        next_run = now.replace(hour=self.schedule.get('hour', 6), minute=self.schedule.get('minute', 0), second=0, microsecond=0)
        if next_run <= now:
            next_run += timedelta(days=1)
        return next_run

    def should_run_now(self, now: datetime = None) -> bool:
        """
        Check if the daily update should run now.

        Args:
            now: Reference time, defaults to the current local time

        Returns:
            bool: True if the update should run now, False otherwise
        """
        if not self.schedule.get('enabled', True):
            return False

        now = now or datetime.now(LOCAL_TZ)
        if now.hour != self.schedule.get('hour', 6) or now.minute != self.schedule.get('minute', 0):
            return False

        # Once per day
        if self.last_run and self.last_run.date() == now.date():
            return False

        return True

    async def execute_update(self):
        """Run one blog posts update, logging the outcome instead of raising."""
        try:
            result = await blog_updater.update_blog_posts()
            logger.info(f"Scheduled blog update finished: {result['message']}")
        except NoPostsFoundError as e:
            logger.warning(f"Scheduled blog update found nothing: {e}")
        except Exception as e:
            logger.error(f"Error executing scheduled blog update: {str(e)}")
        finally:
            self.last_run = datetime.now(LOCAL_TZ)

    async def run_scheduler(self):
        """
        Main scheduler loop that checks for and executes the daily update.
        """
        self.is_running = True
        logger.info(f"Blog update scheduler started, next run at {self.calculate_next_run_time().isoformat()}")

        if self.schedule.get('run_on_startup'):
            await self.execute_update()

        while self.is_running:
            try:
                if self.should_run_now():
                    # Optional jitter so restarts don't hit the site at the same second
                    jitter_max = self.schedule.get('jitter_seconds_max', 0)
                    if jitter_max and jitter_max > 0:
                        delay = random.uniform(0, float(jitter_max))
                        logger.info(f"Applying jitter of {delay:.1f}s before the blog update")
                        await asyncio.sleep(delay)
                    await self.execute_update()

                await asyncio.sleep(self.schedule.get('poll_interval_seconds', 60))

            except Exception as e:
                logger.error(f"Error in scheduler loop: {str(e)}")
                await asyncio.sleep(self.schedule.get('poll_interval_seconds', 60))

    def stop_scheduler(self):
        """Stop the scheduler."""
        self.is_running = False
        logger.info("Blog update scheduler stopped")

# Global instance
blog_update_scheduler = BlogUpdateScheduler()
