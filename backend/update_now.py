import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import asyncio
import database
import blog_updater
from discovery.models import NoPostsFoundError
from utils import config

# Use the same database file as the running app
db_file = config.get("database_file", "blog_posts.db")
database.configure_database(db_file)

print(f"Database file being used: {os.path.abspath(db_file)}")

async def update_now():
    await database.initialize_db()
    try:
        result = await blog_updater.update_blog_posts()
    except NoPostsFoundError as e:
        print(f"Blog posts update failed: {e}")
        return 1
    print(result['message'])
    print(f"Posts ({len(result['posts'])}):")
    for i, post in enumerate(result['posts'], 1):
        print(f"  {i}. {post['title']} - {post['url']}")
    return 0

sys.exit(asyncio.run(update_now()))
