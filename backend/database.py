# database.py
import aiosqlite
import json
from datetime import datetime
import pytz

import utils

LOCAL_TZ = pytz.timezone(utils.config.get("timezone", "Asia/Seoul"))
DATABASE_FILE = "" # This will be loaded from config

def configure_database(db_file: str):
    """Sets the database file path from the config."""
    global DATABASE_FILE
    DATABASE_FILE = db_file

def _now() -> str:
    return datetime.now(LOCAL_TZ).isoformat()

async def initialize_db():
    """Creates the best posts and update history tables if they don't exist."""
    async with aiosqlite.connect(DATABASE_FILE) as db:
        await db.execute('''
            CREATE TABLE IF NOT EXISTS best_posts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                url TEXT NOT NULL,
                position INTEGER NOT NULL,
                updated_at TIMESTAMP NOT NULL
            )
        ''')
        await db.execute('''
            CREATE TABLE IF NOT EXISTS blog_update_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                posts_fetched INTEGER NOT NULL,
                posts_data TEXT NOT NULL,
                success INTEGER NOT NULL DEFAULT 1,
                changed INTEGER NOT NULL DEFAULT 0,
                error_message TEXT,
                created_at TIMESTAMP NOT NULL
            )
        ''')
        await db.commit()

async def get_best_posts():
    """Retrieves the stored best posts in display order."""
    async with aiosqlite.connect(DATABASE_FILE) as db:
        db.row_factory = aiosqlite.Row
        async with db.execute("SELECT title, url, position, updated_at FROM best_posts ORDER BY position") as cursor:
            posts = await cursor.fetchall()
            return [dict(row) for row in posts]

async def replace_best_posts(posts: list):
    """
    Replaces the whole best posts collection with `posts` (dicts with title and url),
    keeping their order. Old rows are removed in the same transaction.
    """
    now = _now()
    async with aiosqlite.connect(DATABASE_FILE) as db:
        try:
            await db.execute("DELETE FROM best_posts")
            await db.executemany(
                "INSERT INTO best_posts (title, url, position, updated_at) VALUES (?, ?, ?, ?)",
                [(p['title'], p['url'], i, now) for i, p in enumerate(posts)]
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

async def add_update_history(posts_fetched: int, posts_data: list, success: bool, changed: bool = False, error_message: str = None):
    """Appends one record to the update history."""
    async with aiosqlite.connect(DATABASE_FILE) as db:
        cursor = await db.execute(
            """
            INSERT INTO blog_update_history
            (posts_fetched, posts_data, success, changed, error_message, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (posts_fetched, json.dumps(posts_data, ensure_ascii=False), int(success), int(changed), error_message, _now())
        )
        await db.commit()
        return cursor.lastrowid

async def get_update_history(limit: int = 20):
    """Retrieves the most recent update history records, newest first."""
    async with aiosqlite.connect(DATABASE_FILE) as db:
        db.row_factory = aiosqlite.Row
        async with db.execute("SELECT * FROM blog_update_history ORDER BY id DESC LIMIT ?", (limit,)) as cursor:
            rows = await cursor.fetchall()
            history = []
            for row in rows:
                record = dict(row)
                record['posts_data'] = json.loads(record['posts_data']) if record.get('posts_data') else []
                record['success'] = bool(record['success'])
                record['changed'] = bool(record['changed'])
                history.append(record)
            return history
