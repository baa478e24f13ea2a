import asyncio

import pytest

import database


@pytest.fixture
def db(tmp_path):
    """Points the database module at a fresh SQLite file with the tables created."""
    previous = database.DATABASE_FILE
    database.configure_database(str(tmp_path / "blog_posts_test.db"))
    asyncio.run(database.initialize_db())
    yield database
    database.configure_database(previous)
