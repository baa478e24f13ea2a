# main.py
import asyncio
import logging
import httpx
from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse, PlainTextResponse
import utils
import database
import blog_updater
import scheduler_service
from discovery.models import NoPostsFoundError

from fastapi.middleware.cors import CORSMiddleware

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'authorization, x-client-info, apikey, content-type',
}

app = FastAPI()

# Read CORS origins from config, with a permissive fallback for the banner widget
origins = utils.config.get("cors_origins", ["*"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Shared client for all discovery requests
client = httpx.AsyncClient(follow_redirects=True)

@app.on_event("startup")
async def startup_event():
    """On startup, configure and initialize the database and start the scheduler."""
    db_file = utils.config.get("database_file", "blog_posts.db")
    database.configure_database(db_file)
    await database.initialize_db()

    if scheduler_service.blog_update_scheduler.schedule.get('enabled', True):
        asyncio.create_task(scheduler_service.blog_update_scheduler.run_scheduler())

@app.on_event("shutdown")
async def shutdown_event():
    """On shutdown, close the httpx client and stop the scheduler."""
    await client.aclose()
    scheduler_service.blog_update_scheduler.stop_scheduler()

# --- Endpoints ---

@app.options("/update-blog-posts")
async def update_blog_posts_preflight():
    """Acknowledges CORS preflight requests."""
    return PlainTextResponse("ok", headers=CORS_HEADERS)

@app.post("/update-blog-posts")
async def update_blog_posts():
    """
    Runs the blog post discovery now and stores the result if it changed.
    """
    try:
        result = await blog_updater.update_blog_posts(client)
        return JSONResponse(content=result, headers=CORS_HEADERS)
    except NoPostsFoundError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)}, headers=CORS_HEADERS)
    except Exception as e:
        logger.error(f"Error in update-blog-posts: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)}, headers=CORS_HEADERS)

@app.get("/blog-posts")
async def get_blog_posts():
    """Returns the stored best posts in display order."""
    posts = await database.get_best_posts()
    return {"posts": posts}

@app.get("/blog-update-history")
async def get_blog_update_history(limit: int = Query(20, ge=1, le=200)):
    """Returns the most recent update history records, newest first."""
    return {"history": await database.get_update_history(limit)}
