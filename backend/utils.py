# utils.py
import os
import json
import logging
from typing import Any, Dict

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "database_file": "blog_posts.db",
    "timezone": "Asia/Seoul",
    "log_level": "INFO",
    "cors_origins": ["*"],
    "blog_source": {},
    "scheduler": {
        "enabled": True,
        "hour": 6,
        "minute": 0,
        "poll_interval_seconds": 60,
        "run_on_startup": False,
        "jitter_seconds_max": 0,
    },
}

# --- Configuration Loading ---
def load_config(config_file: str = None) -> Dict[str, Any]:
    """
    Loads config.json (or the file named by BLOG_UPDATER_CONFIG) on top of the defaults.
    Sections that are dicts are merged key by key.
    """
    config_file = config_file or os.getenv(
        "BLOG_UPDATER_CONFIG",
        os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.json"),
    )
    merged = json.loads(json.dumps(DEFAULT_CONFIG))
    if not os.path.exists(config_file):
        logger.warning(f"Config file {config_file} not found, using defaults.")
        return merged
    with open(config_file, 'r') as f:
        loaded = json.load(f)
    for key, value in loaded.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged

config = load_config()

logging.basicConfig(
    level=getattr(logging, str(config.get("log_level", "INFO")).upper(), logging.INFO),
    format='%(asctime)s - %(levelname)s - %(message)s',
)
