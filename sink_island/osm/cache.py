"""
On-disk cache of Overpass responses, keyed by the query text
"""

import hashlib
import json
import os
from datetime import datetime
from typing import Any, Dict, Optional

from loguru import logger


class OSMCache:
    """
    Stores raw Overpass payloads as JSON files

    The key is a hash of the full query, so a changed query (timeout,
    selectors or bbox) never returns a stale payload. A cache without a
    directory is disabled and every lookup misses.
    """

    def __init__(self, cache_dir: Optional[str] = None):
        self.cache_dir = cache_dir

    @property
    def enabled(self) -> bool:
        return bool(self.cache_dir)

    def path_for(self, query: str) -> Optional[str]:
        if not self.enabled:
            return None
        digest = hashlib.sha1(" ".join(query.split()).encode("utf-8")).hexdigest()[:16]
        return os.path.join(self.cache_dir, f"overpass_{digest}.json")

    def get(self, query: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(query)
        if path is None or not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                entry = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable cache entry {path}: {e}")
            return None
        if not isinstance(entry, dict) or "data" not in entry:
            logger.warning(f"Ignoring malformed cache entry {path}")
            return None
        logger.info(f"Using cached Overpass response from {entry.get('fetched_at', 'unknown time')}")
        return entry["data"]

    def put(self, query: str, data: Dict[str, Any]) -> Optional[str]:
        path = self.path_for(query)
        if path is None:
            return None
        entry = {"fetched_at": datetime.now().isoformat(timespec="seconds"), "data": data}
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(entry, f, ensure_ascii=False)
        except OSError as e:
            logger.warning(f"Could not write cache entry {path}: {e}")
            return None
        logger.debug(f"Cached Overpass response at {path}")
        return path
