"""
Question cache with Redis storage and an in-process fallback
"""
import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional

import redis

logger = logging.getLogger(__name__)

KEY_PREFIX = "questions"


class QuestionCache:
    """
    Cache of fetched question batches

    Entries are {"questions": [...], "fetched_at": <epoch seconds>}. An entry
    younger than ttl is fresh; older entries are kept for stale_ttl so they can
    still be served when the trivia provider fails.
    """

    def __init__(
        self,
        ttl: int = 1800,
        redis_url: Optional[str] = None,
        stale_ttl: int = 86400,
        clock: Callable[[], float] = time.time
    ):
        self.ttl = ttl
        self.stale_ttl = max(stale_ttl, ttl)
        self.clock = clock
        self.redis_client = None
        self._entries: Dict[str, Dict[str, Any]] = {}

        if redis_url:
            try:
                self.redis_client = redis.from_url(
                    redis_url,
                    decode_responses=True,
                    socket_connect_timeout=5
                )
                # Test connection
                self.redis_client.ping()
                logger.info("Redis connection established for question cache")
            except Exception as e:
                logger.warning(f"Redis connection failed: {str(e)}. Using in-process cache.")
                self.redis_client = None

    @staticmethod
    def generate_cache_key(
        identity: Optional[str],
        category: Optional[str] = None,
        difficulty: Optional[str] = None
    ) -> str:
        """
        Cache key for a question batch

        Args:
            identity: Authenticated user id the batch belongs to
            category: Trivia category id, "default" when absent
            difficulty: easy/medium/hard, "any" when absent
        """
        return f"{KEY_PREFIX}:{identity or 'anonymous'}:{category or 'default'}:{difficulty or 'any'}"

    def get_fresh(self, key: str) -> Optional[List[Dict[str, Any]]]:
        """Questions cached under key if younger than ttl"""
        entry = self._load(key)
        if entry and self.clock() - entry["fetched_at"] < self.ttl:
            logger.info(f"Cache hit: {key}")
            return entry["questions"]
        logger.info(f"Cache miss: {key}")
        return None

    def get_stale(self, key: str) -> Optional[List[Dict[str, Any]]]:
        """Questions cached under key regardless of age"""
        entry = self._load(key)
        return entry["questions"] if entry else None

    def set(self, key: str, questions: List[Dict[str, Any]]) -> None:
        entry = {"questions": questions, "fetched_at": self.clock()}

        if self.redis_client:
            try:
                self.redis_client.setex(key, self.stale_ttl, json.dumps(entry))
                logger.info(f"Cache set: {key} (TTL: {self.ttl}s)")
                return
            except Exception as e:
                logger.error(f"Cache set error: {str(e)}")

        self._prune()
        self._entries[key] = entry
        logger.info(f"Cache set: {key} (TTL: {self.ttl}s)")

    def clear_identity(self, identity: str) -> int:
        """Drop every batch cached for one user; returns the number removed"""
        prefix = f"{KEY_PREFIX}:{identity}:"
        removed = 0

        if self.redis_client:
            try:
                keys = list(self.redis_client.scan_iter(match=f"{prefix}*"))
                if keys:
                    removed += self.redis_client.delete(*keys)
            except Exception as e:
                logger.error(f"Cache clear error: {str(e)}")

        for key in [k for k in self._entries if k.startswith(prefix)]:
            del self._entries[key]
            removed += 1

        if removed:
            logger.info(f"Cleared {removed} cached batches for {identity}")
        return removed

    def _load(self, key: str) -> Optional[Dict[str, Any]]:
        if self.redis_client:
            try:
                value = self.redis_client.get(key)
                if value:
                    return json.loads(value)
            except Exception as e:
                logger.error(f"Cache get error: {str(e)}")
        return self._entries.get(key)

    def _prune(self) -> None:
        cutoff = self.clock() - self.stale_ttl
        for key in [k for k, e in self._entries.items() if e["fetched_at"] < cutoff]:
            del self._entries[key]
