"""
Trivia acquisition pipeline backed by Open Trivia DB

One TriviaService is built at startup and shared by request handlers. It
owns the session token table, the question cache and the failure counter.
None of them are synchronized: concurrent requests may cause a redundant
upstream call or serve a slightly stale batch.

Upstream failures are never raised to callers; the service degrades to a
cached batch or to the static fallback set.
"""
import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

import httpx

from quizzard.services.fallback_questions import FALLBACK_QUESTIONS
from quizzard.utils.cache import QuestionCache

logger = logging.getLogger(__name__)

# Open Trivia DB response codes
SUCCESS = 0
NO_RESULTS = 1
INVALID_PARAMETER = 2
TOKEN_NOT_FOUND = 3
TOKEN_EMPTY = 4
RATE_LIMIT = 5

TOKEN_CODES = (TOKEN_NOT_FOUND, TOKEN_EMPTY)
# Caused by the request itself, not by provider health
REQUEST_CODES = (NO_RESULTS, INVALID_PARAMETER)


@dataclass
class QuestionBatch:
    """Questions plus where they came from: live, cache, stale or fallback"""
    questions: List[Dict[str, Any]]
    source: str


@dataclass
class SessionToken:
    token: str
    expires_at: float


class Backoff:
    """Exponential backoff window driven by consecutive upstream failures"""

    def __init__(self, base: float = 1.0, maximum: float = 30.0, clock: Callable[[], float] = time.time):
        self.base = base
        self.maximum = maximum
        self.clock = clock
        self.failures = 0
        self.last_failure_at: Optional[float] = None

    def window(self) -> float:
        if self.failures == 0:
            return 0.0
        return min(self.base * 2 ** min(self.failures - 1, 16), self.maximum)

    def active(self) -> bool:
        """True while the last failure is younger than the current window"""
        if self.failures == 0 or self.last_failure_at is None:
            return False
        return self.clock() - self.last_failure_at < self.window()

    def record_failure(self) -> None:
        self.failures += 1
        self.last_failure_at = self.clock()
        logger.warning(f"Trivia upstream failure #{self.failures}, backing off {self.window():.0f}s")

    def reset(self) -> None:
        if self.failures:
            logger.info("Trivia upstream recovered")
        self.failures = 0
        self.last_failure_at = None


class SessionTokenManager:
    """
    Open Trivia DB session tokens, one per partition key (client IP)

    Also spaces upstream calls for a partition at least min_interval apart.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token_url: str,
        token_ttl: float = 21600,
        min_interval: float = 2.0,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.client = client
        self.token_url = token_url
        self.token_ttl = token_ttl
        self.min_interval = min_interval
        self.clock = clock
        self.sleep = sleep
        self._tokens: Dict[str, SessionToken] = {}
        self._last_request: Dict[str, float] = {}

    async def wait_turn(self, key: str) -> None:
        """Delay until min_interval has passed since the last call for key"""
        last = self._last_request.get(key)
        if last is not None:
            remaining = self.min_interval - (self.clock() - last)
            if remaining > 0:
                logger.debug(f"Spacing trivia request for {key}: waiting {remaining:.2f}s")
                await self.sleep(remaining)
        self._last_request[key] = self.clock()

    async def acquire(self, key: str) -> Optional[str]:
        """
        Valid token for key, requesting a new one when missing or expired

        Returns:
            Token string, or None when the provider did not issue one
        """
        entry = self._tokens.get(key)
        if entry and self.clock() < entry.expires_at:
            return entry.token

        return await self._request_token(key)

    async def reset(self, key: str) -> Optional[str]:
        """Renew an exhausted token; requests a new one if the reset fails"""
        entry = self._tokens.get(key)
        if entry is None:
            return await self._request_token(key)

        data = await self._call({"command": "reset", "token": entry.token}, key)
        if data and data.get("response_code") == SUCCESS:
            entry.expires_at = self.clock() + self.token_ttl
            logger.info(f"Trivia session token reset for {key}")
            return entry.token

        self._tokens.pop(key, None)
        return await self._request_token(key)

    def forget(self, key: str) -> None:
        self._tokens.pop(key, None)

    async def _request_token(self, key: str) -> Optional[str]:
        data = await self._call({"command": "request"}, key)
        token = data.get("token") if data and data.get("response_code") == SUCCESS else None
        if not token:
            logger.warning(f"Could not obtain trivia session token for {key}")
            self._tokens.pop(key, None)
            return None

        self._tokens[key] = SessionToken(token=token, expires_at=self.clock() + self.token_ttl)
        logger.info(f"Trivia session token issued for {key}")
        return token

    async def _call(self, params: Dict[str, str], key: str) -> Optional[Dict[str, Any]]:
        await self.wait_turn(key)
        try:
            response = await self.client.get(self.token_url, params=params)
            response.raise_for_status()
            data = response.json()
            return data if isinstance(data, dict) else None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Trivia token request failed: {str(e)}")
            return None


class TriviaService:
    """Produces batches of multiple-choice questions with minimal upstream load"""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: QuestionCache,
        api_url: str = "https://opentdb.com/api.php",
        token_url: str = "https://opentdb.com/api_token.php",
        question_count: int = 10,
        min_request_interval: float = 2.0,
        token_ttl: float = 21600,
        backoff_base: float = 1.0,
        backoff_max: float = 30.0,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None
    ):
        self.client = client
        self.cache = cache
        self.api_url = api_url
        self.question_count = question_count
        self.tokens = SessionTokenManager(
            client,
            token_url,
            token_ttl=token_ttl,
            min_interval=min_request_interval,
            clock=clock,
            sleep=sleep
        )
        self.backoff = Backoff(backoff_base, backoff_max, clock=clock)
        self.rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings) -> "TriviaService":
        client = httpx.AsyncClient(timeout=settings.TRIVIA_TIMEOUT)
        cache = QuestionCache(ttl=settings.QUESTION_CACHE_TTL, redis_url=settings.REDIS_URL)
        return cls(
            client,
            cache,
            api_url=settings.TRIVIA_API_URL,
            token_url=settings.TRIVIA_TOKEN_URL,
            question_count=settings.TRIVIA_QUESTION_COUNT,
            min_request_interval=settings.TRIVIA_MIN_REQUEST_INTERVAL,
            token_ttl=settings.TRIVIA_TOKEN_TTL,
            backoff_base=settings.BACKOFF_BASE_SECONDS,
            backoff_max=settings.BACKOFF_MAX_SECONDS
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def get_questions(
        self,
        identity: Optional[str] = None,
        partition_key: str = "unknown",
        category: Optional[int] = None,
        difficulty: Optional[str] = None
    ) -> QuestionBatch:
        """
        Get a batch of questions

        Args:
            identity: User the batch is cached for
            partition_key: Client network identity, selects the session token
            category: Open Trivia DB category id
            difficulty: easy/medium/hard

        Returns:
            QuestionBatch; never raises for upstream failures
        """
        if self.backoff.active():
            logger.info(f"Within backoff window ({self.backoff.window():.0f}s), serving fallback questions")
            return self._fallback()

        key = self.cache.generate_cache_key(identity, str(category) if category else None, difficulty)
        cached = self.cache.get_fresh(key)
        if cached:
            return QuestionBatch(cached, "cache")

        try:
            code, results = await self._fetch(partition_key, category, difficulty)
            if code in TOKEN_CODES:
                logger.info(f"Trivia token rejected (code {code}), resetting and retrying")
                await self.tokens.reset(partition_key)
                code, results = await self._fetch(partition_key, category, difficulty)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Trivia request failed: {str(e)}")
            return self._degrade(key)

        if code == RATE_LIMIT:
            logger.warning("Trivia provider rate limited the request")
            self.backoff.record_failure()
            return self._fallback()

        questions = self._normalize(results) if code == SUCCESS else []
        if len(questions) < self.question_count:
            logger.warning(f"Trivia provider returned code {code} with {len(questions)} usable questions")
            # A thin category or bad filter must not back off every other user
            provider_fault = code not in REQUEST_CODES and code != SUCCESS
            return self._degrade(key, record_failure=provider_fault)

        questions = questions[:self.question_count]
        self.cache.set(key, questions)
        self.backoff.reset()
        return QuestionBatch(questions, "live")

    def forget(self, identity: str) -> None:
        """Discard the batches cached for a user so the next quiz is fresh"""
        self.cache.clear_identity(identity)

    async def _fetch(
        self,
        partition_key: str,
        category: Optional[int],
        difficulty: Optional[str]
    ) -> Tuple[Optional[int], Any]:
        token = await self.tokens.acquire(partition_key)

        params: Dict[str, Any] = {"amount": self.question_count, "type": "multiple"}
        if category:
            params["category"] = category
        if difficulty:
            params["difficulty"] = difficulty
        if token:
            params["token"] = token

        await self.tokens.wait_turn(partition_key)
        response = await self.client.get(self.api_url, params=params)

        if response.status_code == 429:
            return RATE_LIMIT, None
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict):
            return None, None
        return data.get("response_code"), data.get("results")

    def _degrade(self, key: str, record_failure: bool = True) -> QuestionBatch:
        if record_failure:
            self.backoff.record_failure()
        stale = self.cache.get_stale(key)
        if stale:
            logger.info(f"Serving previously cached questions for {key}")
            return QuestionBatch(stale, "stale")
        return self._fallback()

    def _fallback(self) -> QuestionBatch:
        count = min(self.question_count, len(FALLBACK_QUESTIONS))
        questions = [dict(q) for q in self.rng.sample(FALLBACK_QUESTIONS, count)]
        return QuestionBatch(questions, "fallback")

    @staticmethod
    def _normalize(results: Any) -> List[Dict[str, Any]]:
        if not isinstance(results, list):
            return []

        questions = []
        for item in results:
            if not isinstance(item, dict) or "question" not in item or "correct_answer" not in item:
                continue
            questions.append({
                "category": item.get("category"),
                "difficulty": item.get("difficulty"),
                "question": item["question"],
                "correct_answer": item["correct_answer"],
                "incorrect_answers": list(item.get("incorrect_answers") or []),
            })
        return questions
