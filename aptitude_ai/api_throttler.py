"""
aptitude_ai/api_throttler.py
-----------------------------------
Rate limiting and retry for calls to the question generation APIs.
Keeps the session from failing on HTTP 429 or short network hiccups.

- Minimum spacing between calls, per model or global
- Exponential backoff + jitter, capped by max_wait
- Honours the Retry-After header when the server sends one
- Transient errors (429, timeout, 5xx) are retried, other API errors are not
- Thread-safe
"""

import time
import random
import logging
from threading import Lock
from typing import Any, Callable, Dict, List, Optional
from openai import OpenAI
from openai import RateLimitError, APIError, APITimeoutError
from google.genai import errors as genai_errors

logger = logging.getLogger(__name__)


class ThrottlerError(Exception):
    """All retries used up, or the call failed in a way that cannot be retried."""

    def __init__(self, message: str, last_exception: Optional[BaseException], attempts: int):
        super().__init__(message)
        self.last_exception = last_exception
        self.attempts = attempts


class ApiThrottler:
    def __init__(
        self,
        min_interval: float = 2.0,
        max_retries: int = 5,
        max_wait: float = 30.0,
        per_model: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            min_interval: minimum seconds between two calls
            max_retries: maximum attempts per call
            max_wait: upper bound for a single backoff wait
            per_model: throttle each model separately (True) or globally (False)
            sleep: injectable for tests
        """
        self.min_interval = min_interval
        self.max_retries = max_retries
        self.max_wait = max_wait
        self.per_model = per_model
        self._sleep = sleep

        self._lock = Lock()
        self._last_call: Dict[str, float] = {}

    def _now(self) -> float:
        return time.monotonic()

    def _key(self, model: str) -> str:
        return model if self.per_model else "__global__"

    def _wait_for_slot(self, key: str):
        with self._lock:
            now = self._now()
            last = self._last_call.get(key)
            if last is not None and now - last < self.min_interval:
                wait = self.min_interval - (now - last)
                logger.debug(f"⏳ Waiting {wait:.2f}s before next call ({key})")
                self._lock.release()
                try:
                    self._sleep(wait)
                finally:
                    self._lock.acquire()
            self._last_call[key] = self._now()

    def _compute_backoff(self, attempt: int, retry_after: Optional[float]) -> float:
        if retry_after is not None:
            return min(self.max_wait, max(0.0, retry_after))
        return min(self.max_wait, 2 ** attempt + random.uniform(0.5, 2.0))

    def _backoff(self, attempt: int, wait_time: float):
        # no wait after the last attempt, ThrottlerError follows immediately
        if attempt < self.max_retries:
            self._sleep(wait_time)

    def call(self, fn: Callable[[], Any], model: str = "default") -> Any:
        """
        Run fn() with throttling + retry. Returns its result, raises
        ThrottlerError once every attempt failed.
        """
        key = self._key(model)
        last_exc: Optional[BaseException] = None

        for attempt in range(1, self.max_retries + 1):
            self._wait_for_slot(key)

            try:
                return fn()

            except RateLimitError as e:
                retry_after = self._get_retry_after(e)
                wait_time = self._compute_backoff(attempt, retry_after)
                logger.warning(f"⚠️ Rate limit (HTTP 429). Retrying in {wait_time:.1f}s ({attempt}/{self.max_retries})")
                self._backoff(attempt, wait_time)
                last_exc = e

            except APITimeoutError as e:
                wait_time = self._compute_backoff(attempt, None)
                logger.warning(f"⏱️ API timeout. Retrying in {wait_time:.1f}s ({attempt}/{self.max_retries})")
                self._backoff(attempt, wait_time)
                last_exc = e

            except APIError as e:
                status = getattr(e, "status_code", None)
                if status and 500 <= status < 600:
                    wait_time = self._compute_backoff(attempt, None)
                    logger.warning(f"💥 Server error ({status}). Retrying in {wait_time:.1f}s ({attempt}/{self.max_retries})")
                    self._backoff(attempt, wait_time)
                    last_exc = e
                else:
                    logger.error(f"🚫 Non-retryable API error ({status}): {e}")
                    raise

            except genai_errors.APIError as e:
                code = getattr(e, "code", None)
                if code == 429 or (code and 500 <= code < 600):
                    wait_time = self._compute_backoff(attempt, None)
                    logger.warning(f"⚠️ Gemini error ({code}). Retrying in {wait_time:.1f}s ({attempt}/{self.max_retries})")
                    self._backoff(attempt, wait_time)
                    last_exc = e
                else:
                    logger.error(f"🚫 Non-retryable Gemini error ({code}): {e}")
                    raise

            except Exception as e:
                logger.error(f"🚨 Unexpected error while calling the API: {e}")
                last_exc = e
                break

        raise ThrottlerError("❌ Retries exhausted, API call failed.", last_exc, self.max_retries)

    def safe_openai_chat(
        self,
        client: OpenAI,
        messages: List[Dict[str, Any]],
        model: str = "gpt-4o-mini",
        **kwargs,
    ):
        """Chat completion through call()."""
        return self.call(
            lambda: client.chat.completions.create(model=model, messages=messages, **kwargs),
            model=model,
        )

    def _get_retry_after(self, exc: Exception) -> Optional[float]:
        response = getattr(exc, "response", None)
        headers = getattr(response, "headers", None)
        if not headers:
            return None
        val = headers.get("Retry-After")
        try:
            return float(val) if val else None
        except (TypeError, ValueError):
            return None
