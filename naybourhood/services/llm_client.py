from __future__ import annotations

import logging
import threading
import time

import requests

from naybourhood.core.config import get_config

logger = logging.getLogger(__name__)
_RATE_LOCK = threading.Lock()
_LAST_REQUEST_TS = 0.0

ANTHROPIC_VERSION = "2023-06-01"
_NON_RETRYABLE_STATUS = {400, 401, 403, 404}


def _apply_rate_limit(min_interval_seconds: float) -> None:
    global _LAST_REQUEST_TS
    if min_interval_seconds <= 0:
        return

    with _RATE_LOCK:
        now = time.monotonic()
        elapsed = now - _LAST_REQUEST_TS
        if elapsed < min_interval_seconds:
            time.sleep(min_interval_seconds - elapsed)
        _LAST_REQUEST_TS = time.monotonic()


def _extract_text(body: dict) -> str:
    blocks = body.get("content") or []
    texts = [block.get("text", "") for block in blocks if isinstance(block, dict) and block.get("type", "text") == "text"]
    return "".join(texts)


def call_llm(prompt: str, max_tokens: int | None = None) -> str:
    """Send a single-turn prompt to the messages API and return the text reply.

    Returns an empty string when no API key is configured or every attempt
    fails; callers treat that as "use the deterministic path".
    """
    config = get_config()
    if not config.llm_enabled:
        return ""

    payload = {
        "model": config.LLM_MODEL,
        "max_tokens": max_tokens or config.LLM_MAX_TOKENS,
        "messages": [{"role": "user", "content": prompt}],
    }
    headers = {
        "content-type": "application/json",
        "x-api-key": config.LLM_API_KEY,
        "anthropic-version": ANTHROPIC_VERSION,
    }

    last_error: Exception | None = None
    total_attempts = config.LLM_MAX_RETRIES + 1

    for attempt in range(1, total_attempts + 1):
        try:
            _apply_rate_limit(config.LLM_MIN_INTERVAL_SECONDS)
            response = requests.post(
                config.LLM_API_URL,
                json=payload,
                headers=headers,
                timeout=(2, config.LLM_TIMEOUT_SECONDS),
            )
            response.raise_for_status()
            return _extract_text(response.json())
        except (requests.exceptions.RequestException, ValueError) as exc:
            last_error = exc
            logger.warning(
                "llm.call.failed",
                extra={
                    "event": "llm.call.failed",
                    "attempt": attempt,
                    "attempts_total": total_attempts,
                    "error": str(exc),
                },
            )
            should_retry = attempt < total_attempts
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            if status_code in _NON_RETRYABLE_STATUS:
                # Bad key or malformed request: retrying cannot help.
                should_retry = False

            if should_retry:
                time.sleep(min(2 * attempt, 5))
            else:
                break

    logger.error(
        "llm.call.unavailable",
        extra={
            "event": "llm.call.unavailable",
            "llm_url": config.LLM_API_URL,
            "model": config.LLM_MODEL,
            "error": str(last_error) if last_error else "unknown",
        },
    )
    return ""
