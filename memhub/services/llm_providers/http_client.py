"""Shared HTTPS plumbing for the REST-based providers."""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from memhub.config import settings
from memhub.services.exceptions import GenerationError, TransientProviderError

logger = logging.getLogger(__name__)

# Statuses worth retrying later (rate limit / upstream trouble)
TRANSIENT_STATUS_CODES = (408, 429, 500, 502, 503, 504)

_http_client: Optional[httpx.Client] = None


def get_http_client() -> httpx.Client:
    """Get or create the process-wide HTTP client used by provider calls."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.Client(timeout=settings.LLM_REQUEST_TIMEOUT)
    return _http_client


def post_json(
    client: httpx.Client,
    provider: str,
    url: str,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> Dict[str, Any]:
    """POST *payload* as JSON and return the decoded response body.

    Raises:
        TransientProviderError: timeout, connection failure, 408/429/5xx
        GenerationError: any other non-2xx status or a non-JSON body
    """
    timeout = timeout or settings.LLM_REQUEST_TIMEOUT
    model = payload.get("model", "?")
    logger.info(f"{provider} request: model={model}, timeout={timeout}s")
    start_time = time.time()

    try:
        response = client.post(url, json=payload, headers=headers or {}, timeout=float(timeout))
    except httpx.TimeoutException as e:
        elapsed = time.time() - start_time
        logger.error(f"{provider} timeout after {elapsed:.2f}s: {e}")
        raise TransientProviderError(f"Request timed out after {elapsed:.2f}s", provider=provider) from e
    except httpx.TransportError as e:
        logger.error(f"{provider} connection error: {e}")
        raise TransientProviderError(f"Connection failed: {e}", provider=provider) from e

    elapsed = time.time() - start_time

    if response.status_code >= 400:
        body = response.text[:500]
        logger.error(f"{provider} error: status={response.status_code}, elapsed={elapsed:.2f}s, body={body}")
        error_cls = TransientProviderError if response.status_code in TRANSIENT_STATUS_CODES else GenerationError
        raise error_cls(f"HTTP {response.status_code}: {body}", provider=provider)

    try:
        data = response.json()
    except ValueError as e:
        raise GenerationError("Provider returned a non-JSON body", provider=provider, raw_text=response.text[:2000]) from e

    logger.info(f"{provider} response: status={response.status_code}, elapsed={elapsed:.2f}s")
    return data
