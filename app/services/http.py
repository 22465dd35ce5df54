"""Shared request helper for the upstream JSON APIs."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..errors import APIError
from ..utils import truncate

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})


def backoff_delay(attempt: int) -> float:
    """Return the pause before retry number ``attempt`` (1-based)."""

    return min(2 ** (attempt - 1), 5) + (0.1 * attempt)


def is_transient_status(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code < 600


def is_retryable(method: str, status_code: int | None) -> bool:
    """Return whether a failed request may be sent again.

    A 429 means the request was rejected before it was processed, so it is
    retried for every method. Transport errors (``status_code`` is ``None``)
    and 5xx responses may have been applied upstream, so they are only
    retried for idempotent methods.
    """

    if status_code == 429:
        return True
    if method.upper() not in IDEMPOTENT_METHODS:
        return False
    return status_code is None or is_transient_status(status_code)


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    service: str,
    error_cls: type[APIError],
    max_retries: int = 0,
    **kwargs: Any,
) -> Any:
    """Send a request and return the decoded JSON body.

    Failures accepted by :func:`is_retryable` are retried up to
    ``max_retries`` times. Any remaining failure is raised as ``error_cls``.
    """

    attempt = 0
    while True:
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            attempt += 1
            if attempt <= max_retries and is_retryable(method, None):
                delay = backoff_delay(attempt)
                logger.info(
                    "Transient error talking to %s (%s). Retrying %s in %.1fs",
                    service,
                    exc.__class__.__name__,
                    url,
                    delay,
                )
                await asyncio.sleep(delay)
                continue
            raise error_cls(f"{service} {method} {url} failed: {exc}") from exc

        if attempt < max_retries and is_retryable(method, response.status_code):
            attempt += 1
            delay = backoff_delay(attempt)
            logger.info(
                "%s returned HTTP %s for %s. Retrying in %.1fs",
                service,
                response.status_code,
                url,
                delay,
            )
            await asyncio.sleep(delay)
            continue

        if response.status_code >= 400:
            snippet = truncate(response.text)
            raise error_cls(
                f"{service} {method} {url} returned HTTP {response.status_code}: {snippet}",
                status_code=response.status_code,
                body_snippet=snippet,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise error_cls(
                f"Unexpected non-JSON {service} response for {url}",
                status_code=response.status_code,
                body_snippet=truncate(response.text),
            ) from exc
