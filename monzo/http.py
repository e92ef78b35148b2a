from __future__ import annotations

import httpx

from .constants import LOGGER

MAX_LOGGED_BODY = 1000


async def log_request(request: httpx.Request) -> None:
    LOGGER.info("Monzo API request %s %s", request.method, request.url)


async def log_response(response: httpx.Response) -> None:
    LOGGER.info(
        "Monzo API response %s %s -> %s",
        response.request.method,
        response.request.url,
        response.status_code,
    )
    if response.status_code >= 400:
        body = await response.aread()
        text = body.decode("utf-8", errors="replace")
        if len(text) > MAX_LOGGED_BODY:
            text = text[:MAX_LOGGED_BODY] + "...<truncated>"
        LOGGER.warning("Monzo API error body: %s", text)


def build_async_client(
    *,
    timeout: float | None = None,
    debug: bool = False,
) -> httpx.AsyncClient:
    """Build the httpx client used when the caller does not supply one.

    Request and response logging hooks are attached only when ``debug`` is set.
    No retry transport is installed; failures reach the caller on the first try.
    """
    event_hooks: dict[str, list] = {"request": [], "response": []}
    if debug:
        event_hooks["request"].append(log_request)
        event_hooks["response"].append(log_response)

    if timeout is None:
        return httpx.AsyncClient(event_hooks=event_hooks)
    return httpx.AsyncClient(timeout=timeout, event_hooks=event_hooks)
