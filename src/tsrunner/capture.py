"""Screenshot capture helper for browser-driven tests.

The harness does not render anything itself. An external renderer watches the
test process output for sentinel-prefixed lines: on ``DELETE_SENTINEL`` it
removes the file at the given URL, on ``SCREENSHOT_SENTINEL`` it writes a new
capture there. The helper emits the sentinels and polls the URL until the
renderer has acted on each one.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional
from urllib.parse import urljoin

import requests

from tsrunner.core.errors import CaptureError

log = logging.getLogger(__name__)

DELETE_SENTINEL = "<tsrunner:delete>"
SCREENSHOT_SENTINEL = "<tsrunner:screenshot>"

Emit = Callable[[str], None]


def _default_emit(line: str) -> None:
    print(line, flush=True)


async def capture_artifact(
    path: str,
    delay_ms: int = 0,
    *,
    base_url: str,
    session: Optional[requests.Session] = None,
    poll_interval: float = 0.05,
    timeout: Optional[float] = None,
    emit: Emit = _default_emit,
) -> None:
    """Ask the renderer to re-capture ``path`` and wait until it has.

    Sequence: emit the delete sentinel, poll until the URL answers 404, sleep
    ``delay_ms`` so rendering settles, emit the capture sentinel, poll until the
    URL answers 2xx. ``timeout`` bounds each polling phase; ``None`` waits
    forever.
    """

    url = urljoin(base_url, path)
    owns_session = session is None
    http = session or requests.Session()
    try:
        emit(DELETE_SENTINEL + url)
        await _poll(http, url, lambda response: response.status_code == 404, poll_interval, timeout)
        # Give the page time to finish rendering before the capture.
        await asyncio.sleep(delay_ms / 1000)
        emit(SCREENSHOT_SENTINEL + url)
        await _poll(http, url, lambda response: 200 <= response.status_code < 300, poll_interval, timeout)
    finally:
        if owns_session:
            http.close()


async def _poll(
    http: requests.Session,
    url: str,
    done: Callable[[requests.Response], bool],
    interval: float,
    timeout: Optional[float],
) -> None:
    deadline = None if timeout is None else time.monotonic() + timeout
    attempts = 0
    while True:
        response = await asyncio.to_thread(http.get, url)
        attempts += 1
        if done(response):
            log.debug("Polled %s %d time(s), last status %d", url, attempts, response.status_code)
            return
        if deadline is not None and time.monotonic() >= deadline:
            raise CaptureError(
                f"Timed out after {timeout:.1f}s waiting on {url} (last status {response.status_code})"
            )
        await asyncio.sleep(interval)
