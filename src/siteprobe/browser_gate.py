"""Bounded Chromium launcher for batch runs.

A batch runs one suite per target URL; each suite needs its own browser.
The gate caps how many of those browsers exist at once so a long target
list does not exhaust memory. Settings are explicit: the CLI resolves
them through :func:`siteprobe.config.load_settings` and hands them to
:func:`configure_browser_gate`.

Usage::

    gate = BrowserGate(max_concurrent=4, headless=True)

    async with gate.async_browser() as browser:
        context = await browser.new_context()
        ...
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

logger = logging.getLogger("siteprobe.browser_gate")

DEFAULT_MAX_BROWSERS = 2
DEFAULT_HEADLESS = True


class BrowserGate:
    """Semaphore-gated Chromium factory.

    :meth:`async_browser` waits for a free slot, launches Chromium, and
    gives the slot back once the browser is closed, whether the caller
    finished normally, raised, or the launch itself failed.
    """

    def __init__(
        self,
        max_concurrent: int = DEFAULT_MAX_BROWSERS,
        headless: bool = DEFAULT_HEADLESS,
        launch_options: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize the gate.

        Args:
            max_concurrent: Browser limit; values below 1 are raised to 1
            headless: Default for ``chromium.launch(headless=...)``
            launch_options: Extra keyword arguments for every launch
        """
        self._max = max(1, max_concurrent)
        self._headless = headless
        self._launch_options = dict(launch_options or {})
        self._slots = asyncio.Semaphore(self._max)
        self._active = 0

    @property
    def max_concurrent(self) -> int:
        return self._max

    @property
    def headless(self) -> bool:
        return self._headless

    @property
    def active_count(self) -> int:
        """Browsers currently open through this gate."""
        return self._active

    def launch_kwargs(self, **overrides: Any) -> dict[str, Any]:
        """Keyword arguments for ``chromium.launch``; ``overrides`` win."""
        kwargs = {"headless": self._headless, **self._launch_options}
        kwargs.update(overrides)
        return kwargs

    @asynccontextmanager
    async def async_browser(self, **overrides: Any) -> AsyncIterator[Any]:
        """Hold a slot for the lifetime of one Chromium instance."""
        from playwright.async_api import async_playwright

        async with self._slots:
            self._active += 1
            logger.debug("Browser slot taken (%d/%d active)", self._active, self._max)
            try:
                async with async_playwright() as p:
                    browser = await p.chromium.launch(**self.launch_kwargs(**overrides))
                    try:
                        yield browser
                    finally:
                        await browser.close()
            finally:
                self._active -= 1
                logger.debug("Browser slot freed (%d/%d active)", self._active, self._max)


_gate: BrowserGate | None = None


def get_browser_gate() -> BrowserGate:
    """The process-wide gate, created with defaults on first use."""
    global _gate
    if _gate is None:
        _gate = BrowserGate()
    return _gate


def configure_browser_gate(
    max_concurrent: int = DEFAULT_MAX_BROWSERS,
    headless: bool = DEFAULT_HEADLESS,
) -> BrowserGate:
    """Replace the process-wide gate and return it."""
    global _gate
    _gate = BrowserGate(max_concurrent=max_concurrent, headless=headless)
    return _gate
