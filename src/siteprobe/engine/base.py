"""
Base page engine for siteprobe.

Defines the capability interface the harness and probes drive. The
harness never controls a browser itself; engine implementations wrap an
automation library (see :mod:`siteprobe.engine.playwright_engine`).
Selector strings are opaque and passed through to the engine untouched.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from siteprobe.models import ViewportSize


@dataclass(frozen=True)
class ResponseRecord:
    """One network response observed since the last navigation."""

    url: str
    status: int

    @property
    def failed(self) -> bool:
        return 400 <= self.status < 600


class ElementHandle(ABC):
    """A single element located on the page."""

    @abstractmethod
    async def get_attribute(self, name: str) -> str | None:
        """Read an attribute; None when the attribute is absent."""
        ...

    @abstractmethod
    async def text_content(self) -> str | None: ...

    @abstractmethod
    async def input_value(self) -> str: ...

    @abstractmethod
    async def is_visible(self) -> bool: ...

    @abstractmethod
    async def is_checked(self) -> bool: ...

    @abstractmethod
    async def click(self) -> None: ...

    @abstractmethod
    async def focus(self) -> None: ...

    @abstractmethod
    async def fill(self, value: str) -> None: ...

    @abstractmethod
    async def check(self) -> None: ...

    @abstractmethod
    async def uncheck(self) -> None: ...

    @abstractmethod
    async def tap(self) -> None: ...

    @abstractmethod
    async def select_option(self, index: int) -> None: ...

    @abstractmethod
    async def wait_for(self, state: str = "visible", timeout_ms: int | None = None) -> None:
        """
        Wait until the element reaches ``state``.

        Args:
            state: "attached", "detached", "visible" or "hidden"
            timeout_ms: Upper bound in milliseconds (engine default if None)
        """
        ...

    @abstractmethod
    def locate(self, selector: str) -> ElementQuery:
        """Query descendants of this element."""
        ...


class ElementQuery(ABC):
    """An ordered, lazily evaluated set of elements matching a selector."""

    def __init__(self, selector: str) -> None:
        self.selector = selector

    @abstractmethod
    async def count(self) -> int: ...

    @abstractmethod
    def nth(self, index: int) -> ElementHandle: ...

    @property
    def first(self) -> ElementHandle:
        return self.nth(0)

    async def all(self) -> list[ElementHandle]:
        return [self.nth(i) for i in range(await self.count())]

    async def exists(self) -> bool:
        return await self.count() >= 1


class PageEngine(ABC):
    """
    Abstract page engine.

    One engine wraps one page handle. The handle is owned by a single probe
    at a time: callers hold :meth:`acquire` for the duration of a probe.
    """

    def __init__(self) -> None:
        self._lock: asyncio.Lock | None = None

    def _get_lock(self) -> asyncio.Lock:
        """Lazily create the lock (must be on an event loop)."""
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[PageEngine]:
        """Hold the page handle exclusively."""
        lock = self._get_lock()
        async with lock:
            yield self

    @abstractmethod
    def apply_timeouts(self, timeout_ms: int) -> None:
        """Set the default timeout for navigation and element queries."""
        ...

    @abstractmethod
    async def navigate(self, url: str, timeout_ms: int | None = None) -> int | None:
        """
        Load ``url`` and reset the response and page-error streams.

        Returns:
            HTTP status of the main document, or None if the engine has none
        """
        ...

    @abstractmethod
    def query(self, selector: str) -> ElementQuery: ...

    @abstractmethod
    async def title(self) -> str: ...

    @abstractmethod
    def current_viewport(self) -> ViewportSize | None: ...

    @abstractmethod
    async def set_viewport(self, viewport: ViewportSize) -> None: ...

    @abstractmethod
    async def press(self, key: str) -> None:
        """Press a key on whatever element currently has focus."""
        ...

    @abstractmethod
    async def wait_for_load(self, state: str, timeout_ms: int) -> bool:
        """
        Wait for a load state ("load", "domcontentloaded", "networkidle").

        Returns:
            True if the state was reached, False if ``timeout_ms`` elapsed first
        """
        ...

    @abstractmethod
    async def wait_for_condition(self, expression: str, timeout_ms: int) -> bool:
        """
        Wait until a JavaScript expression evaluates truthy in the page.

        Returns:
            True if the condition held, False if ``timeout_ms`` elapsed first
        """
        ...

    @abstractmethod
    def responses(self) -> list[ResponseRecord]:
        """Responses received since the last navigation."""
        ...

    @abstractmethod
    def page_errors(self) -> list[str]:
        """Uncaught page errors since the last navigation."""
        ...

    def is_timeout(self, exc: BaseException) -> bool:
        """Whether ``exc`` is this engine's timeout signal."""
        return isinstance(exc, TimeoutError)

    def focused(self) -> ElementQuery:
        """The element that currently has focus."""
        return self.query(":focus")
