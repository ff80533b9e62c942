"""
Playwright page engine.

Wraps an async Playwright ``Page``; element queries are Playwright
locators, so they re-resolve against the live DOM on every call.

Usage:
    engine = PlaywrightEngine(page)
    await engine.navigate("https://example.com", timeout_ms=5000)
    links = engine.query("a[href]")
    if await links.exists():
        href = await links.first.get_attribute("href")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from siteprobe.engine.base import ElementHandle, ElementQuery, PageEngine, ResponseRecord
from siteprobe.errors import TransientFault
from siteprobe.models import ViewportSize

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page, Response

logger = logging.getLogger("siteprobe.engine.playwright")


def _timeout_kwargs(timeout_ms: int | None) -> dict[str, Any]:
    return {} if timeout_ms is None else {"timeout": timeout_ms}


class PlaywrightElement(ElementHandle):
    """ElementHandle backed by a single-element Playwright locator."""

    def __init__(self, locator: Locator) -> None:
        self.locator = locator

    async def get_attribute(self, name: str) -> str | None:
        return await self.locator.get_attribute(name)

    async def text_content(self) -> str | None:
        return await self.locator.text_content()

    async def input_value(self) -> str:
        return await self.locator.input_value()

    async def is_visible(self) -> bool:
        return await self.locator.is_visible()

    async def is_checked(self) -> bool:
        return await self.locator.is_checked()

    async def click(self) -> None:
        await self.locator.click()

    async def focus(self) -> None:
        await self.locator.focus()

    async def fill(self, value: str) -> None:
        await self.locator.fill(value)

    async def check(self) -> None:
        await self.locator.check()

    async def uncheck(self) -> None:
        await self.locator.uncheck()

    async def tap(self) -> None:
        await self.locator.tap()

    async def select_option(self, index: int) -> None:
        await self.locator.select_option(index=index)

    async def wait_for(self, state: str = "visible", timeout_ms: int | None = None) -> None:
        await self.locator.wait_for(
            state=state,  # type: ignore[arg-type]
            **_timeout_kwargs(timeout_ms),
        )

    def locate(self, selector: str) -> ElementQuery:
        return PlaywrightQuery(self.locator.locator(selector), selector)


class PlaywrightQuery(ElementQuery):
    """ElementQuery backed by a Playwright locator."""

    def __init__(self, locator: Locator, selector: str) -> None:
        super().__init__(selector)
        self.locator = locator

    async def count(self) -> int:
        return await self.locator.count()

    def nth(self, index: int) -> ElementHandle:
        return PlaywrightElement(self.locator.nth(index))


class PlaywrightEngine(PageEngine):
    """PageEngine over an async Playwright ``Page``."""

    def __init__(self, page: Page) -> None:
        super().__init__()
        self.page = page
        self._responses: list[ResponseRecord] = []
        self._page_errors: list[str] = []
        page.on("response", self._on_response)
        page.on("pageerror", self._on_page_error)

    def _on_response(self, response: Response) -> None:
        self._responses.append(ResponseRecord(url=response.url, status=response.status))

    def _on_page_error(self, error: Any) -> None:
        message = getattr(error, "message", None) or str(error)
        logger.debug("Page error on %s: %s", self.page.url, message)
        self._page_errors.append(message)

    def apply_timeouts(self, timeout_ms: int) -> None:
        self.page.set_default_timeout(timeout_ms)
        self.page.set_default_navigation_timeout(timeout_ms)

    async def navigate(self, url: str, timeout_ms: int | None = None) -> int | None:
        self._responses = []
        self._page_errors = []
        try:
            response = await self.page.goto(url, **_timeout_kwargs(timeout_ms))
        except PlaywrightTimeoutError as e:
            raise TransientFault(str(e), context=f"navigate {url}", timeout=True) from e
        except PlaywrightError as e:
            raise TransientFault(e.message, context=f"navigate {url}") from e
        return response.status if response is not None else None

    def query(self, selector: str) -> ElementQuery:
        return PlaywrightQuery(self.page.locator(selector), selector)

    async def title(self) -> str:
        return await self.page.title()

    def current_viewport(self) -> ViewportSize | None:
        size = self.page.viewport_size
        if size is None:
            return None
        return ViewportSize(width=size["width"], height=size["height"])

    async def set_viewport(self, viewport: ViewportSize) -> None:
        await self.page.set_viewport_size({"width": viewport.width, "height": viewport.height})

    async def press(self, key: str) -> None:
        await self.page.keyboard.press(key)

    async def wait_for_load(self, state: str, timeout_ms: int) -> bool:
        try:
            await self.page.wait_for_load_state(state, timeout=timeout_ms)  # type: ignore[arg-type]
        except PlaywrightTimeoutError:
            logger.debug("Load state %r not reached within %dms", state, timeout_ms)
            return False
        return True

    async def wait_for_condition(self, expression: str, timeout_ms: int) -> bool:
        try:
            await self.page.wait_for_function(expression, timeout=timeout_ms)
        except PlaywrightTimeoutError:
            logger.debug("Condition %r not met within %dms", expression, timeout_ms)
            return False
        return True

    def is_timeout(self, exc: BaseException) -> bool:
        return isinstance(exc, (TimeoutError, PlaywrightTimeoutError))

    def responses(self) -> list[ResponseRecord]:
        return list(self._responses)

    def page_errors(self) -> list[str]:
        return list(self._page_errors)
