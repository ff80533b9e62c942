"""Tests for PlaywrightEngine against a mocked Playwright page."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from siteprobe.engine.base import ResponseRecord
from siteprobe.engine.playwright_engine import PlaywrightEngine
from siteprobe.errors import TransientFault
from siteprobe.models import ViewportSize


def make_page() -> MagicMock:
    page = MagicMock()
    page.url = "https://example.com/"
    page.goto = AsyncMock(return_value=SimpleNamespace(status=200))
    page.wait_for_load_state = AsyncMock()
    page.wait_for_function = AsyncMock()
    page.set_viewport_size = AsyncMock()
    page.viewport_size = {"width": 1280, "height": 720}
    return page


def handler(page: MagicMock, event: str):
    for call in page.on.call_args_list:
        if call.args[0] == event:
            return call.args[1]
    raise LookupError(event)


class TestNavigate:
    @pytest.mark.asyncio
    async def test_returns_status(self) -> None:
        page = make_page()
        engine = PlaywrightEngine(page)

        assert await engine.navigate("https://example.com/", timeout_ms=5000) == 200
        page.goto.assert_awaited_once_with("https://example.com/", timeout=5000)

    @pytest.mark.asyncio
    async def test_timeout_becomes_transient_fault(self) -> None:
        page = make_page()
        page.goto.side_effect = PlaywrightTimeoutError("Timeout 5000ms exceeded")
        engine = PlaywrightEngine(page)

        with pytest.raises(TransientFault) as exc_info:
            await engine.navigate("https://example.com/")
        assert exc_info.value.timeout is True

    @pytest.mark.asyncio
    async def test_network_error_becomes_transient_fault(self) -> None:
        page = make_page()
        page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        engine = PlaywrightEngine(page)

        with pytest.raises(TransientFault) as exc_info:
            await engine.navigate("https://nowhere.invalid/")
        assert exc_info.value.timeout is False
        assert exc_info.value.message == "net::ERR_NAME_NOT_RESOLVED"

    @pytest.mark.asyncio
    async def test_navigation_resets_collected_events(self) -> None:
        page = make_page()
        engine = PlaywrightEngine(page)

        handler(page, "response")(SimpleNamespace(url="https://example.com/x.js", status=404))
        handler(page, "pageerror")(SimpleNamespace(message="boom"))
        assert engine.responses() == [ResponseRecord("https://example.com/x.js", 404)]
        assert engine.page_errors() == ["boom"]

        await engine.navigate("https://example.com/")
        assert engine.responses() == []
        assert engine.page_errors() == []


class TestWaits:
    @pytest.mark.asyncio
    async def test_load_state_timeout_returns_false(self) -> None:
        page = make_page()
        page.wait_for_load_state.side_effect = PlaywrightTimeoutError("Timeout 2000ms exceeded")
        engine = PlaywrightEngine(page)

        assert await engine.wait_for_load("networkidle", 2000) is False

    @pytest.mark.asyncio
    async def test_condition_met(self) -> None:
        engine = PlaywrightEngine(make_page())
        assert await engine.wait_for_condition("true", 2000) is True


class TestPageState:
    def test_timeouts_applied(self) -> None:
        page = make_page()
        PlaywrightEngine(page).apply_timeouts(7000)
        page.set_default_timeout.assert_called_once_with(7000)
        page.set_default_navigation_timeout.assert_called_once_with(7000)

    @pytest.mark.asyncio
    async def test_viewport(self) -> None:
        page = make_page()
        engine = PlaywrightEngine(page)

        assert engine.current_viewport() == ViewportSize(width=1280, height=720)
        await engine.set_viewport(ViewportSize(width=375, height=667))
        page.set_viewport_size.assert_awaited_once_with({"width": 375, "height": 667})

    def test_is_timeout(self) -> None:
        engine = PlaywrightEngine(make_page())
        assert engine.is_timeout(PlaywrightTimeoutError("late"))
        assert engine.is_timeout(TimeoutError())
        assert not engine.is_timeout(PlaywrightError("closed"))

    def test_query_uses_locator(self) -> None:
        page = make_page()
        query = PlaywrightEngine(page).query("a[href]")

        assert query.selector == "a[href]"
        page.locator.assert_called_once_with("a[href]")
