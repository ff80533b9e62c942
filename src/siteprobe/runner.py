"""
Browser-backed suite runner.

Launches Chromium through the :class:`~siteprobe.browser_gate.BrowserGate`,
opens an isolated browser context per target, and runs the harness over a
:class:`~siteprobe.engine.PlaywrightEngine`. Suites for different targets
may run concurrently; each owns its own context and page.

Usage::

    from siteprobe.probes import get_suite
    from siteprobe.runner import run_target

    result = await run_target("https://example.com", get_suite("basic"))
    print(result.to_markdown())
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from siteprobe.browser_gate import BrowserGate, get_browser_gate
from siteprobe.engine.playwright_engine import PlaywrightEngine
from siteprobe.errors import TransientFault
from siteprobe.harness import ProbeHarness
from siteprobe.models import (
    TIMEOUT_CAUSE,
    Outcome,
    Probe,
    ProbeResult,
    RunOptions,
    SuiteResult,
    validate_target_url,
)

logger = logging.getLogger("siteprobe.runner")


async def run_target(
    target_url: str,
    probes: Sequence[Probe],
    options: RunOptions | dict[str, Any] | None = None,
    *,
    gate: BrowserGate | None = None,
    headless: bool | None = None,
    ignore_https_errors: bool = True,
) -> SuiteResult:
    """
    Run one suite against one target in a fresh browser context.

    Args:
        target_url: Page under test
        probes: Probes in report order
        options: Run options
        gate: Browser gate (global singleton if None)
        headless: Override the gate's headless default
        ignore_https_errors: Accept self-signed certificates

    Returns:
        Finalized SuiteResult

    Raises:
        ConfigurationError: Before a browser is launched, for invalid input
    """
    url = validate_target_url(target_url)
    opts = RunOptions.build(options)
    gate = gate or get_browser_gate()

    launch: dict[str, Any] = {}
    if headless is not None:
        launch["headless"] = headless

    context_kwargs: dict[str, Any] = {"ignore_https_errors": ignore_https_errors}
    if opts.default_viewport is not None:
        context_kwargs["viewport"] = {
            "width": opts.default_viewport.width,
            "height": opts.default_viewport.height,
        }

    async with gate.async_browser(**launch) as browser:
        context = await browser.new_context(**context_kwargs)
        try:
            page = await context.new_page()
            engine = PlaywrightEngine(page)
            return await ProbeHarness(engine).run(url, probes, opts)
        finally:
            await context.close()


def _launch_failure(url: str, probes: Sequence[Probe], exc: Exception) -> SuiteResult:
    """A finalized result marking every scheduled check ERRORED by ``exc``."""
    if isinstance(exc, TransientFault):
        cause = TIMEOUT_CAUSE if exc.timeout else exc.message
    elif isinstance(exc, (TimeoutError, PlaywrightTimeoutError)):
        cause = TIMEOUT_CAUSE
    else:
        cause = f"{type(exc).__name__}: {exc}"
    result = SuiteResult(target_url=url)
    for check in probes:
        result.append(
            ProbeResult(name=check.name, category=check.category, outcome=Outcome.errored(cause))
        )
    return result.finalize()


async def run_suites(
    targets: Sequence[str],
    probes: Sequence[Probe],
    options: RunOptions | dict[str, Any] | None = None,
    *,
    gate: BrowserGate | None = None,
    headless: bool | None = None,
) -> list[SuiteResult]:
    """
    Run the same suite against several targets concurrently.

    All targets and options are validated before any browser starts. A
    target whose browser cannot start, or whose run raises, gets a result
    in which every scheduled check is ERRORED; other targets are unaffected.

    Returns:
        One SuiteResult per target, in input order
    """
    urls = [validate_target_url(t) for t in targets]
    opts = RunOptions.build(options)
    gate = gate or get_browser_gate()
    logger.info(
        "Running %d suite(s) with up to %d browser(s)", len(urls), gate.max_concurrent
    )
    outcomes = await asyncio.gather(
        *(run_target(url, probes, opts, gate=gate, headless=headless) for url in urls),
        return_exceptions=True,
    )

    results: list[SuiteResult] = []
    for url, outcome in zip(urls, outcomes, strict=True):
        if isinstance(outcome, SuiteResult):
            results.append(outcome)
        elif isinstance(outcome, Exception):
            logger.warning("Suite for %s could not run: %s", url, outcome)
            results.append(_launch_failure(url, probes, outcome))
        else:
            raise outcome
    return results
