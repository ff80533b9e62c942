"""
Probe Execution Harness for siteprobe.

Runs an ordered list of probes against one target URL and classifies
each execution as PASSED, FAILED, SKIPPED or ERRORED.

Usage:
    from siteprobe import ProbeHarness, RunOptions

    harness = ProbeHarness(engine)
    result = await harness.run("https://example.com", probes, RunOptions())
    assert result.passed

Classification, applied to every probe:
    1. navigate (unless the probe opts out) and evaluate ``applies``
    2. not applicable -> SKIPPED(absent_reason)
    3. run the action
    4. AssertionError -> FAILED(message)
    5. FeatureAbsent -> SKIPPED(reason)
    6. any other exception -> ERRORED(cause), "timeout" for timeouts
    7. otherwise the returned Outcome, or PASSED
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, NoReturn

from siteprobe.assertions import PageAssertions
from siteprobe.engine.base import ElementQuery, PageEngine
from siteprobe.errors import ConfigurationError, FeatureAbsent, TransientFault
from siteprobe.locators import ProbeLocators
from siteprobe.models import (
    ABORTED_REASON,
    TIMEOUT_CAUSE,
    Applicability,
    Outcome,
    Probe,
    ProbeResult,
    RunOptions,
    SuiteResult,
    ViewportSize,
    validate_target_url,
)

logger = logging.getLogger("siteprobe.harness")
probe_logger = logging.getLogger("siteprobe.probe")


@dataclass
class ProbeContext:
    """Everything a probe action may use while it holds the page."""

    probe: Probe
    page: PageEngine
    target_url: str
    options: RunOptions
    locators: ProbeLocators
    assertions: PageAssertions
    navigation_ms: float | None = None
    log_lines: list[str] = field(default_factory=list)

    @property
    def settle_timeout_ms(self) -> int:
        return self.options.settle_timeout_ms

    def log(self, message: str, *args: Any) -> None:
        """Record a finding for this probe's result and forward it to logging."""
        line = message % args if args else message
        self.log_lines.append(line)
        probe_logger.info("[%s] %s", self.probe.name, line)

    async def require(self, query: ElementQuery | str, label: str | None = None) -> ElementQuery:
        """
        Gate on an optional page feature.

        Args:
            query: ElementQuery or selector for the feature
            label: Human-readable name used in the log and skip reason

        Returns:
            The query, known to match at least one element

        Raises:
            FeatureAbsent: If nothing matches
        """
        if isinstance(query, str):
            query = self.page.query(query)
        label = label or f"elements matching {query.selector!r}"
        count = await query.count()
        self.log("Found %d %s", count, label)
        if count < 1:
            raise FeatureAbsent(f"no {label} on page")
        return query

    def skip(self, reason: str) -> NoReturn:
        """Skip the rest of this probe because an optional feature is unusable."""
        raise FeatureAbsent(reason)

    async def settle(self, state: str = "load") -> bool:
        """Wait, bounded by ``settle_timeout_ms``, for the page to reach a load state."""
        return await self.page.wait_for_load(state, self.settle_timeout_ms)

    async def settle_until(self, expression: str) -> bool:
        """Wait, bounded by ``settle_timeout_ms``, for a JavaScript condition."""
        return await self.page.wait_for_condition(expression, self.settle_timeout_ms)


def requires(selector: str, minimum: int = 1) -> Applicability:
    """Build an applicability predicate: at least ``minimum`` elements match ``selector``."""

    async def _applies(engine: PageEngine) -> bool:
        return await engine.query(selector).count() >= minimum

    return _applies


def classify_fault(engine: PageEngine, exc: Exception) -> Outcome:
    """Map a non-assertion exception to an ERRORED outcome."""
    if isinstance(exc, TransientFault):
        return Outcome.errored(TIMEOUT_CAUSE if exc.timeout else exc.message)
    if engine.is_timeout(exc):
        return Outcome.errored(TIMEOUT_CAUSE)
    return Outcome.errored(f"{type(exc).__name__}: {exc}")


class ProbeHarness:
    """
    Executes probes sequentially against one page engine.

    The harness is a linear reducer over the probe list: each probe
    acquires the page exclusively, runs, and releases it before the next
    probe starts. It keeps no state between runs.
    """

    def __init__(self, engine: PageEngine) -> None:
        """
        Initialize the harness.

        Args:
            engine: Page engine owning the page handle for this suite
        """
        self.engine = engine

    async def run(
        self,
        target_url: str,
        probes: Sequence[Probe],
        options: RunOptions | dict[str, Any] | None = None,
    ) -> SuiteResult:
        """
        Run ``probes`` against ``target_url``.

        Args:
            target_url: Page to load before each navigating probe
            probes: Probes in declaration order; may be empty
            options: RunOptions or a dict of its fields

        Returns:
            Finalized SuiteResult with exactly one result per probe

        Raises:
            ConfigurationError: For an invalid URL, options or probe list,
                before any probe executes
        """
        url = validate_target_url(target_url)
        opts = RunOptions.build(options)
        scheduled = list(probes)
        for probe in scheduled:
            if not isinstance(probe, Probe):
                raise ConfigurationError(f"Not a probe: {probe!r}")

        self.engine.apply_timeouts(opts.navigation_timeout_ms)
        baseline = opts.default_viewport or self.engine.current_viewport()

        result = SuiteResult(target_url=url)
        logger.info("Running %d probe(s) against %s", len(scheduled), url)

        aborted = False
        for probe in scheduled:
            if aborted:
                result.append(
                    ProbeResult(
                        name=probe.name,
                        category=probe.category,
                        outcome=Outcome.skipped(ABORTED_REASON),
                    )
                )
                continue

            probe_result = await self._run_probe(probe, url, opts, baseline)
            result.append(probe_result)

            if probe_result.outcome.is_problem and not opts.continue_on_error:
                logger.warning(
                    "Aborting run after %s: %s", probe.name, probe_result.outcome
                )
                aborted = True

        result.finalize(aborted=aborted)
        logger.info("Finished %s: %s", url, result.summary())
        return result

    async def _run_probe(
        self,
        probe: Probe,
        url: str,
        opts: RunOptions,
        baseline: ViewportSize | None,
    ) -> ProbeResult:
        """Run one probe under the page lock and classify its outcome."""
        ctx = ProbeContext(
            probe=probe,
            page=self.engine,
            target_url=url,
            options=opts,
            locators=ProbeLocators(self.engine),
            assertions=PageAssertions(self.engine, opts.navigation_timeout_ms),
        )

        start = time.monotonic()
        async with self.engine.acquire():
            try:
                if opts.probe_timeout_ms is not None:
                    outcome = await asyncio.wait_for(
                        self._execute(probe, ctx, baseline),
                        timeout=opts.probe_timeout_ms / 1000,
                    )
                else:
                    outcome = await self._execute(probe, ctx, baseline)
            except AssertionError as e:
                outcome = Outcome.failed(str(e) or "assertion failed")
            except FeatureAbsent as e:
                outcome = Outcome.skipped(e.message)
            except Exception as e:
                logger.debug("Probe %s raised", probe.name, exc_info=True)
                outcome = classify_fault(self.engine, e)
        duration_ms = (time.monotonic() - start) * 1000

        logger.info("%s [%s] %s (%.0fms)", probe.name, probe.category.value, outcome, duration_ms)
        return ProbeResult(
            name=probe.name,
            category=probe.category,
            outcome=outcome,
            duration_ms=duration_ms,
            log=ctx.log_lines,
        )

    async def _execute(
        self,
        probe: Probe,
        ctx: ProbeContext,
        baseline: ViewportSize | None,
    ) -> Outcome:
        """Set the viewport, navigate, gate on applicability, then run the action."""
        viewport = probe.viewport or baseline
        if viewport is not None and viewport != self.engine.current_viewport():
            await self.engine.set_viewport(viewport)

        if probe.navigate:
            nav_start = time.monotonic()
            await self.engine.navigate(ctx.target_url, timeout_ms=ctx.options.navigation_timeout_ms)
            ctx.navigation_ms = (time.monotonic() - nav_start) * 1000

        if probe.applies is not None and not await probe.applies(self.engine):
            return Outcome.skipped(probe.absent_reason)

        outcome = await probe.action(ctx)
        return outcome or Outcome.passed()


async def run_probes(
    engine: PageEngine,
    target_url: str,
    probes: Sequence[Probe],
    options: RunOptions | dict[str, Any] | None = None,
) -> SuiteResult:
    """
    Convenience function to run a suite on an existing engine.

    Args:
        engine: Page engine for the suite
        target_url: Page under test
        probes: Probes to run
        options: Run options

    Returns:
        Finalized SuiteResult
    """
    return await ProbeHarness(engine).run(target_url, probes, options)
