"""Performance probes: load time, uncaught errors and failed resources."""

from __future__ import annotations

from typing import TYPE_CHECKING

from siteprobe.models import Probe, ProbeCategory

if TYPE_CHECKING:
    from siteprobe.harness import ProbeContext

DEFAULT_LOAD_BUDGET_MS = 15_000
MAX_FAILED_RESOURCES = 5


def load_time_probe(budget_ms: int = DEFAULT_LOAD_BUDGET_MS) -> Probe:
    """Probe that navigation to the target finishes within ``budget_ms``."""

    async def _loads_in_time(ctx: ProbeContext) -> None:
        if ctx.navigation_ms is None:
            raise AssertionError("Page was not loaded by this probe")
        ctx.log("Page load time: %.0fms", ctx.navigation_ms)
        ctx.assertions.below(round(ctx.navigation_ms), budget_ms, "Page load time (ms)")

    return Probe(
        name="load_time",
        category=ProbeCategory.PERFORMANCE,
        action=_loads_in_time,
        description=f"Page loads in under {budget_ms}ms",
    )


async def _page_errors(ctx: ProbeContext) -> None:
    await ctx.settle("networkidle")
    errors = ctx.page.page_errors()
    ctx.log("Console errors: %d", len(errors))
    for message in errors:
        ctx.log("Error: %s", message)


async def _failed_resources(ctx: ProbeContext) -> None:
    failed = [r for r in ctx.page.responses() if r.failed]
    ctx.log("Failed resources: %d", len(failed))
    for response in failed:
        ctx.log("Failed: %s (%d)", response.url, response.status)
    # Tolerates a few failing third-party resources such as tracking scripts.
    ctx.assertions.below(len(failed), MAX_FAILED_RESOURCES, "Failed resource count")


LOAD_TIME = load_time_probe()

PAGE_ERRORS = Probe(
    name="page_errors",
    category=ProbeCategory.PERFORMANCE,
    action=_page_errors,
    description="Reports uncaught page errors (observational)",
)

FAILED_RESOURCES = Probe(
    name="failed_resources",
    category=ProbeCategory.PERFORMANCE,
    action=_failed_resources,
    description=f"Fewer than {MAX_FAILED_RESOURCES} responses with 4xx/5xx status",
)

PROBES = [LOAD_TIME, PAGE_ERRORS, FAILED_RESOURCES]
