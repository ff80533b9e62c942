"""Responsive probes: the page renders at common device sizes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from siteprobe.models import Probe, ProbeCategory, ViewportSize

if TYPE_CHECKING:
    from siteprobe.harness import ProbeContext

VIEWPORTS: dict[str, ViewportSize] = {
    "mobile": ViewportSize(width=375, height=667),
    "tablet": ViewportSize(width=768, height=1024),
    "desktop": ViewportSize(width=1920, height=1080),
}


def viewport_probe(name: str, viewport: ViewportSize) -> Probe:
    """Probe that the page body is visible at ``viewport``."""

    async def _renders(ctx: ProbeContext) -> None:
        await ctx.assertions.visible(ctx.locators.body().first, f"Page body at {viewport}")
        ctx.log("%s viewport %s: OK", name.capitalize(), viewport)

    return Probe(
        name=f"renders_on_{name}",
        category=ProbeCategory.RESPONSIVE,
        action=_renders,
        viewport=viewport,
        description=f"Page body visible at {name} size {viewport}",
    )


PROBES = [viewport_probe(name, size) for name, size in VIEWPORTS.items()]
