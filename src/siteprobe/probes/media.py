"""Media probes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from siteprobe import locators
from siteprobe.harness import requires
from siteprobe.models import Probe, ProbeCategory

if TYPE_CHECKING:
    from siteprobe.harness import ProbeContext


async def _image_has_src(ctx: ProbeContext) -> None:
    src = await ctx.assertions.attribute_non_empty(
        ctx.locators.images().first, "src", "First image"
    )
    ctx.log("First image src: %s", src)


IMAGE_HAS_SRC = Probe(
    name="image_has_src",
    category=ProbeCategory.MEDIA,
    action=_image_has_src,
    applies=requires(locators.IMAGES),
    absent_reason="no images on page",
    description="First image has a non-empty src",
)

PROBES = [IMAGE_HAS_SRC]
