"""Accessibility probes: document language, landmarks, alt text and keyboard reach."""

from __future__ import annotations

from typing import TYPE_CHECKING

from siteprobe import locators
from siteprobe.harness import requires
from siteprobe.models import Probe, ProbeCategory
from siteprobe.probes.navigation import FOCUS_MOVED

if TYPE_CHECKING:
    from siteprobe.harness import ProbeContext

TAB_STOPS = 5


async def _document_language(ctx: ProbeContext) -> None:
    lang = await ctx.locators.document().first.get_attribute("lang")
    ctx.log("Page language: %s", lang)
    if not lang:
        raise AssertionError("<html> element has no lang attribute")


async def _main_landmark(ctx: ProbeContext) -> None:
    ctx.log("Main content areas found: %d", await ctx.locators.main_landmark().count())


async def _images_have_alt(ctx: ProbeContext) -> None:
    # An empty alt marks a decorative image and counts as present.
    alt = await ctx.assertions.attribute_present(ctx.locators.images().first, "alt", "First image")
    ctx.log('Image alt text: "%s"', alt)


async def _keyboard_traversal(ctx: ProbeContext) -> None:
    moved = 0
    for _ in range(TAB_STOPS):
        await ctx.page.press("Tab")
        if await ctx.settle_until(FOCUS_MOVED):
            moved += 1
    ctx.log("Keyboard navigation completed, focus held on %d of %d stops", moved, TAB_STOPS)


DOCUMENT_LANGUAGE = Probe(
    name="document_language",
    category=ProbeCategory.ACCESSIBILITY,
    action=_document_language,
    description="<html> declares a lang attribute",
)

MAIN_LANDMARK = Probe(
    name="main_landmark",
    category=ProbeCategory.ACCESSIBILITY,
    action=_main_landmark,
    description="Counts main landmarks (observational)",
)

IMAGES_HAVE_ALT = Probe(
    name="images_have_alt",
    category=ProbeCategory.ACCESSIBILITY,
    action=_images_have_alt,
    applies=requires(locators.IMAGES),
    absent_reason="no images on page",
    description="First image carries an alt attribute",
)

KEYBOARD_TRAVERSAL = Probe(
    name="keyboard_traversal",
    category=ProbeCategory.ACCESSIBILITY,
    action=_keyboard_traversal,
    description=f"Tabs through {TAB_STOPS} focus stops (observational)",
)

PROBES = [
    DOCUMENT_LANGUAGE,
    MAIN_LANDMARK,
    IMAGES_HAVE_ALT,
    KEYBOARD_TRAVERSAL,
]
