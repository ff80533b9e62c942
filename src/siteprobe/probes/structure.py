"""Structure probes: the page renders, has a title, content and headings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from siteprobe.models import Probe, ProbeCategory

if TYPE_CHECKING:
    from siteprobe.harness import ProbeContext

MIN_CONTENT_CHARS = 100


async def _body_visible(ctx: ProbeContext) -> None:
    await ctx.assertions.visible(ctx.locators.body().first, "Page body")


async def _title_present(ctx: ProbeContext) -> None:
    title = await ctx.page.title()
    ctx.log("Page title: %s", title)
    if not title.strip():
        raise AssertionError("Page title is empty")


async def _has_content(ctx: ProbeContext) -> None:
    length = await ctx.assertions.text_longer_than(
        ctx.locators.body().first, MIN_CONTENT_CHARS, "Page body"
    )
    ctx.log("Body text length: %d", length)


async def _has_headings(ctx: ProbeContext) -> None:
    count = await ctx.assertions.count_at_least(ctx.locators.headings(), 1, "headings")
    ctx.log("Found %d headings", count)


async def _count_products(ctx: ProbeContext) -> None:
    ctx.log("Found %d products", await ctx.locators.products().count())


async def _count_add_to_cart(ctx: ProbeContext) -> None:
    ctx.log("Found %d add-to-cart buttons", await ctx.locators.add_to_cart().count())


async def _count_checkout(ctx: ProbeContext) -> None:
    ctx.log("Found %d checkout buttons", await ctx.locators.checkout().count())


PAGE_LOADS = Probe(
    name="page_loads",
    category=ProbeCategory.STRUCTURE,
    action=_body_visible,
    description="Page body renders and is visible",
)

HAS_TITLE = Probe(
    name="has_title",
    category=ProbeCategory.STRUCTURE,
    action=_title_present,
    description="Document title is not empty",
)

HAS_CONTENT = Probe(
    name="has_content",
    category=ProbeCategory.STRUCTURE,
    action=_has_content,
    description=f"Body text is longer than {MIN_CONTENT_CHARS} characters",
)

HAS_HEADINGS = Probe(
    name="has_headings",
    category=ProbeCategory.STRUCTURE,
    action=_has_headings,
    description="At least one h1-h6 heading",
)

PRODUCT_LISTINGS = Probe(
    name="product_listings",
    category=ProbeCategory.STRUCTURE,
    action=_count_products,
    description="Counts product listings (observational)",
)

ADD_TO_CART_BUTTONS = Probe(
    name="add_to_cart_buttons",
    category=ProbeCategory.STRUCTURE,
    action=_count_add_to_cart,
    description="Counts add-to-cart buttons (observational)",
)

CHECKOUT_BUTTONS = Probe(
    name="checkout_buttons",
    category=ProbeCategory.STRUCTURE,
    action=_count_checkout,
    description="Counts checkout buttons (observational)",
)

PROBES = [
    PAGE_LOADS,
    HAS_TITLE,
    HAS_CONTENT,
    HAS_HEADINGS,
    PRODUCT_LISTINGS,
    ADD_TO_CART_BUTTONS,
    CHECKOUT_BUTTONS,
]
