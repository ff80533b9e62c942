"""Interaction probes: buttons, search, cart and login entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

from siteprobe import locators
from siteprobe.harness import requires
from siteprobe.models import Probe, ProbeCategory

if TYPE_CHECKING:
    from siteprobe.harness import ProbeContext

SEARCH_TEXT = "test product"


async def _count_buttons(ctx: ProbeContext) -> None:
    ctx.log("Found %d buttons", await ctx.locators.buttons().count())


async def _first_button_visible(ctx: ProbeContext) -> None:
    await ctx.assertions.visible(ctx.locators.buttons().first, "First button")
    ctx.log("Button is visible")


async def _cart_visible(ctx: ProbeContext) -> None:
    await ctx.assertions.visible(ctx.locators.cart().first, "Shopping cart")
    ctx.log("Shopping cart found")


async def _search_accepts_text(ctx: ProbeContext) -> None:
    await ctx.locators.search().first.fill(SEARCH_TEXT)
    ctx.log("Search box tested")


async def _login_opens_form(ctx: ProbeContext) -> None:
    await ctx.locators.login_entry().first.click()
    await ctx.settle("load")
    ctx.log("Email fields: %d", await ctx.locators.email_inputs().count())
    ctx.log("Password fields: %d", await ctx.locators.password_inputs().count())


BUTTONS_PRESENT = Probe(
    name="buttons_present",
    category=ProbeCategory.INTERACTION,
    action=_count_buttons,
    description="Counts buttons and button inputs (observational)",
)

FIRST_BUTTON_VISIBLE = Probe(
    name="first_button_visible",
    category=ProbeCategory.INTERACTION,
    action=_first_button_visible,
    applies=requires(locators.BUTTONS),
    absent_reason="no buttons on page",
    description="First button is visible",
)

CART_VISIBLE = Probe(
    name="cart_visible",
    category=ProbeCategory.INTERACTION,
    action=_cart_visible,
    applies=requires(locators.CART),
    absent_reason="no shopping cart on page",
    description="Shopping cart icon is visible",
)

SEARCH_ACCEPTS_TEXT = Probe(
    name="search_accepts_text",
    category=ProbeCategory.INTERACTION,
    action=_search_accepts_text,
    applies=requires(locators.SEARCH),
    absent_reason="no search box on page",
    description="Search box accepts a query",
)

LOGIN_OPENS_FORM = Probe(
    name="login_opens_form",
    category=ProbeCategory.INTERACTION,
    action=_login_opens_form,
    applies=requires(locators.LOGIN_ENTRY),
    absent_reason="no login link or button on page",
    description="Login entry opens a form; reports credential fields found",
)

PROBES = [
    BUTTONS_PRESENT,
    FIRST_BUTTON_VISIBLE,
    CART_VISIBLE,
    SEARCH_ACCEPTS_TEXT,
    LOGIN_OPENS_FORM,
]
