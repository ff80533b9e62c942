"""Navigation probes: links and keyboard movement through the page."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urljoin, urlparse

from siteprobe import locators
from siteprobe.harness import requires
from siteprobe.models import Probe, ProbeCategory

if TYPE_CHECKING:
    from siteprobe.harness import ProbeContext

FOCUS_MOVED = "document.activeElement !== null && document.activeElement !== document.body"


def is_same_site(target_url: str, href: str) -> bool:
    """Whether following ``href`` from ``target_url`` stays on the same site."""
    if href.startswith(("/", "#")):
        return True
    resolved = urlparse(urljoin(target_url, href))
    if resolved.scheme not in ("http", "https", "file"):
        return False
    return resolved.netloc == urlparse(target_url).netloc


async def _links_present(ctx: ProbeContext) -> None:
    count = await ctx.assertions.count_at_least(ctx.locators.links(), 1, "links")
    ctx.log("Found %d links", count)


async def _first_link_has_href(ctx: ProbeContext) -> None:
    first = ctx.locators.links().first
    await ctx.assertions.visible(first, "First link")
    href = await ctx.assertions.attribute_non_empty(first, "href", "First link")
    ctx.log("First link href: %s", href)


async def _first_link_navigates(ctx: ProbeContext) -> None:
    first = ctx.locators.links().first
    href = await first.get_attribute("href") or ""
    if not is_same_site(ctx.target_url, href):
        ctx.skip(f"first link leaves the site ({href})")
    await first.click()
    settled = await ctx.settle("domcontentloaded")
    ctx.log("Link clicked, page settled=%s", settled)


async def _tab_moves_focus(ctx: ProbeContext) -> None:
    await ctx.page.press("Tab")
    await ctx.settle_until(FOCUS_MOVED)
    ctx.log("Focused elements: %d", await ctx.locators.focused().count())


async def _enter_on_focused(ctx: ProbeContext) -> None:
    await ctx.locators.interactive().first.focus()
    await ctx.page.press("Enter")
    settled = await ctx.settle("load")
    ctx.log("Enter key pressed, page settled=%s", settled)


LINKS_PRESENT = Probe(
    name="links_present",
    category=ProbeCategory.NAVIGATION,
    action=_links_present,
    description="At least one link with an href",
)

FIRST_LINK_HAS_HREF = Probe(
    name="first_link_has_href",
    category=ProbeCategory.NAVIGATION,
    action=_first_link_has_href,
    applies=requires(locators.LINKS),
    absent_reason="no links on page",
    description="First link is visible and has a non-empty href",
)

FIRST_LINK_NAVIGATES = Probe(
    name="first_link_navigates",
    category=ProbeCategory.NAVIGATION,
    action=_first_link_navigates,
    applies=requires(locators.LINKS),
    absent_reason="no links on page",
    description="Clicking the first same-site link loads a page",
)

TAB_MOVES_FOCUS = Probe(
    name="tab_moves_focus",
    category=ProbeCategory.NAVIGATION,
    action=_tab_moves_focus,
    description="Tab key moves focus (observational)",
)

ENTER_ON_FOCUSED = Probe(
    name="enter_on_focused",
    category=ProbeCategory.NAVIGATION,
    action=_enter_on_focused,
    applies=requires(locators.INTERACTIVE),
    absent_reason="no focusable elements on page",
    description="Enter can be pressed on the first focusable element",
)

PROBES = [
    LINKS_PRESENT,
    FIRST_LINK_HAS_HREF,
    FIRST_LINK_NAVIGATES,
    TAB_MOVES_FOCUS,
    ENTER_ON_FOCUSED,
]
