"""Form probes: text entry, dropdowns, checkboxes and radio buttons."""

from __future__ import annotations

from typing import TYPE_CHECKING

from siteprobe import locators
from siteprobe.harness import requires
from siteprobe.models import Probe, ProbeCategory

if TYPE_CHECKING:
    from siteprobe.harness import ProbeContext

INPUT_TEXT = "Test input"
CONTACT_TEXT = "Test data"


async def _text_input_round_trip(ctx: ProbeContext) -> None:
    field = ctx.locators.text_inputs().first
    await field.fill(INPUT_TEXT)
    await ctx.assertions.input_value(field, INPUT_TEXT)


async def _select_option(ctx: ProbeContext) -> None:
    dropdown = ctx.locators.selects().first
    options = await dropdown.locate(locators.OPTIONS).count()
    ctx.log("First dropdown has %d options", options)
    if options < 2:
        ctx.skip("first dropdown has fewer than two options")
    await dropdown.select_option(1)
    ctx.log("Dropdown selected")


async def _checkbox_toggles(ctx: ProbeContext) -> None:
    checkbox = ctx.locators.checkboxes().first
    await checkbox.check()
    await ctx.assertions.checked(checkbox, True)
    await checkbox.uncheck()
    await ctx.assertions.checked(checkbox, False)


async def _radio_selects(ctx: ProbeContext) -> None:
    radio = ctx.locators.radios().first
    await radio.check()
    await ctx.assertions.checked(radio, True)


async def _count_forms(ctx: ProbeContext) -> None:
    ctx.log("Found %d forms", await ctx.locators.forms().count())


async def _contact_input_fill(ctx: ProbeContext) -> None:
    inputs = await ctx.require(ctx.locators.contact_inputs(), "form inputs")
    await inputs.first.fill(CONTACT_TEXT)


TEXT_INPUT_ROUND_TRIP = Probe(
    name="text_input_round_trip",
    category=ProbeCategory.FORM,
    action=_text_input_round_trip,
    applies=requires(locators.TEXT_INPUTS),
    absent_reason="no text inputs on page",
    description="First text input keeps the value typed into it",
)

SELECT_OPTION = Probe(
    name="select_option",
    category=ProbeCategory.FORM,
    action=_select_option,
    applies=requires(locators.SELECTS),
    absent_reason="no dropdowns on page",
    description="Second option of the first dropdown can be selected",
)

CHECKBOX_TOGGLES = Probe(
    name="checkbox_toggles",
    category=ProbeCategory.FORM,
    action=_checkbox_toggles,
    applies=requires(locators.CHECKBOXES),
    absent_reason="no checkboxes on page",
    description="First checkbox can be checked and unchecked",
)

RADIO_SELECTS = Probe(
    name="radio_selects",
    category=ProbeCategory.FORM,
    action=_radio_selects,
    applies=requires(locators.RADIOS),
    absent_reason="no radio buttons on page",
    description="First radio button can be selected",
)

FORMS_PRESENT = Probe(
    name="forms_present",
    category=ProbeCategory.FORM,
    action=_count_forms,
    description="Counts forms (observational)",
)

CONTACT_INPUT_FILL = Probe(
    name="contact_input_fill",
    category=ProbeCategory.FORM,
    action=_contact_input_fill,
    description="First contact-style input accepts text",
)

PROBES = [
    TEXT_INPUT_ROUND_TRIP,
    SELECT_OPTION,
    CHECKBOX_TOGGLES,
    RADIO_SELECTS,
    FORMS_PRESENT,
    CONTACT_INPUT_FILL,
]
