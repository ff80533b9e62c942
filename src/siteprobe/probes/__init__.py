"""
Built-in probe catalog and named suites.

Probes are grouped by category module; suites are ordered selections of
them. Order within a suite is the order results are reported in.

Usage:
    from siteprobe.probes import get_suite

    probes = get_suite("comprehensive")
"""

from siteprobe.errors import ConfigurationError
from siteprobe.models import Probe
from siteprobe.probes import (
    accessibility,
    forms,
    interaction,
    media,
    navigation,
    performance,
    responsive,
    structure,
)

BASIC_LOAD_BUDGET_MS = 10_000

ALL_PROBES: list[Probe] = [
    *structure.PROBES,
    *navigation.PROBES,
    *interaction.PROBES,
    *forms.PROBES,
    *accessibility.PROBES,
    *media.PROBES,
    *responsive.PROBES,
    *performance.PROBES,
]

SUITES: dict[str, list[Probe]] = {
    "all": list(ALL_PROBES),
    "basic": [
        structure.PAGE_LOADS,
        navigation.LINKS_PRESENT,
        performance.load_time_probe(BASIC_LOAD_BUDGET_MS),
    ],
    "generic": [
        structure.PAGE_LOADS,
        structure.HAS_CONTENT,
        navigation.LINKS_PRESENT,
    ],
    "deque": [
        structure.PAGE_LOADS,
        structure.HAS_TITLE,
    ],
    "forms": [
        interaction.LOGIN_OPENS_FORM,
        forms.CONTACT_INPUT_FILL,
        forms.FORMS_PRESENT,
    ],
    "shopping": [
        structure.PRODUCT_LISTINGS,
        structure.ADD_TO_CART_BUTTONS,
        interaction.CART_VISIBLE,
        interaction.SEARCH_ACCEPTS_TEXT,
        structure.CHECKOUT_BUTTONS,
    ],
    "comprehensive": [
        structure.PAGE_LOADS,
        structure.HAS_TITLE,
        structure.HAS_CONTENT,
        structure.HAS_HEADINGS,
        navigation.LINKS_PRESENT,
        navigation.FIRST_LINK_HAS_HREF,
        navigation.FIRST_LINK_NAVIGATES,
        interaction.BUTTONS_PRESENT,
        interaction.FIRST_BUTTON_VISIBLE,
        forms.TEXT_INPUT_ROUND_TRIP,
        forms.SELECT_OPTION,
        forms.CHECKBOX_TOGGLES,
        forms.RADIO_SELECTS,
        navigation.TAB_MOVES_FOCUS,
        navigation.ENTER_ON_FOCUSED,
        media.IMAGE_HAS_SRC,
        accessibility.IMAGES_HAVE_ALT,
        *responsive.PROBES,
        performance.LOAD_TIME,
        performance.PAGE_ERRORS,
        performance.FAILED_RESOURCES,
        accessibility.DOCUMENT_LANGUAGE,
        accessibility.MAIN_LANDMARK,
        accessibility.KEYBOARD_TRAVERSAL,
    ],
}

DEFAULT_SUITE = "comprehensive"


def list_suites() -> list[str]:
    return sorted(SUITES)


def get_suite(name: str) -> list[Probe]:
    """
    Look up a suite by name.

    Raises:
        ConfigurationError: If no suite has that name
    """
    try:
        return list(SUITES[name])
    except KeyError:
        raise ConfigurationError(
            f"Unknown suite {name!r}; available: {', '.join(list_suites())}"
        ) from None


def get_probe(name: str) -> Probe:
    """
    Look up a catalog probe by name.

    Raises:
        ConfigurationError: If no probe has that name
    """
    for probe in ALL_PROBES:
        if probe.name == name:
            return probe
    raise ConfigurationError(f"Unknown probe {name!r}")


__all__ = [
    "ALL_PROBES",
    "DEFAULT_SUITE",
    "SUITES",
    "get_probe",
    "get_suite",
    "list_suites",
]
