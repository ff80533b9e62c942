"""
siteprobe: declarative smoke probes for web pages.

Visit a URL, run a battery of structural, accessibility and interaction
probes, and report which passed, failed, errored, or were skipped because
the feature they target is absent from the page.

Usage:
    from siteprobe import run_target
    from siteprobe.probes import get_suite

    result = await run_target("https://example.com", get_suite("comprehensive"))
    for probe_result in result:
        print(probe_result.name, probe_result.outcome)

Custom probes:
    from siteprobe import Probe, ProbeCategory, requires

    async def newsletter_signup(ctx):
        field = ctx.page.query("#newsletter input").first
        await field.fill("someone@example.com")
        await ctx.assertions.input_value(field, "someone@example.com")

    NEWSLETTER = Probe(
        name="newsletter_signup",
        category=ProbeCategory.FORM,
        action=newsletter_signup,
        applies=requires("#newsletter input"),
    )
"""

from siteprobe._version import __version__
from siteprobe.assertions import PageAssertions
from siteprobe.engine import ElementHandle, ElementQuery, PageEngine, PlaywrightEngine
from siteprobe.errors import (
    ConfigurationError,
    FeatureAbsent,
    SiteProbeError,
    TransientFault,
)
from siteprobe.harness import ProbeContext, ProbeHarness, requires, run_probes
from siteprobe.locators import ProbeLocators
from siteprobe.models import (
    Outcome,
    OutcomeKind,
    Probe,
    ProbeCategory,
    ProbeResult,
    RunOptions,
    SuiteResult,
    ViewportSize,
)
from siteprobe.runner import run_suites, run_target

__all__ = [
    "__version__",
    # Harness
    "ProbeHarness",
    "ProbeContext",
    "run_probes",
    "requires",
    # Browser runs
    "run_target",
    "run_suites",
    # Data model
    "Probe",
    "ProbeCategory",
    "Outcome",
    "OutcomeKind",
    "ProbeResult",
    "SuiteResult",
    "RunOptions",
    "ViewportSize",
    # Engine
    "PageEngine",
    "ElementQuery",
    "ElementHandle",
    "PlaywrightEngine",
    "ProbeLocators",
    "PageAssertions",
    # Errors
    "SiteProbeError",
    "ConfigurationError",
    "FeatureAbsent",
    "TransientFault",
]
