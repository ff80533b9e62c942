"""Tests for siteprobe.harness: execution order, classification and aborts."""

from __future__ import annotations

import asyncio
import logging

import pytest
from fakes import FakeElement, FakeEngine, FakePage

from siteprobe.errors import ConfigurationError, FeatureAbsent, TransientFault
from siteprobe.harness import ProbeHarness, classify_fault, requires, run_probes
from siteprobe.models import (
    ABORTED_REASON,
    Outcome,
    OutcomeKind,
    Probe,
    ProbeCategory,
    RunOptions,
    ViewportSize,
)

PASSED = OutcomeKind.PASSED
FAILED = OutcomeKind.FAILED
SKIPPED = OutcomeKind.SKIPPED
ERRORED = OutcomeKind.ERRORED


def make_probe(name, action=None, **kwargs) -> Probe:
    async def _noop(ctx):
        return None

    return Probe(
        name=name,
        category=kwargs.pop("category", ProbeCategory.STRUCTURE),
        action=action or _noop,
        **kwargs,
    )


async def _fail(ctx):
    raise AssertionError("expected a heading")


async def _absent(ctx):
    raise FeatureAbsent("no newsletter form on page")


async def _boom(ctx):
    raise RuntimeError("boom")


async def _timeout(ctx):
    raise TimeoutError("element never attached")


# =============================================================================
# Classification
# =============================================================================


class TestClassification:
    @pytest.mark.asyncio
    async def test_each_kind(self, engine: FakeEngine, target_url: str) -> None:
        probes = [
            make_probe("ok"),
            make_probe("fails", _fail),
            make_probe("absent", _absent),
            make_probe("raises", _boom),
            make_probe("times_out", _timeout),
        ]

        result = await ProbeHarness(engine).run(target_url, probes)

        assert [r.outcome for r in result] == [
            Outcome.passed(),
            Outcome.failed("expected a heading"),
            Outcome.skipped("no newsletter form on page"),
            Outcome.errored("RuntimeError: boom"),
            Outcome.errored("timeout"),
        ]

    @pytest.mark.asyncio
    async def test_assertion_without_message(self, engine: FakeEngine, target_url: str) -> None:
        async def bare(ctx):
            raise AssertionError

        result = await ProbeHarness(engine).run(target_url, [make_probe("bare", bare)])
        assert result.results[0].outcome == Outcome.failed("assertion failed")

    @pytest.mark.asyncio
    async def test_explicit_outcome_is_kept(self, engine: FakeEngine, target_url: str) -> None:
        async def explicit(ctx):
            return Outcome.skipped("not today")

        result = await ProbeHarness(engine).run(target_url, [make_probe("explicit", explicit)])
        assert result.results[0].outcome == Outcome.skipped("not today")

    def test_classify_transient_fault(self, engine: FakeEngine) -> None:
        assert classify_fault(engine, TransientFault("dns", timeout=True)) == Outcome.errored(
            "timeout"
        )
        assert classify_fault(engine, TransientFault("connection refused")) == Outcome.errored(
            "connection refused"
        )


# =============================================================================
# Ordering and results
# =============================================================================


class TestRun:
    @pytest.mark.asyncio
    async def test_one_result_per_probe_in_order(
        self, engine: FakeEngine, target_url: str
    ) -> None:
        probes = [make_probe(f"p{i}") for i in range(6)]
        result = await ProbeHarness(engine).run(target_url, probes)

        assert len(result) == 6
        assert [r.name for r in result] == [p.name for p in probes]
        assert result.finalized

    @pytest.mark.asyncio
    async def test_empty_probe_list(self, engine: FakeEngine, target_url: str) -> None:
        result = await ProbeHarness(engine).run(target_url, [])

        assert len(result) == 0
        assert result.finalized
        assert result.passed
        assert engine.navigations == []

    @pytest.mark.asyncio
    async def test_navigates_before_each_probe(self, engine: FakeEngine, target_url: str) -> None:
        probes = [make_probe("a"), make_probe("b"), make_probe("stay", navigate=False)]
        await ProbeHarness(engine).run(target_url, probes)
        assert engine.navigations == [target_url, target_url]

    @pytest.mark.asyncio
    async def test_applies_timeouts(self, engine: FakeEngine, target_url: str) -> None:
        await ProbeHarness(engine).run(target_url, [], {"navigation_timeout_ms": 1234})
        assert engine.default_timeout_ms == 1234

    @pytest.mark.asyncio
    async def test_repeat_runs_have_same_outcomes(
        self, engine: FakeEngine, target_url: str
    ) -> None:
        probes = [make_probe("ok"), make_probe("fails", _fail), make_probe("absent", _absent)]
        harness = ProbeHarness(engine)

        first = await harness.run(target_url, probes)
        second = await harness.run(target_url, probes)

        assert first.outcomes() == second.outcomes()

    @pytest.mark.asyncio
    async def test_log_lines_captured(
        self, engine: FakeEngine, target_url: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        async def chatty(ctx):
            ctx.log("Found %d widgets", 3)

        with caplog.at_level(logging.INFO, logger="siteprobe.probe"):
            result = await ProbeHarness(engine).run(target_url, [make_probe("chatty", chatty)])

        assert result.results[0].log == ["Found 3 widgets"]
        assert "[chatty] Found 3 widgets" in caplog.text

    @pytest.mark.asyncio
    async def test_run_probes_helper(self, engine: FakeEngine, target_url: str) -> None:
        result = await run_probes(engine, target_url, [make_probe("ok")])
        assert result.outcomes() == [PASSED]


# =============================================================================
# Applicability
# =============================================================================


class TestApplicability:
    @pytest.mark.asyncio
    async def test_false_predicate_skips_without_running(
        self, bare_page: FakePage, target_url: str
    ) -> None:
        ran = []

        async def action(ctx):
            ran.append(ctx.probe.name)

        probe = make_probe(
            "checkbox",
            action,
            applies=requires('input[type="checkbox"]'),
            absent_reason="no checkboxes on page",
        )
        result = await ProbeHarness(FakeEngine(bare_page)).run(target_url, [probe])

        assert result.results[0].outcome == Outcome.skipped("no checkboxes on page")
        assert ran == []

    @pytest.mark.asyncio
    async def test_requires_minimum(self, target_url: str) -> None:
        page = FakePage(elements={"li": [FakeElement(), FakeElement()]})
        engine = FakeEngine(page)

        assert await requires("li", minimum=2)(engine)
        assert not await requires("li", minimum=3)(engine)

    @pytest.mark.asyncio
    async def test_mixed_page_scenario(self, target_url: str) -> None:
        """Title present, no checkboxes, one image with empty alt."""
        page = FakePage(
            title="Home",
            elements={"img": [FakeElement(attrs={"src": "/a.png", "alt": ""})]},
        )

        async def has_title(ctx):
            if not (await ctx.page.title()).strip():
                raise AssertionError("Page title is empty")

        async def toggles_checkbox(ctx):
            await ctx.locators.checkboxes().first.check()

        async def image_has_alt(ctx):
            await ctx.assertions.attribute_present(ctx.locators.images().first, "alt")

        probes = [
            make_probe("HasTitle", has_title),
            make_probe("HasCheckbox", toggles_checkbox, applies=requires('input[type="checkbox"]')),
            make_probe("HasImageWithAlt", image_has_alt, applies=requires("img")),
        ]

        result = await ProbeHarness(FakeEngine(page)).run(target_url, probes)
        assert result.outcomes() == [PASSED, SKIPPED, PASSED]

    @pytest.mark.asyncio
    async def test_require_raises_feature_absent(
        self, bare_page: FakePage, target_url: str
    ) -> None:
        async def needs_form(ctx):
            await ctx.require("form", "forms")

        result = await ProbeHarness(FakeEngine(bare_page)).run(
            target_url, [make_probe("needs_form", needs_form)]
        )
        assert result.results[0].outcome == Outcome.skipped("no forms on page")
        assert result.results[0].log == ["Found 0 forms"]


# =============================================================================
# Abort semantics
# =============================================================================


class TestContinueOnError:
    @pytest.mark.asyncio
    async def test_continue_by_default(self, engine: FakeEngine, target_url: str) -> None:
        probes = [make_probe("a"), make_probe("b", _fail), make_probe("c")]
        result = await ProbeHarness(engine).run(target_url, probes)

        assert result.outcomes() == [PASSED, FAILED, PASSED]
        assert not result.aborted

    @pytest.mark.asyncio
    async def test_abort_skips_remaining(self, engine: FakeEngine, target_url: str) -> None:
        probes = [make_probe("a"), make_probe("b", _fail), make_probe("c"), make_probe("d")]
        result = await ProbeHarness(engine).run(
            target_url, probes, RunOptions(continue_on_error=False)
        )

        assert len(result) == 4
        assert result.outcomes() == [PASSED, FAILED, SKIPPED, SKIPPED]
        assert result.results[2].outcome.reason == ABORTED_REASON
        assert result.aborted
        assert engine.navigations == [target_url, target_url]

    @pytest.mark.asyncio
    async def test_errored_also_aborts(self, engine: FakeEngine, target_url: str) -> None:
        probes = [make_probe("a", _boom), make_probe("b")]
        result = await ProbeHarness(engine).run(
            target_url, probes, {"continue_on_error": False}
        )
        assert result.outcomes() == [ERRORED, SKIPPED]

    @pytest.mark.asyncio
    async def test_skipped_does_not_abort(self, engine: FakeEngine, target_url: str) -> None:
        probes = [make_probe("a", _absent), make_probe("b")]
        result = await ProbeHarness(engine).run(
            target_url, probes, {"continue_on_error": False}
        )
        assert result.outcomes() == [SKIPPED, PASSED]
        assert not result.aborted


# =============================================================================
# Faults and timeouts
# =============================================================================


class TestFaults:
    @pytest.mark.asyncio
    async def test_unreachable_target_errors_every_probe(self, target_url: str) -> None:
        page = FakePage(navigate_error=TransientFault("net::ERR_TIMED_OUT", timeout=True))
        probes = [make_probe("a"), make_probe("b"), make_probe("c")]

        result = await ProbeHarness(FakeEngine(page)).run(target_url, probes)

        assert [r.outcome for r in result] == [Outcome.errored("timeout")] * 3

    @pytest.mark.asyncio
    async def test_probe_timeout(self, engine: FakeEngine, target_url: str) -> None:
        async def hangs(ctx):
            await asyncio.sleep(5)

        result = await ProbeHarness(engine).run(
            target_url,
            [make_probe("hangs", hangs), make_probe("after")],
            {"probe_timeout_ms": 50},
        )

        assert result.results[0].outcome == Outcome.errored("timeout")
        assert result.results[1].outcome == Outcome.passed()

    @pytest.mark.asyncio
    async def test_slow_navigation_hits_probe_timeout(self, target_url: str) -> None:
        engine = FakeEngine(FakePage(navigate_delay=5))
        result = await ProbeHarness(engine).run(
            target_url, [make_probe("slow")], {"probe_timeout_ms": 50}
        )
        assert result.results[0].outcome == Outcome.errored("timeout")


# =============================================================================
# Configuration errors
# =============================================================================


class TestConfigurationErrors:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["", "not a url", "mailto:someone@example.com"])
    async def test_bad_url_raises_before_probes_run(self, engine: FakeEngine, url: str) -> None:
        with pytest.raises(ConfigurationError):
            await ProbeHarness(engine).run(url, [make_probe("a")])
        assert engine.navigations == []

    @pytest.mark.asyncio
    async def test_bad_options(self, engine: FakeEngine, target_url: str) -> None:
        with pytest.raises(ConfigurationError):
            await ProbeHarness(engine).run(
                target_url, [make_probe("a")], {"navigation_timeout_ms": -1}
            )
        assert engine.navigations == []

    @pytest.mark.asyncio
    async def test_non_probe_entry(self, engine: FakeEngine, target_url: str) -> None:
        with pytest.raises(ConfigurationError, match="Not a probe"):
            await ProbeHarness(engine).run(target_url, [make_probe("a"), "page_loads"])
        assert engine.navigations == []


# =============================================================================
# Viewport and page ownership
# =============================================================================


class TestPageHandling:
    @pytest.mark.asyncio
    async def test_viewport_restored_after_override(
        self, engine: FakeEngine, target_url: str
    ) -> None:
        mobile = ViewportSize(width=375, height=667)
        baseline = engine.current_viewport()

        probes = [make_probe("mobile", viewport=mobile), make_probe("after")]
        await ProbeHarness(engine).run(target_url, probes)

        assert engine.viewport_history == [mobile, baseline]

    @pytest.mark.asyncio
    async def test_default_viewport_applied(self, engine: FakeEngine, target_url: str) -> None:
        desktop = ViewportSize(width=1920, height=1080)
        await ProbeHarness(engine).run(
            target_url, [make_probe("a")], RunOptions(default_viewport=desktop)
        )
        assert engine.viewport == desktop

    @pytest.mark.asyncio
    async def test_page_held_exclusively(self, engine: FakeEngine, target_url: str) -> None:
        async def check_lock(ctx):
            assert ctx.page._lock is not None and ctx.page._lock.locked()

        result = await ProbeHarness(engine).run(target_url, [make_probe("lock", check_lock)])
        assert result.outcomes() == [PASSED]
        assert not engine._lock.locked()

    @pytest.mark.asyncio
    async def test_navigation_time_recorded(self, engine: FakeEngine, target_url: str) -> None:
        seen = []

        async def record(ctx):
            seen.append(ctx.navigation_ms)

        await ProbeHarness(engine).run(
            target_url,
            [make_probe("nav", record), make_probe("stay", record, navigate=False)],
        )
        assert seen[0] is not None and seen[0] >= 0
        assert seen[1] is None
