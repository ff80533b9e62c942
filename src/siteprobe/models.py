"""
Core data model for probe runs.

Probes are immutable declarations; outcomes are a tagged variant with
exactly one kind per execution; a SuiteResult collects one ProbeResult
per scheduled probe, in declaration order.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from siteprobe.errors import ConfigurationError, ResultFinalizedError

if TYPE_CHECKING:
    from siteprobe.engine.base import PageEngine
    from siteprobe.harness import ProbeContext

ABORTED_REASON = "aborted by prior failure"
ABSENT_REASON = "feature not present"
TIMEOUT_CAUSE = "timeout"


class ProbeCategory(str, Enum):
    """Category a probe belongs to."""

    STRUCTURE = "structure"
    NAVIGATION = "navigation"
    INTERACTION = "interaction"
    FORM = "form"
    ACCESSIBILITY = "accessibility"
    MEDIA = "media"
    RESPONSIVE = "responsive"
    PERFORMANCE = "performance"


class OutcomeKind(str, Enum):
    """Tag of a probe outcome."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERRORED = "errored"


@dataclass(frozen=True)
class Outcome:
    """Classified result of one probe execution."""

    kind: OutcomeKind
    reason: str | None = None

    @classmethod
    def passed(cls) -> Outcome:
        return cls(OutcomeKind.PASSED)

    @classmethod
    def failed(cls, reason: str) -> Outcome:
        return cls(OutcomeKind.FAILED, reason)

    @classmethod
    def skipped(cls, reason: str = ABSENT_REASON) -> Outcome:
        return cls(OutcomeKind.SKIPPED, reason)

    @classmethod
    def errored(cls, cause: str) -> Outcome:
        return cls(OutcomeKind.ERRORED, cause)

    @property
    def is_problem(self) -> bool:
        """True for outcomes that make a run unsuccessful."""
        return self.kind in (OutcomeKind.FAILED, OutcomeKind.ERRORED)

    def __str__(self) -> str:
        if self.reason:
            return f"{self.kind.value.upper()}({self.reason})"
        return self.kind.value.upper()


# =============================================================================
# Run options
# =============================================================================


class ViewportSize(BaseModel):
    """Browser viewport dimensions in CSS pixels."""

    width: int = Field(gt=0)
    height: int = Field(gt=0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, value: str) -> ViewportSize:
        """Parse a ``WIDTHxHEIGHT`` string such as ``1280x720``."""
        try:
            width, height = value.lower().split("x", 1)
            return cls(width=int(width), height=int(height))
        except (ValueError, ValidationError) as e:
            raise ConfigurationError(
                f"Invalid viewport {value!r}, expected WIDTHxHEIGHT"
            ) from e

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class RunOptions(BaseModel):
    """
    Options recognized by :meth:`siteprobe.harness.ProbeHarness.run`.

    ``navigation_timeout_ms`` bounds navigation and element queries,
    ``probe_timeout_ms`` caps a whole probe execution, and
    ``settle_timeout_ms`` is the upper bound for post-interaction waits.
    """

    navigation_timeout_ms: int = Field(default=30_000, gt=0)
    probe_timeout_ms: int | None = Field(default=None, gt=0)
    settle_timeout_ms: int = Field(default=2_000, gt=0)
    default_viewport: ViewportSize | None = None
    continue_on_error: bool = True

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def build(cls, options: RunOptions | dict[str, Any] | None = None) -> RunOptions:
        """Coerce ``options`` into RunOptions, raising ConfigurationError if invalid."""
        if options is None:
            return cls()
        if isinstance(options, RunOptions):
            return options
        try:
            return cls.model_validate(options)
        except ValidationError as e:
            raise ConfigurationError(str(e), context="run options") from e


def validate_target_url(target_url: str) -> str:
    """Check that ``target_url`` is a non-empty http(s) or file URL."""
    if not target_url or not target_url.strip():
        raise ConfigurationError("Target URL must not be empty")
    parsed = urlparse(target_url.strip())
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return target_url.strip()
    if parsed.scheme == "file" and parsed.path:
        return target_url.strip()
    raise ConfigurationError(f"Unsupported target URL {target_url!r}")


# =============================================================================
# Probes
# =============================================================================

ProbeAction = Callable[["ProbeContext"], Awaitable["Outcome | None"]]
Applicability = Callable[["PageEngine"], Awaitable[bool]]


@dataclass(frozen=True)
class Probe:
    """
    A single declarative check against a loaded page.

    ``action`` returns None (or an explicit Outcome) on success, raises
    ``AssertionError`` on failure and ``FeatureAbsent`` when the optional
    feature it targets is missing. ``applies`` is evaluated after
    navigation; a false result skips the probe with ``absent_reason``.
    """

    name: str
    category: ProbeCategory
    action: ProbeAction
    applies: Applicability | None = None
    navigate: bool = True
    viewport: ViewportSize | None = None
    description: str = ""
    absent_reason: str = ABSENT_REASON


# =============================================================================
# Results
# =============================================================================


@dataclass
class ProbeResult:
    """Outcome of one probe, with timing and captured log lines."""

    name: str
    category: ProbeCategory
    outcome: Outcome
    duration_ms: float = 0
    log: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category.value,
            "outcome": self.outcome.kind.value,
            "reason": self.outcome.reason,
            "duration_ms": round(self.duration_ms, 1),
            "log": list(self.log),
        }


@dataclass
class SuiteResult:
    """
    Ordered results of one suite run against one target.

    Appended to monotonically while the run is in progress and read-only
    once :meth:`finalize` has been called.
    """

    target_url: str
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None
    aborted: bool = False
    _results: list[ProbeResult] = field(default_factory=list, repr=False)

    @property
    def finalized(self) -> bool:
        return self.completed_at is not None

    @property
    def results(self) -> tuple[ProbeResult, ...]:
        return tuple(self._results)

    def append(self, result: ProbeResult) -> None:
        if self.finalized:
            raise ResultFinalizedError(f"Cannot add {result.name!r} to a finalized suite result")
        self._results.append(result)

    def finalize(self, aborted: bool = False) -> SuiteResult:
        if not self.finalized:
            self.aborted = aborted
            self.completed_at = datetime.now(UTC)
        return self

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[ProbeResult]:
        return iter(tuple(self._results))

    def outcomes(self) -> list[OutcomeKind]:
        """Outcome tags in declaration order (timing excluded)."""
        return [r.outcome.kind for r in self._results]

    def count(self, kind: OutcomeKind) -> int:
        return sum(1 for r in self._results if r.outcome.kind == kind)

    def summary(self) -> dict[str, int]:
        return {kind.value: self.count(kind) for kind in OutcomeKind}

    @property
    def passed(self) -> bool:
        """True iff no probe FAILED or ERRORED."""
        return not any(r.outcome.is_problem for r in self._results)

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    @property
    def duration_ms(self) -> float:
        if self.completed_at is None:
            return 0
        return (self.completed_at - self.started_at).total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_url": self.target_url,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "aborted": self.aborted,
            "passed": self.passed,
            "summary": self.summary(),
            "results": [r.to_dict() for r in self._results],
        }

    def to_json(self) -> str:
        """Serialise the suite result to JSON."""
        return json.dumps(self.to_dict(), indent=2)

    def to_markdown(self) -> str:
        """Render a human-friendly markdown summary."""
        lines: list[str] = []
        status = "PASS" if self.passed else "FAIL"
        counts = self.summary()
        lines.append(f"# Smoke Probe Report: {self.target_url} ({status})")
        lines.append("")
        lines.append(
            f"**{counts['passed']}** passed, **{counts['failed']}** failed, "
            f"**{counts['errored']}** errored, **{counts['skipped']}** skipped"
        )
        if self.aborted:
            lines.append("\n> Run aborted by a prior failure")
        lines.append("")
        lines.append("| Probe | Category | Outcome | Duration |")
        lines.append("|-------|----------|---------|----------|")
        for r in self._results:
            lines.append(
                f"| {r.name} | {r.category.value} | {r.outcome} | {r.duration_ms:.0f}ms |"
            )
        return "\n".join(lines)
