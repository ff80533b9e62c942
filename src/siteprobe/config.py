"""
Project configuration for siteprobe.

Settings come from an optional ``siteprobe.toml`` and the environment,
resolved once by the caller and handed to the harness and the browser
gate as explicit values.

Example ``siteprobe.toml``::

    [siteprobe]
    target_url = "https://webtestingcourse.dequecloud.com"
    suite = "comprehensive"
    navigation_timeout_ms = 30000
    continue_on_error = true
    max_browsers = 2

    [siteprobe.viewport]
    width = 1280
    height = 720

Environment overrides:

- ``SITEPROBE_TARGET_URL``: target URL (``TEST_URL`` is honored as a fallback)
- ``SITEPROBE_BROWSER_HEADLESS``: ``0``/``false`` to show the browser
- ``SITEPROBE_MAX_BROWSERS``: concurrent Chromium instances for batch runs
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from siteprobe.browser_gate import DEFAULT_MAX_BROWSERS
from siteprobe.errors import ConfigurationError
from siteprobe.models import RunOptions, ViewportSize

CONFIG_FILENAME = "siteprobe.toml"
TARGET_URL_ENV = "SITEPROBE_TARGET_URL"
LEGACY_TARGET_URL_ENV = "TEST_URL"
HEADLESS_ENV = "SITEPROBE_BROWSER_HEADLESS"
MAX_BROWSERS_ENV = "SITEPROBE_MAX_BROWSERS"

# Expected TOML type per [siteprobe] key.
_KEY_TYPES: dict[str, type] = {
    "target_url": str,
    "suite": str,
    "navigation_timeout_ms": int,
    "probe_timeout_ms": int,
    "settle_timeout_ms": int,
    "continue_on_error": bool,
    "headless": bool,
    "max_browsers": int,
    "viewport": dict,
}


@dataclass
class ProbeSettings:
    """Resolved configuration for one invocation."""

    target_url: str | None = None
    suite: str = "comprehensive"
    navigation_timeout_ms: int = 30_000
    probe_timeout_ms: int | None = None
    settle_timeout_ms: int = 2_000
    continue_on_error: bool = True
    headless: bool = True
    max_browsers: int = DEFAULT_MAX_BROWSERS
    viewport: ViewportSize | None = None

    def run_options(self) -> RunOptions:
        """Build validated RunOptions from these settings."""
        return RunOptions.build(
            {
                "navigation_timeout_ms": self.navigation_timeout_ms,
                "probe_timeout_ms": self.probe_timeout_ms,
                "settle_timeout_ms": self.settle_timeout_ms,
                "default_viewport": self.viewport,
                "continue_on_error": self.continue_on_error,
            }
        )


def _check_types(section: dict[str, Any], path: Path) -> None:
    unknown = set(section) - set(_KEY_TYPES)
    if unknown:
        raise ConfigurationError(
            f"Unknown setting(s): {', '.join(sorted(unknown))}", context=str(path)
        )
    for key, value in section.items():
        expected = _KEY_TYPES[key]
        # bool is an int subclass; a timeout of `true` is still wrong
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigurationError(
                f"{key} must be {expected.__name__}, got {value!r}", context=str(path)
            )


def _read_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(str(e), context=str(path)) from e

    section = data.get("siteprobe", {})
    if not isinstance(section, dict):
        raise ConfigurationError("[siteprobe] must be a table", context=str(path))
    _check_types(section, path)
    return section


def _positive_int(value: str, name: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None
    if number < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {number}")
    return number


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ProbeSettings:
    """
    Load settings from ``path`` (if it exists) and the environment.

    Args:
        path: Config file; ``./siteprobe.toml`` when None
        environ: Environment mapping; ``os.environ`` when None

    Returns:
        ProbeSettings with environment values taking precedence over the file

    Raises:
        ConfigurationError: If the file or an environment value is malformed
    """
    environ = os.environ if environ is None else environ
    path = path or Path(CONFIG_FILENAME)

    section: dict[str, Any] = _read_file(path) if path.exists() else {}

    viewport = section.pop("viewport", None)
    try:
        settings = ProbeSettings(**section)
        if viewport is not None:
            settings.viewport = ViewportSize.model_validate(viewport)
    except (TypeError, ValidationError) as e:
        raise ConfigurationError(str(e), context=str(path)) from e
    if settings.max_browsers < 1:
        raise ConfigurationError("max_browsers must be at least 1", context=str(path))

    target = environ.get(TARGET_URL_ENV) or environ.get(LEGACY_TARGET_URL_ENV)
    if target:
        settings.target_url = target

    headless = environ.get(HEADLESS_ENV)
    if headless is not None:
        settings.headless = headless.lower() not in ("0", "false")

    max_browsers = environ.get(MAX_BROWSERS_ENV)
    if max_browsers is not None:
        settings.max_browsers = _positive_int(max_browsers, MAX_BROWSERS_ENV)

    return settings
