"""Shared pytest fixtures for siteprobe tests."""

import pytest

from fakes import FakeElement, FakeEngine, FakePage

import siteprobe.browser_gate as browser_gate

TARGET = "https://shop.example.com/"

_ENV_VARS = (
    "SITEPROBE_TARGET_URL",
    "TEST_URL",
    "SITEPROBE_BROWSER_HEADLESS",
    "SITEPROBE_MAX_BROWSERS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch):
    """Keep developer environment variables and the gate singleton out of tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    browser_gate._gate = None
    yield
    browser_gate._gate = None


@pytest.fixture
def target_url() -> str:
    return TARGET


@pytest.fixture
def rich_page() -> FakePage:
    """A page that has every feature the built-in probes look for."""
    body_text = "Welcome to the example shop. " * 10
    return FakePage(
        title="Example Shop",
        elements={
            "body": [FakeElement(text=body_text)],
            "html": [FakeElement(attrs={"lang": "en"})],
            "h1, h2, h3, h4, h5, h6": [FakeElement(text="Shop")],
            "a[href]": [FakeElement(attrs={"href": "/products"})],
            'button, input[type="submit"], input[type="button"]': [FakeElement()],
            'input[type="text"], input[type="email"], input:not([type]), textarea': [
                FakeElement()
            ],
            'input[type="text"], input[type="email"], textarea': [FakeElement()],
            "select": [
                FakeElement(children={"option": [FakeElement(), FakeElement()]})
            ],
            'input[type="checkbox"]': [FakeElement()],
            'input[type="radio"]': [FakeElement()],
            "img": [FakeElement(attrs={"src": "/logo.png", "alt": "Logo"})],
            "a, button, input, select": [FakeElement()],
        },
    )


@pytest.fixture
def bare_page() -> FakePage:
    """A page with a body, a title and nothing else."""
    return FakePage(
        title="Bare",
        elements={
            "body": [FakeElement(text="x" * 150)],
            "html": [FakeElement(attrs={"lang": "en"})],
        },
    )


@pytest.fixture
def engine(rich_page: FakePage) -> FakeEngine:
    return FakeEngine(rich_page)
