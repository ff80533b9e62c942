"""
Page-Level Assertions for siteprobe.

Every assertion raises ``AssertionError`` with a readable message, which
the harness classifies as FAILED. Waits are bounded; an element that does
not reach the expected state in time is an assertion failure, not a fault.

Usage:
    assertions = PageAssertions(engine, default_timeout_ms=5000)

    await assertions.visible(locators.body().first, "Page body")
    await assertions.count_at_least(locators.links(), 1, "links")
    alt = await assertions.attribute_present(image, "alt")
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from siteprobe.engine.base import ElementHandle, ElementQuery, PageEngine


class PageAssertions:
    """
    Assertions over a page engine.

    Provides the checks smoke probes share, so probe bodies stay
    declarative.
    """

    def __init__(self, engine: "PageEngine", default_timeout_ms: int = 5000) -> None:
        """
        Initialize assertions.

        Args:
            engine: Page engine to assert against
            default_timeout_ms: Upper bound for element waits
        """
        self.engine = engine
        self.default_timeout_ms = default_timeout_ms

    async def visible(
        self,
        element: "ElementHandle",
        label: str = "Element",
        timeout_ms: int | None = None,
    ) -> None:
        """
        Assert that an element becomes visible.

        Raises:
            AssertionError: If the element is not visible within the timeout.
                Other faults (closed page, network) propagate unchanged.
        """
        timeout_ms = timeout_ms or self.default_timeout_ms
        try:
            await element.wait_for(state="visible", timeout_ms=timeout_ms)
        except Exception as e:
            if self.engine.is_timeout(e):
                raise AssertionError(f"{label} is not visible") from e
            raise

    async def count_at_least(self, query: "ElementQuery", minimum: int, label: str) -> int:
        """
        Assert that a query matches at least ``minimum`` elements.

        Returns:
            The actual count

        Raises:
            AssertionError: If fewer elements match
        """
        count = await query.count()
        if count < minimum:
            raise AssertionError(f"Expected at least {minimum} {label}, found {count}")
        return count

    async def attribute_present(
        self, element: "ElementHandle", name: str, label: str = "Element"
    ) -> str:
        """
        Assert that an attribute exists; an empty string counts as present.

        Returns:
            The attribute value

        Raises:
            AssertionError: If the attribute is missing
        """
        value = await element.get_attribute(name)
        if value is None:
            raise AssertionError(f"{label} has no {name} attribute")
        return value

    async def attribute_non_empty(
        self, element: "ElementHandle", name: str, label: str = "Element"
    ) -> str:
        """
        Assert that an attribute exists and is not blank.

        Raises:
            AssertionError: If the attribute is missing or empty
        """
        value = await element.get_attribute(name)
        if not value or not value.strip():
            raise AssertionError(f"{label} has an empty {name} attribute")
        return value

    async def text_longer_than(
        self, element: "ElementHandle", minimum: int, label: str = "Element"
    ) -> int:
        """
        Assert that an element's text content is longer than ``minimum`` characters.

        Returns:
            The text length

        Raises:
            AssertionError: If the text is shorter
        """
        text = await element.text_content() or ""
        if len(text) <= minimum:
            raise AssertionError(
                f"{label} has {len(text)} characters of text, expected more than {minimum}"
            )
        return len(text)

    async def checked(self, element: "ElementHandle", expected: bool = True) -> None:
        """
        Assert an element's checked state.

        Raises:
            AssertionError: If the state doesn't match
        """
        is_checked = await element.is_checked()
        if is_checked != expected:
            raise AssertionError(f"Element checked={is_checked}, expected {expected}")

    async def input_value(self, element: "ElementHandle", expected: str) -> None:
        """
        Assert that an input holds a specific value.

        Raises:
            AssertionError: If the value doesn't match
        """
        value = await element.input_value()
        if value != expected:
            raise AssertionError(f"Input value='{value}', expected '{expected}'")

    def below(self, actual: float, limit: float, label: str) -> None:
        """
        Assert that a measured quantity stays under a budget.

        Raises:
            AssertionError: If ``actual`` is not below ``limit``
        """
        if actual >= limit:
            raise AssertionError(f"{label} was {actual:g}, expected below {limit:g}")
