"""
Generic Locator Library for siteprobe.

Provides named queries for page features that smoke probes look for on
arbitrary sites, where no semantic attributes can be assumed.

Usage:
    locators = ProbeLocators(engine)

    # Count headings
    count = await locators.headings().count()

    # First link on the page
    href = await locators.links().first.get_attribute("href")

    # Optional features are probed for existence first
    if await locators.checkboxes().exists():
        await locators.checkboxes().first.check()
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from siteprobe.engine.base import ElementQuery, PageEngine

BODY = "body"
HTML = "html"
HEADINGS = "h1, h2, h3, h4, h5, h6"
LINKS = "a[href]"
BUTTONS = 'button, input[type="submit"], input[type="button"]'
TEXT_INPUTS = 'input[type="text"], input[type="email"], input:not([type]), textarea'
CONTACT_INPUTS = 'input[type="text"], input[type="email"], textarea'
SELECTS = "select"
OPTIONS = "option"
CHECKBOXES = 'input[type="checkbox"]'
RADIOS = 'input[type="radio"]'
IMAGES = "img"
INTERACTIVE = "a, button, input, select"
MAIN_LANDMARK = 'main, [role="main"], #main, .main-content'
FORMS = "form"
LOGIN_ENTRY = 'a:has-text("Login"), button:has-text("Login"), a:has-text("Sign in")'
EMAIL_INPUTS = 'input[type="email"], input[name*="email" i], input[placeholder*="email" i]'
PASSWORD_INPUTS = 'input[type="password"]'
PRODUCTS = '[class*="product"], [class*="item"], .card'
ADD_TO_CART = (
    'button:has-text("Add to Cart"), button:has-text("Add to Basket"), [class*="add-to-cart"]'
)
CART = '[class*="cart"], [aria-label*="cart" i], [class*="basket"]'
SEARCH = 'input[type="search"], input[placeholder*="search" i]'
CHECKOUT = 'button:has-text("Checkout"), a:has-text("Checkout"), [class*="checkout"]'


class ProbeLocators:
    """
    Named element queries for common page features.

    Each method returns a fresh ElementQuery; nothing is resolved until
    the query is counted or an element is acted on.
    """

    def __init__(self, engine: "PageEngine") -> None:
        self.engine = engine

    def body(self) -> "ElementQuery":
        return self.engine.query(BODY)

    def document(self) -> "ElementQuery":
        """The root ``<html>`` element."""
        return self.engine.query(HTML)

    def headings(self) -> "ElementQuery":
        return self.engine.query(HEADINGS)

    def links(self) -> "ElementQuery":
        """Anchors that carry an ``href``."""
        return self.engine.query(LINKS)

    def buttons(self) -> "ElementQuery":
        """Buttons and button-like inputs."""
        return self.engine.query(BUTTONS)

    def text_inputs(self) -> "ElementQuery":
        """Free-text inputs, including untyped ``<input>`` and ``<textarea>``."""
        return self.engine.query(TEXT_INPUTS)

    def contact_inputs(self) -> "ElementQuery":
        return self.engine.query(CONTACT_INPUTS)

    def selects(self) -> "ElementQuery":
        return self.engine.query(SELECTS)

    def checkboxes(self) -> "ElementQuery":
        return self.engine.query(CHECKBOXES)

    def radios(self) -> "ElementQuery":
        return self.engine.query(RADIOS)

    def images(self) -> "ElementQuery":
        return self.engine.query(IMAGES)

    def interactive(self) -> "ElementQuery":
        """Anything that can normally take keyboard focus."""
        return self.engine.query(INTERACTIVE)

    def main_landmark(self) -> "ElementQuery":
        return self.engine.query(MAIN_LANDMARK)

    def forms(self) -> "ElementQuery":
        return self.engine.query(FORMS)

    def focused(self) -> "ElementQuery":
        return self.engine.focused()

    # =========================================================================
    # Auth locators
    # =========================================================================

    def login_entry(self) -> "ElementQuery":
        """Login / sign-in link or button."""
        return self.engine.query(LOGIN_ENTRY)

    def email_inputs(self) -> "ElementQuery":
        return self.engine.query(EMAIL_INPUTS)

    def password_inputs(self) -> "ElementQuery":
        return self.engine.query(PASSWORD_INPUTS)

    # =========================================================================
    # Storefront locators
    # =========================================================================

    def products(self) -> "ElementQuery":
        """Product listings or cards."""
        return self.engine.query(PRODUCTS)

    def add_to_cart(self) -> "ElementQuery":
        return self.engine.query(ADD_TO_CART)

    def cart(self) -> "ElementQuery":
        """Shopping cart or basket icon."""
        return self.engine.query(CART)

    def search(self) -> "ElementQuery":
        return self.engine.query(SEARCH)

    def checkout(self) -> "ElementQuery":
        return self.engine.query(CHECKOUT)
