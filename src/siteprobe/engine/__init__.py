"""
Page engines for siteprobe.

Engines adapt a browser-automation library to the capability interface
the harness and probes use: navigation, element queries, simulated input,
bounded waits and the response / page-error streams.
"""

from siteprobe.engine.base import ElementHandle, ElementQuery, PageEngine, ResponseRecord
from siteprobe.engine.playwright_engine import PlaywrightEngine

__all__ = ["ElementHandle", "ElementQuery", "PageEngine", "PlaywrightEngine", "ResponseRecord"]
