"""Accessibility validation of scripted web pages with Playwright and axe-core."""

__version__ = "1.0.0"
