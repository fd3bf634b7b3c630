"""
Top-level package for the differential-expression browser.

Most code should import from submodules such as:
    de_browser.core
    de_browser.views
    de_browser.ui
"""

__all__: list[str] = []
