"""
core: 框架核心

用法：
    from core import BasePage, DriverManager, steps
    from core import ElementNotFoundError, ReportWriteError
"""

from core import steps
from core.base_page import BasePage
from core.driver_manager import DriverManager
from core.exceptions import (
    DriverConnectionError,
    DriverError,
    DriverNotInitializedError,
    ElementNotClickableError,
    ElementNotFoundError,
    ElementNotVisibleError,
    EvidenceLoadError,
    FrameworkError,
    PageError,
    ReportError,
    ReportWriteError,
    UnsupportedBrowserError,
)

__all__ = [
    # Driver / Page / Steps
    "DriverManager",
    "BasePage",
    "steps",
    # Exceptions
    "FrameworkError",
    "DriverError",
    "DriverNotInitializedError",
    "DriverConnectionError",
    "UnsupportedBrowserError",
    "PageError",
    "ElementNotFoundError",
    "ElementNotClickableError",
    "ElementNotVisibleError",
    "ReportError",
    "EvidenceLoadError",
    "ReportWriteError",
]
