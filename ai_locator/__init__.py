"""
Classifier-assisted element location for Appium.

Native locator strategies are tried first; when they fail, a remote
classification service identifies the element from its label, the page
source and a screenshot.
"""

from ai_locator.driver import ClassifierDriver
from ai_locator.element import RemoteElement
from ai_locator.errors import (
    ClassificationUnavailable,
    ElementNotFound,
    InitializationError,
    LocatorError,
)
from ai_locator.log_setup import LoggerManager
from ai_locator.strategies import LocateRequest, LocatorStrategy

__all__ = [
    "ClassifierDriver",
    "RemoteElement",
    "LocatorError",
    "InitializationError",
    "ClassificationUnavailable",
    "ElementNotFound",
    "LocateRequest",
    "LocatorStrategy",
    "LoggerManager",
]

__version__ = "1.0.0"
