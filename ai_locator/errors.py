"""
Error handling utilities for element location.

Provides custom exceptions, the best-effort combinator and error formatting
used by the classifier client and the resolver.
"""

import logging
from typing import Any, Callable, Dict, Optional, TypeVar

from selenium.common.exceptions import NoSuchElementException

logger = logging.getLogger(__name__)

T = TypeVar('T')


class LocatorError(Exception):
    """Base exception for element location errors."""

    def __init__(self, message: str, code: str = 'LOCATOR_ERROR', details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.name = self.__class__.__name__


class InitializationError(LocatorError):
    """Raised when the session cannot be created (unreadable screenshot or window size)."""

    def __init__(self, message: str = 'Failed to initialize classifier session', details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 'INITIALIZATION_FAILED', details)


class ClassificationUnavailable(LocatorError):
    """Raised when the classification service cannot be reached or returns garbage."""

    def __init__(self, message: str = 'Classification service unavailable', details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 'CLASSIFICATION_UNAVAILABLE', details)


class ElementNotFound(NoSuchElementException):
    """
    Raised when an element could be found neither natively nor by the classifier.

    Subclasses Selenium's NoSuchElementException so existing handlers keep working.
    """

    def __init__(self, message: str = 'Element not found', label: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.label = label
        self.code = 'ELEMENT_NOT_FOUND'


def best_effort(
    operation: Callable[[], T],
    default: T,
    context: Optional[str] = None
) -> T:
    """
    Run an operation whose failure must not interrupt the caller.

    Args:
        operation: Operation to run
        default: Value returned when the operation raises
        context: Optional context string for logging

    Returns:
        Result of the operation, or ``default`` if it failed
    """
    try:
        return operation()
    except Exception as error:
        context_str = f"{context}: " if context else ""
        logger.warning(f"[BestEffort] {context_str}ignored failure: {error}", exc_info=error)
        return default


def format_error_message(error: Exception) -> str:
    """
    Format error messages for user-friendly display.

    Args:
        error: Exception to format

    Returns:
        Formatted error message
    """
    if isinstance(error, ElementNotFound):
        return f"Element not found: {error.message}"

    if isinstance(error, InitializationError):
        return f"Initialization error: {error.message}. Please check the driver session."

    if isinstance(error, ClassificationUnavailable):
        return f"Classifier error: {error.message}. Please check the server URL and API key."

    if isinstance(error, LocatorError):
        return error.message

    return f"Error: {str(error)}"
