"""
Native-first element resolution with classifier fallback.

    native lookup ── success ──> classify (for the training key)
         │                       report usage with the native rect
         │                       return the native element
         └─ NoSuchElement ──> classify ── Found ──> RemoteElement
                                       └─ NotFound ─> re-raise the native error

Only the native driver's own not-found error ever escapes ``resolve``.
"""

import logging
from typing import Any, Optional

from selenium.common.exceptions import NoSuchElementException

from ai_locator.capability import DriverCapability
from ai_locator.classifier_client import ClassifierClient
from ai_locator.element import RemoteElement
from ai_locator.errors import ElementNotFound, best_effort
from ai_locator.outcome import Found
from ai_locator.session import Session
from ai_locator.strategies import LocateRequest

logger = logging.getLogger(__name__)

INTERACTIVE_MODE_MESSAGE = "Interactive (test case) mode does not resolve elements"


class Resolver:
    """Resolves LocateRequests natively, falling back to the classifier."""

    def __init__(self, session: Session, capability: DriverCapability, client: ClassifierClient):
        self.session = session
        self.capability = capability
        self.client = client

    def resolve(self, request: LocateRequest) -> Any:
        """
        Resolve an element.

        Args:
            request: Strategy, selector and optional label

        Returns:
            The native element, or a RemoteElement when only the classifier found it

        Raises:
            NoSuchElementException: The native driver's original error, when the
                classifier could not find the element either
            ElementNotFound: In interactive mode, where nothing is resolved
        """
        label = request.label

        try:
            native = self.capability.find_by(request.strategy, request.selector)
        except NoSuchElementException as native_error:
            logger.info(f"Element '{label}' was not found natively, trying the classifier...")
            element = self.classify_element(label)
            if element is not None:
                return element
            logger.error(f"The classifier was also unable to find the element with name '{label}'")
            raise native_error

        if self.session.interactive:
            raise ElementNotFound(INTERACTIVE_MODE_MESSAGE, label=label)

        if native is not None:
            self._train(native, label)
        return native

    def classify_element(self, label: str) -> Optional[RemoteElement]:
        """
        Classify a label and wrap a successful result.

        Returns:
            RemoteElement, or None if the classifier did not find the element
        """
        outcome = self.client.classify(label)
        if outcome is not None and not isinstance(outcome, Found):
            logger.debug(f"Classifier failure for '{label}': reason={outcome.reason.value}")
        return self._wrap(outcome)

    def find_by_label(self, label: str) -> RemoteElement:
        """
        Find an element by classifier label alone.

        Raises:
            ElementNotFound: With the service diagnostic when classification fails
        """
        outcome = self.client.classify(label)
        element = self._wrap(outcome)
        if element is None:
            message = outcome.message if outcome is not None else INTERACTIVE_MODE_MESSAGE
            raise ElementNotFound(message, label=label)
        return element

    def _wrap(self, outcome) -> Optional[RemoteElement]:
        if isinstance(outcome, Found):
            return RemoteElement.from_outcome(self.capability, outcome, self.session.multiplier)
        return None

    def _train(self, native: Any, label: str) -> None:
        """Register a natively found element under its label."""
        outcome = self.client.classify(label)
        key = outcome.training_key if outcome is not None else None
        rect = best_effort(lambda: native.rect, None, f"read rect of '{label}'")
        if rect is None:
            return
        self.client.record_usage(key, rect, label, train_if_necessary=True)
