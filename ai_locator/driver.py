"""
Classifier-assisted wrapper around an Appium driver.

Usage:
    from appium import webdriver
    from ai_locator import ClassifierDriver

    driver = ClassifierDriver(webdriver.Remote(url, options=options), api_key)
    driver.find_element_by_accessibility_id("login", "login_button").click()

Anything the wrapper does not define is delegated to the wrapped driver.
"""

import logging
from typing import Any, List, Optional, Union

from ai_locator.capability import AppiumCapability, DriverCapability
from ai_locator.classifier_client import ClassifierClient
from ai_locator.element import RemoteElement
from ai_locator.resolver import Resolver
from ai_locator.session import Session
from ai_locator.strategies import LocateRequest, LocatorStrategy, normalize_label

logger = logging.getLogger(__name__)


class ClassifierDriver:
    """Appium driver wrapper that falls back to the element classifier."""

    def __init__(
        self,
        driver: Any,
        api_key: str,
        server_url: Optional[str] = None,
        test_case_name: Optional[str] = None,
        run_id: Optional[str] = None,
        capability: Optional[DriverCapability] = None
    ):
        """
        Args:
            driver: The Appium webdriver to wrap
            api_key: Classifier API key
            server_url: Server URL; None uses the environment or the production default
            test_case_name: Enables interactive mode when set
            run_id: Run identifier; generated when omitted
            capability: Custom driver capability; defaults to AppiumCapability(driver)

        Raises:
            InitializationError: If the screen density cannot be measured
        """
        self.driver = driver
        self.capability = capability or AppiumCapability(driver)
        self.session = Session.create(
            self.capability,
            api_key,
            server_url=server_url,
            test_case_name=test_case_name,
            run_id=run_id
        )
        self.client = ClassifierClient(self.session, self.capability)
        self.resolver = Resolver(self.session, self.capability, self.client)
        logger.info(f"ClassifierDriver ready (server={self.session.server_url}, multiplier={float(self.session.multiplier)})")

    def implicitly_wait(self, seconds: float) -> 'ClassifierDriver':
        """Set the driver's implicit wait; returns self for chaining."""
        self.capability.set_implicit_wait(seconds)
        return self

    def find_element(
        self,
        strategy: Union[LocatorStrategy, str],
        selector: str,
        element_label: Optional[str] = None
    ) -> Any:
        """
        Find an element natively, falling back to the classifier.

        Args:
            strategy: Locator strategy (enum or name such as "xpath")
            selector: Raw selector for the native driver
            element_label: Training label; derived from strategy and selector when None

        Returns:
            The native element, or a RemoteElement found by the classifier

        Raises:
            NoSuchElementException: The native error, when both lookups fail
        """
        if not isinstance(strategy, LocatorStrategy):
            strategy = LocatorStrategy.from_string(strategy)
        return self.resolver.resolve(LocateRequest(strategy, selector, element_label))

    def find_elements(self, strategy: Union[LocatorStrategy, str], selector: str) -> List[Any]:
        """Find all matching elements natively; the classifier is not involved."""
        if not isinstance(strategy, LocatorStrategy):
            strategy = LocatorStrategy.from_string(strategy)
        return self.capability.find_all_by(strategy, selector)

    def find_by_element_name(self, element_name: str) -> RemoteElement:
        """
        Find an element using only the classifier.

        Raises:
            ElementNotFound: With the service diagnostic if classification fails
        """
        return self.resolver.find_by_label(normalize_label(element_name))

    def disconnect(self) -> None:
        """Release the classifier HTTP channel (the wrapped driver stays open)."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, _exc_type, _exc_val, _exc_tb):
        self.disconnect()

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes not defined on the wrapper
        if name == 'driver':
            raise AttributeError(name)
        return getattr(self.driver, name)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} driver={self.driver!r}>"


def _strategy_finder(strategy: LocatorStrategy):
    def finder(self: ClassifierDriver, selector: str, element_name: Optional[str] = None) -> Any:
        return self.find_element(strategy, selector, element_name)

    finder.__name__ = f"find_element_by_{strategy.shortcode}"
    finder.__doc__ = (
        f"Find an element by {strategy.value}, falling back to the classifier.\n\n"
        "Args:\n"
        f"    selector: The {strategy.value} of the element\n"
        "    element_name: Training label; derived automatically when None\n"
    )
    return finder


for _strategy in LocatorStrategy:
    setattr(ClassifierDriver, f"find_element_by_{_strategy.shortcode}", _strategy_finder(_strategy))

del _strategy
