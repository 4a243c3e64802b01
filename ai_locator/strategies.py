"""
Locator strategy enumeration and training label derivation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from appium.webdriver.common.appiumby import AppiumBy


class LocatorStrategy(str, Enum):
    """Native locator strategies that support classifier fallback."""

    ACCESSIBILITY_ID = "accessibility id"
    CLASS_NAME = "class name"
    CSS_SELECTOR = "css selector"
    ID = "id"
    LINK_TEXT = "link text"
    NAME = "name"
    PARTIAL_LINK_TEXT = "partial link text"
    TAG_NAME = "tag name"
    XPATH = "xpath"

    @classmethod
    def from_string(cls, value: str) -> 'LocatorStrategy':
        """
        Convert a string to a LocatorStrategy.

        Accepts both the W3C form ("accessibility id") and the snake form
        ("accessibility_id").

        Raises:
            ValueError: If the strategy name is not recognized
        """
        normalized = value.strip().lower().replace('_', ' ')
        try:
            return cls(normalized)
        except ValueError:
            valid = [s.value for s in cls]
            raise ValueError(
                f"Invalid locator strategy: {value}. "
                f"Valid strategies are: {', '.join(valid)}"
            )

    @property
    def shortcode(self) -> str:
        """Name used inside derived training labels."""
        return self.value.replace(' ', '_')

    @property
    def by(self) -> str:
        """The matching AppiumBy constant."""
        return _APPIUM_BY[self]

    def __str__(self) -> str:
        return self.value


_APPIUM_BY = {
    LocatorStrategy.ACCESSIBILITY_ID: AppiumBy.ACCESSIBILITY_ID,
    LocatorStrategy.CLASS_NAME: AppiumBy.CLASS_NAME,
    LocatorStrategy.CSS_SELECTOR: AppiumBy.CSS_SELECTOR,
    LocatorStrategy.ID: AppiumBy.ID,
    LocatorStrategy.LINK_TEXT: AppiumBy.LINK_TEXT,
    LocatorStrategy.NAME: AppiumBy.NAME,
    LocatorStrategy.PARTIAL_LINK_TEXT: AppiumBy.PARTIAL_LINK_TEXT,
    LocatorStrategy.TAG_NAME: AppiumBy.TAG_NAME,
    LocatorStrategy.XPATH: AppiumBy.XPATH,
}


def derive_label(strategy: LocatorStrategy, selector: str) -> str:
    """Build the default training label for a strategy/selector pair."""
    return f"element_name_by_{strategy.shortcode}_{selector.replace('.', '_')}"


def normalize_label(label: str) -> str:
    return label.replace(' ', '_')


@dataclass(frozen=True)
class LocateRequest:
    """A single element lookup: native strategy, raw selector and optional label."""
    strategy: LocatorStrategy
    selector: str
    element_label: Optional[str] = None

    @property
    def label(self) -> str:
        """Effective training label: explicit or derived, with spaces replaced."""
        label = self.element_label or derive_label(self.strategy, self.selector)
        return normalize_label(label)
