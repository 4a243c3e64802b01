"""
Driver capability interface.

The resolver and the remote element proxy only need a handful of driver
operations. ``DriverCapability`` names them; ``AppiumCapability`` implements
them on top of an Appium-Python-Client ``webdriver.Remote``.
"""

import base64
import io
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Tuple

from PIL import Image
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.actions import interaction
from selenium.webdriver.common.actions.action_builder import ActionBuilder
from selenium.webdriver.common.actions.pointer_input import PointerInput

from ai_locator.strategies import LocatorStrategy

logger = logging.getLogger(__name__)


class DriverCapability(ABC):
    """Operations consumed from the underlying automation driver."""

    @abstractmethod
    def find_by(self, strategy: LocatorStrategy, selector: str) -> Any:
        """
        Find a single element natively.

        Raises:
            NoSuchElementException: If the driver cannot find the element
        """
        pass

    @abstractmethod
    def find_all_by(self, strategy: LocatorStrategy, selector: str) -> List[Any]:
        """Find all matching elements natively (no classifier involvement)."""
        pass

    @abstractmethod
    def capture_page_source(self) -> str:
        pass

    @abstractmethod
    def capture_screenshot_base64(self) -> str:
        pass

    @abstractmethod
    def capture_screenshot_pixel_width(self) -> int:
        pass

    @abstractmethod
    def get_window_logical_width(self) -> int:
        pass

    @abstractmethod
    def tap(self, point: Tuple[int, int]) -> None:
        """Tap at logical window coordinates."""
        pass

    @abstractmethod
    def inject_keys(self, text: str) -> None:
        """Send key events to whatever currently has focus."""
        pass

    @abstractmethod
    def set_implicit_wait(self, seconds: float) -> None:
        pass


class AppiumCapability(DriverCapability):
    """DriverCapability backed by an Appium webdriver.Remote."""

    def __init__(self, driver: Any):
        """
        Args:
            driver: Appium (or Selenium) remote webdriver
        """
        self.driver = driver

    def find_by(self, strategy: LocatorStrategy, selector: str) -> Any:
        return self.driver.find_element(strategy.by, selector)

    def find_all_by(self, strategy: LocatorStrategy, selector: str) -> List[Any]:
        return self.driver.find_elements(strategy.by, selector)

    def capture_page_source(self) -> str:
        return self.driver.page_source

    def capture_screenshot_base64(self) -> str:
        screenshot = self.driver.get_screenshot_as_base64()
        if screenshot.startswith("data:image"):
            screenshot = screenshot.split(",", 1)[1]
        return screenshot

    def capture_screenshot_pixel_width(self) -> int:
        png = base64.b64decode(self.capture_screenshot_base64())
        with Image.open(io.BytesIO(png)) as image:
            return image.width

    def get_window_logical_width(self) -> int:
        return int(self.driver.get_window_size()['width'])

    def tap(self, point: Tuple[int, int]) -> None:
        x, y = point
        actions = ActionChains(self.driver)
        actions.w3c_actions = ActionBuilder(self.driver, mouse=PointerInput(interaction.POINTER_TOUCH, "touch"))
        actions.w3c_actions.pointer_action.move_to_location(x, y)
        actions.w3c_actions.pointer_action.pointer_down()
        actions.w3c_actions.pointer_action.pause(0.1)
        actions.w3c_actions.pointer_action.pointer_up()
        actions.perform()
        logger.debug(f"Tapped at coordinates ({x}, {y})")

    def inject_keys(self, text: str) -> None:
        ActionChains(self.driver).send_keys(text).perform()

    def set_implicit_wait(self, seconds: float) -> None:
        self.driver.implicitly_wait(seconds)
