"""
Element proxy backed by classifier results.

A RemoteElement has no handle in the live application tree: its text, tag
and bounds are the values the classifier returned, and every interaction is
injected through the driver at the stored click point.
"""

import logging
from fractions import Fraction
from typing import Dict, Optional, Tuple, Union

from ai_locator.capability import DriverCapability
from ai_locator.geometry import LogicalRect, PixelRect, normalize
from ai_locator.outcome import Found

logger = logging.getLogger(__name__)


class RemoteElement:
    """Driver-compatible element built from a classification result."""

    __slots__ = ('_capability', '_text', '_tag_name', '_bounds', '_key')

    def __init__(
        self,
        capability: DriverCapability,
        geometry: PixelRect,
        multiplier: Union[Fraction, float],
        text: Optional[str] = None,
        tag_name: Optional[str] = None,
        key: Optional[str] = None
    ):
        """
        Args:
            capability: Driver capability used for taps and key injection
            geometry: Bounds reported by the classifier, in screenshot pixels
            multiplier: Session density multiplier
            text: Element text as determined by the classifier
            tag_name: Element class as determined by the classifier
            key: Training key of the classification
        """
        self._capability = capability
        self._bounds: LogicalRect = normalize(geometry, multiplier)
        self._text = text
        self._tag_name = tag_name
        self._key = key

    @classmethod
    def from_outcome(cls, capability: DriverCapability, outcome: Found, multiplier: Union[Fraction, float]) -> 'RemoteElement':
        return cls(
            capability,
            outcome.geometry,
            multiplier,
            text=outcome.text,
            tag_name=outcome.tag_name,
            key=outcome.training_key
        )

    @property
    def text(self) -> Optional[str]:
        return self._text

    @property
    def tag_name(self) -> Optional[str]:
        return self._tag_name

    @property
    def key(self) -> Optional[str]:
        return self._key

    @property
    def size(self) -> Dict[str, int]:
        return self._bounds.size

    @property
    def location(self) -> Dict[str, int]:
        return self._bounds.location

    @property
    def rect(self) -> Dict[str, int]:
        return self._bounds.rect

    @property
    def click_point(self) -> Tuple[int, int]:
        return self._bounds.click_point

    def is_displayed(self) -> bool:
        # The classifier only reports elements it saw on the screenshot
        return True

    def click(self) -> None:
        """Tap the center of the element."""
        self._capability.tap(self.click_point)

    def send_keys(self, *value: str, click_first: bool = True) -> None:
        """
        Type into this element.

        Args:
            value: Strings to type, joined together
            click_first: Tap the element first to focus it
        """
        if click_first:
            self.click()
        self._capability.inject_keys("".join(value))

    def submit(self) -> None:
        # Newline without re-focusing the element
        self.send_keys("\n", click_first=False)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} tag={self._tag_name!r} text={self._text!r} rect={self.rect}>"
