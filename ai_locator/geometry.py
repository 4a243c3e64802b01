"""
Screen density normalization.

The classifier reports element bounds in physical screenshot pixels, while the
driver works in logical window coordinates. Everything is divided by the
session multiplier with truncating integer semantics. The multiplier is kept
as an exact Fraction so whole logical values never lose a pixel.
"""

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Mapping, Tuple, Union

from ai_locator.errors import InitializationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PixelRect:
    """Raw element bounds as reported by the classifier, in physical pixels."""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_json(cls, elem: Mapping[str, Any]) -> 'PixelRect':
        return cls(
            x=int(elem['x']),
            y=int(elem['y']),
            width=int(elem['width']),
            height=int(elem['height'])
        )


@dataclass(frozen=True)
class LogicalRect:
    """Element bounds in logical (window) coordinates."""
    x: int
    y: int
    width: int
    height: int

    @property
    def location(self) -> Dict[str, int]:
        return {'x': self.x, 'y': self.y}

    @property
    def size(self) -> Dict[str, int]:
        return {'width': self.width, 'height': self.height}

    @property
    def rect(self) -> Dict[str, int]:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}

    @property
    def click_point(self) -> Tuple[int, int]:
        # Half-size is truncated on the already normalized size
        return self.x + self.width // 2, self.y + self.height // 2


def _truncate(value: int, multiplier: Union[Fraction, float]) -> int:
    return int(Fraction(value) / Fraction(multiplier))


def normalize(raw: PixelRect, multiplier: Union[Fraction, float]) -> LogicalRect:
    """
    Convert physical pixel bounds into logical bounds.

    Args:
        raw: Bounds in screenshot pixels
        multiplier: Session density multiplier (> 0)

    Returns:
        LogicalRect with every component divided and truncated
    """
    if multiplier <= 0:
        raise ValueError(f"Density multiplier must be positive, got {multiplier}")
    return LogicalRect(
        x=_truncate(raw.x, multiplier),
        y=_truncate(raw.y, multiplier),
        width=_truncate(raw.width, multiplier),
        height=_truncate(raw.height, multiplier)
    )


def compute_multiplier(screenshot_pixel_width: int, logical_window_width: int) -> Fraction:
    """
    Compute the density multiplier for a session.

    Raises:
        InitializationError: If either width is missing or not positive
    """
    if not screenshot_pixel_width or screenshot_pixel_width <= 0:
        raise InitializationError(
            f"Invalid screenshot width: {screenshot_pixel_width}",
            details={'screenshot_pixel_width': screenshot_pixel_width}
        )
    if not logical_window_width or logical_window_width <= 0:
        raise InitializationError(
            f"Invalid window width: {logical_window_width}",
            details={'logical_window_width': logical_window_width}
        )
    multiplier = Fraction(int(screenshot_pixel_width), int(logical_window_width))
    logger.debug(f"The screen multiplier is {float(multiplier)}")
    return multiplier
