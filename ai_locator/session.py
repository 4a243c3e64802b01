"""
Classifier session: credentials, run identity and screen density.

A Session is built once per driver wrapper and never changes afterwards, so
it can be shared freely between threads.
"""

import logging
import uuid
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Optional, Union

from ai_locator.capability import DriverCapability
from ai_locator.config import ServiceURLs
from ai_locator.errors import InitializationError
from ai_locator.geometry import compute_multiplier

logger = logging.getLogger(__name__)


def new_run_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Session:
    """Immutable per-run classifier context."""
    api_key: str
    server_url: str
    multiplier: Union[Fraction, float]
    run_id: str = field(default_factory=new_run_id)
    test_case_name: Optional[str] = None

    def __post_init__(self):
        if self.multiplier <= 0:
            raise InitializationError(f"Density multiplier must be positive, got {self.multiplier}")

    @property
    def interactive(self) -> bool:
        """Interactive (test case) mode is enabled by a test case name."""
        return self.test_case_name is not None

    @classmethod
    def create(
        cls,
        capability: DriverCapability,
        api_key: str,
        server_url: Optional[str] = None,
        test_case_name: Optional[str] = None,
        run_id: Optional[str] = None
    ) -> 'Session':
        """
        Create a session, measuring the density multiplier from the live driver.

        Args:
            capability: Driver capability used to read screenshot and window widths
            api_key: Classifier API key
            server_url: Explicit server URL (overrides environment and default)
            test_case_name: Enables interactive mode when set
            run_id: Injected run identifier; a random one is generated when omitted

        Raises:
            InitializationError: If the screenshot or window size cannot be read
        """
        try:
            pixel_width = capability.capture_screenshot_pixel_width()
            window_width = capability.get_window_logical_width()
        except Exception as e:
            raise InitializationError(
                f"Unable to measure screen density: {e}",
                details={'cause': type(e).__name__}
            ) from e

        session = cls(
            api_key=api_key,
            server_url=ServiceURLs.get_classifier_url(server_url),
            multiplier=compute_multiplier(pixel_width, window_width),
            run_id=run_id or new_run_id(),
            test_case_name=test_case_name
        )
        logger.debug(f"Classifier session created: server={session.server_url}, run_id={session.run_id}")
        return session
