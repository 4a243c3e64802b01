"""
Classification outcomes and service failure translation.

The classifier only reports failures as free text. ``translate_failure_message``
is the single place that maps that text to a reason code and a user-facing
diagnostic; the vocabulary is not documented by the service, so the reason is
informational only and never drives control flow.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Tuple, Union

from ai_locator.geometry import PixelRect

GENERIC_FAILURE_MESSAGE = "classifier driver exception"
CLASSIFICATION_FAILED_PREFIX = "Classification failed for element_name: "


class ReasonCode(str, Enum):
    """Why the classifier could not identify an element."""

    NEEDS_LABELING = "needs_labeling"
    FROZEN = "frozen"
    UNKNOWN_SERVICE_ERROR = "unknown_service_error"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Found:
    """The classifier located the element."""
    geometry: PixelRect
    tag_name: Optional[str]
    text: Optional[str]
    training_key: Optional[str]


@dataclass(frozen=True)
class NotFound:
    """The classifier could not locate the element."""
    training_key: Optional[str]
    reason: ReasonCode
    message: str


ClassificationOutcome = Union[Found, NotFound]


def translate_failure_message(
    raw_message: Optional[str],
    label: str,
    server_url: str,
    response: Optional[Mapping[str, Any]] = None
) -> Tuple[ReasonCode, str]:
    """
    Derive a reason code and diagnostic message from a service failure.

    Args:
        raw_message: The ``message`` field of the service response, if any
        label: Training label that was classified
        server_url: Base URL of the service, used for the labeling hint
        response: Full response payload, quoted for unknown errors

    Returns:
        Tuple of (reason, message)
    """
    if raw_message is None:
        return ReasonCode.UNKNOWN_SERVICE_ERROR, GENERIC_FAILURE_MESSAGE

    if "Please label" in raw_message or "Did not find" in raw_message:
        return ReasonCode.NEEDS_LABELING, (
            f"{CLASSIFICATION_FAILED_PREFIX}{label} - "
            f"Please visit {server_url}/label/{label} to classify"
        )

    if "frozen label" in raw_message:
        return ReasonCode.FROZEN, (
            f"{CLASSIFICATION_FAILED_PREFIX}{label} - However this element is frozen, "
            "so no new screenshot was uploaded. Please unfreeze the element if you "
            "want to add this screenshot to training"
        )

    return ReasonCode.UNKNOWN_SERVICE_ERROR, (
        f"{GENERIC_FAILURE_MESSAGE}: Unknown error, here was the API response: {dict(response or {})}"
    )


def outcome_from_response(
    response: Mapping[str, Any],
    label: str,
    server_url: str
) -> ClassificationOutcome:
    """
    Build an outcome from a parsed ``/classify`` response.

    Raises:
        KeyError, TypeError, ValueError: If a success response has malformed geometry
    """
    key = response.get('key')
    if response.get('success'):
        elem = response['elem']
        return Found(
            geometry=PixelRect.from_json(elem),
            tag_name=elem.get('class'),
            text=elem.get('text'),
            training_key=key
        )

    reason, message = translate_failure_message(response.get('message'), label, server_url, response)
    return NotFound(training_key=key, reason=reason, message=message)
