"""
HTTP client for the element classification service.

Two form-encoded POST calls share one pooled keep-alive session:
``/classify`` identifies an element from a label, the page source and a
screenshot; ``/add_action`` reports that a labelled element was seen so the
service can train on it. Neither call retries, and neither raises.
"""

import logging
from typing import Any, Dict, Optional

import requests
import requests.adapters
import urllib3

from ai_locator.capability import DriverCapability
from ai_locator.config import ADD_ACTION_ENDPOINT, CLASSIFY_ENDPOINT, ServiceURLs
from ai_locator.errors import ClassificationUnavailable, best_effort, format_error_message
from ai_locator.outcome import (
    GENERIC_FAILURE_MESSAGE,
    ClassificationOutcome,
    Found,
    NotFound,
    ReasonCode,
    outcome_from_response,
)
from ai_locator.session import Session

logger = logging.getLogger(__name__)


class ClassifierClient:
    """Client for the classify/add_action endpoints, bound to one Session."""

    def __init__(
        self,
        session: Session,
        capability: DriverCapability,
        connection_timeout: Optional[float] = None,
        request_timeout: Optional[float] = None
    ):
        """
        Args:
            session: Classifier session (credentials, run id, multiplier)
            capability: Driver capability used to capture screenshot and page source
            connection_timeout: Transport connect timeout in seconds (None waits forever)
            request_timeout: Transport read timeout in seconds (None waits forever)
        """
        self.session = session
        self.capability = capability
        self.connection_timeout = connection_timeout
        self.request_timeout = request_timeout

        # HTTP session for connection pooling and reuse
        self._session = requests.Session()
        adapter = requests.adapters.HTTPAdapter(
            pool_connections=10,
            pool_maxsize=20,
            max_retries=0,
            pool_block=False
        )
        self._session.mount('http://', adapter)
        self._session.mount('https://', adapter)

        if not ServiceURLs.verify_tls(session.server_url):
            self._session.verify = False
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            logger.debug(f"TLS verification disabled for {session.server_url}")

    def _timeout(self):
        if self.connection_timeout is None and self.request_timeout is None:
            return None
        return (self.connection_timeout, self.request_timeout)

    def _post(self, endpoint: str, form: Dict[str, str]) -> Dict[str, Any]:
        """
        POST a form to an endpoint and parse the JSON reply.

        The response is closed before returning, whatever the outcome.

        Raises:
            ClassificationUnavailable: On transport errors, non-2xx status or malformed JSON
        """
        url = ServiceURLs.endpoint(self.session.server_url, endpoint)
        try:
            with self._session.post(url, data=form, timeout=self._timeout()) as response:
                response.raise_for_status()
                payload = response.json()
        except requests.exceptions.HTTPError as e:
            raise ClassificationUnavailable(f"Classifier returned HTTP error: {e}", details={'url': url}) from e
        except requests.exceptions.RequestException as e:
            raise ClassificationUnavailable(f"Classifier request failed: {e}", details={'url': url}) from e
        except ValueError as e:
            raise ClassificationUnavailable(f"Classifier returned malformed JSON: {e}", details={'url': url}) from e

        if not isinstance(payload, dict):
            raise ClassificationUnavailable(f"Unexpected classifier response: {payload!r}", details={'url': url})
        return payload

    def classify(self, label: str) -> Optional[ClassificationOutcome]:
        """
        Ask the service to identify the element with the given label.

        Args:
            label: Normalized training label

        Returns:
            Found or NotFound; None in interactive mode, where no call is made
        """
        if self.session.interactive:
            # Interactive (test case) mode is not implemented by the service SDK
            return None

        page_source = best_effort(self.capability.capture_page_source, "", "capture page source")

        key = None
        try:
            form = {
                'screenshot': self.capability.capture_screenshot_base64(),
                'source': page_source or "",
                'api_key': self.session.api_key,
                'label': label,
                'run_id': self.session.run_id,
            }
            response = self._post(CLASSIFY_ENDPOINT, form)
            key = response.get('key')
            outcome = outcome_from_response(response, label, self.session.server_url)
        except Exception as e:
            logger.error(f"Classification of '{label}' failed: {format_error_message(e)}", exc_info=True)
            outcome = NotFound(training_key=key, reason=ReasonCode.UNAVAILABLE, message=GENERIC_FAILURE_MESSAGE)

        if isinstance(outcome, Found):
            logger.info(f"Successfully classified: {label}")
        else:
            logger.warning(outcome.message)
        return outcome

    def record_usage(
        self,
        key: Optional[str],
        rect: Dict[str, Any],
        label: str,
        train_if_necessary: bool = True
    ) -> None:
        """
        Report that an element with this label was seen at ``rect``.

        The reply is ignored and every failure is logged and discarded.

        Args:
            key: Training key returned by classify (may be None)
            rect: Native element rectangle with x, y, width and height
            label: Training label, for logging
            train_if_necessary: Whether the service may train on this sample
        """
        def _report():
            form = {
                'key': key,
                'api_key': self.session.api_key,
                'run_id': self.session.run_id,
                'x': str(int(rect['x'])),
                'y': str(int(rect['y'])),
                'width': str(int(rect['width'])),
                'height': str(int(rect['height'])),
                'multiplier': str(float(self.session.multiplier)),
                'train_if_necessary': 'true' if train_if_necessary else 'false',
            }
            self._post(ADD_ACTION_ENDPOINT, form)
            logger.debug(f"Usage recorded for '{label}' (key={key})")

        best_effort(_report, None, f"record usage for '{label}'")

    def close(self) -> None:
        """Close the HTTP session and clean up resources."""
        if hasattr(self, '_session'):
            self._session.close()
            logger.debug("Classifier client session closed")

    def __enter__(self):
        return self

    def __exit__(self, _exc_type, _exc_val, _exc_tb):
        self.close()
