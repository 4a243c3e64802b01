"""
Centralized configuration for the classifier service.

The server URL can be overridden via an explicit argument or an environment
variable, falling back to the production endpoint. A ``.env`` file in the
working directory is loaded on import.
"""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv(os.path.join(os.getcwd(), '.env'))

# Endpoint names, relative to the server URL
CLASSIFY_ENDPOINT = "classify"
ADD_ACTION_ENDPOINT = "add_action"

# Development server with a self-signed certificate
DEV_SERVER_URL = "https://sdk.dev.test.ai"

DEFAULT_LOG_LEVEL = os.getenv("AI_LOCATOR_LOG_LEVEL", "INFO")


class ServiceURLs:
    """Classifier service URL configuration with environment variable support."""

    DEFAULT_CLASSIFIER = "https://sdk.test.ai"
    ENV_VAR = "TESTAI_FLUFFY_DRAGON_URL"

    @classmethod
    def get_classifier_url(cls, override: Optional[str] = None) -> str:
        """Get classifier server URL: explicit override, then environment, then default."""
        return (override or os.getenv(cls.ENV_VAR) or cls.DEFAULT_CLASSIFIER).rstrip('/')

    @classmethod
    def endpoint(cls, server_url: str, name: str) -> str:
        """Join an endpoint name onto a server URL."""
        return f"{server_url.rstrip('/')}/{name}"

    @classmethod
    def verify_tls(cls, server_url: str) -> bool:
        """The development server is the only host whose certificate is not verified."""
        return server_url.rstrip('/') != DEV_SERVER_URL
