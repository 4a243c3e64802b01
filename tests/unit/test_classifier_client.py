import logging
from fractions import Fraction
from unittest.mock import patch

import pytest
import requests

from ai_locator.classifier_client import ClassifierClient
from ai_locator.errors import ClassificationUnavailable
from ai_locator.outcome import GENERIC_FAILURE_MESSAGE, Found, NotFound, ReasonCode
from ai_locator.session import Session
from conftest import API_KEY, RUN_ID, SERVER_URL, make_response


class TestClassify:
    """Unit tests for ClassifierClient.classify."""

    def test_posts_form_to_classify_endpoint(self, client, found_payload):
        """Test the request fields and endpoint."""
        with patch.object(client._session, 'post', return_value=make_response(found_payload)) as mock_post:
            client.classify("login_button")

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        assert args[0] == f"{SERVER_URL}/classify"
        assert kwargs['data'] == {
            'screenshot': "c2NyZWVuc2hvdA==",
            'source': "<hierarchy/>",
            'api_key': API_KEY,
            'label': "login_button",
            'run_id': RUN_ID,
        }

    def test_success_returns_found(self, client, found_payload):
        with patch.object(client._session, 'post', return_value=make_response(found_payload)):
            outcome = client.classify("login_button")
        assert isinstance(outcome, Found)
        assert outcome.training_key == "key-42"

    def test_failure_returns_not_found(self, client):
        payload = {"success": False, "key": "k9", "message": "Please label this element"}
        with patch.object(client._session, 'post', return_value=make_response(payload)):
            outcome = client.classify("login_button")
        assert isinstance(outcome, NotFound)
        assert outcome.reason is ReasonCode.NEEDS_LABELING
        assert outcome.training_key == "k9"
        assert f"{SERVER_URL}/label/login_button" in outcome.message

    def test_page_source_failure_sends_empty_source(self, client, capability, found_payload):
        """Test that a failing page source capture does not stop classification."""
        capability.capture_page_source.side_effect = RuntimeError("no source")
        with patch.object(client._session, 'post', return_value=make_response(found_payload)) as mock_post:
            outcome = client.classify("login_button")
        assert isinstance(outcome, Found)
        assert mock_post.call_args.kwargs['data']['source'] == ""

    @pytest.mark.parametrize("response_kwargs", [
        {"status_error": requests.exceptions.HTTPError("500 Server Error")},
        {"json_error": ValueError("Expecting value")},
    ])
    def test_bad_responses_degrade_to_not_found(self, client, response_kwargs):
        with patch.object(client._session, 'post', return_value=make_response(**response_kwargs)):
            outcome = client.classify("login_button")
        assert isinstance(outcome, NotFound)
        assert outcome.reason is ReasonCode.UNAVAILABLE
        assert outcome.message == GENERIC_FAILURE_MESSAGE

    def test_connection_error_degrades_to_not_found(self, client):
        with patch.object(client._session, 'post', side_effect=requests.exceptions.ConnectionError("refused")) as mock_post:
            outcome = client.classify("login_button")
        assert isinstance(outcome, NotFound)
        assert outcome.reason is ReasonCode.UNAVAILABLE
        # No retries
        assert mock_post.call_count == 1

    def test_transport_failure_logs_classifier_hint(self, client, caplog):
        with patch.object(client._session, 'post', side_effect=requests.exceptions.ConnectionError("refused")):
            with caplog.at_level(logging.ERROR, logger="ai_locator.classifier_client"):
                client.classify("login_button")
        assert "Classifier error:" in caplog.text
        assert "Please check the server URL and API key." in caplog.text

    def test_screenshot_failure_degrades_to_not_found(self, client, capability):
        capability.capture_screenshot_base64.side_effect = RuntimeError("device gone")
        with patch.object(client._session, 'post') as mock_post:
            outcome = client.classify("login_button")
        assert isinstance(outcome, NotFound)
        mock_post.assert_not_called()

    def test_malformed_success_payload_keeps_key(self, client):
        with patch.object(client._session, 'post', return_value=make_response({"success": True, "key": "k3"})):
            outcome = client.classify("login_button")
        assert isinstance(outcome, NotFound)
        assert outcome.training_key == "k3"

    def test_response_is_closed(self, client, found_payload):
        """Test that the response context is exited after use."""
        response = make_response(found_payload)
        with patch.object(client._session, 'post', return_value=response):
            client.classify("login_button")
        response.__exit__.assert_called_once()

    def test_response_is_closed_on_error(self, client):
        response = make_response(json_error=ValueError("bad json"))
        with patch.object(client._session, 'post', return_value=response):
            client.classify("login_button")
        response.__exit__.assert_called_once()

    def test_interactive_mode_makes_no_call(self, capability):
        session = Session(api_key=API_KEY, server_url=SERVER_URL, multiplier=1.0, test_case_name="checkout")
        interactive_client = ClassifierClient(session, capability)
        with patch.object(interactive_client._session, 'post') as mock_post:
            assert interactive_client.classify("login_button") is None
        mock_post.assert_not_called()
        capability.capture_screenshot_base64.assert_not_called()


class TestRecordUsage:
    """Unit tests for ClassifierClient.record_usage."""

    def test_posts_usage_form(self, client):
        rect = {'x': 10, 'y': 20, 'width': 30, 'height': 40}
        with patch.object(client._session, 'post', return_value=make_response({})) as mock_post:
            client.record_usage("key-42", rect, "login_button", train_if_necessary=True)

        args, kwargs = mock_post.call_args
        assert args[0] == f"{SERVER_URL}/add_action"
        assert kwargs['data'] == {
            'key': "key-42",
            'api_key': API_KEY,
            'run_id': RUN_ID,
            'x': "10",
            'y': "20",
            'width': "30",
            'height': "40",
            'multiplier': "3.0",
            'train_if_necessary': "true",
        }

    def test_exact_multiplier_is_sent_as_float(self, capability):
        session = Session(api_key=API_KEY, server_url=SERVER_URL, multiplier=Fraction(18, 7), run_id=RUN_ID)
        c = ClassifierClient(session, capability)
        rect = {'x': 0, 'y': 0, 'width': 1, 'height': 1}
        with patch.object(c._session, 'post', return_value=make_response({})) as mock_post:
            c.record_usage("k", rect, "x")
        assert mock_post.call_args.kwargs['data']['multiplier'] == str(18 / 7)
        c.close()

    def test_train_flag_false(self, client):
        rect = {'x': 0, 'y': 0, 'width': 1, 'height': 1}
        with patch.object(client._session, 'post', return_value=make_response({})) as mock_post:
            client.record_usage(None, rect, "x", train_if_necessary=False)
        assert mock_post.call_args.kwargs['data']['train_if_necessary'] == "false"

    @pytest.mark.parametrize("error", [
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.Timeout("slow"),
        RuntimeError("unexpected"),
    ])
    def test_failures_are_swallowed(self, client, error):
        rect = {'x': 0, 'y': 0, 'width': 1, 'height': 1}
        with patch.object(client._session, 'post', side_effect=error):
            assert client.record_usage("k", rect, "x") is None

    def test_http_error_is_swallowed(self, client):
        rect = {'x': 0, 'y': 0, 'width': 1, 'height': 1}
        response = make_response(status_error=requests.exceptions.HTTPError("503"))
        with patch.object(client._session, 'post', return_value=response):
            client.record_usage("k", rect, "x")
        response.__exit__.assert_called_once()


class TestTransport:
    """Unit tests for the pooled HTTP channel."""

    def test_post_raises_classification_unavailable(self, client):
        with patch.object(client._session, 'post', side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(ClassificationUnavailable) as exc_info:
                client._post("classify", {})
        assert exc_info.value.details['url'] == f"{SERVER_URL}/classify"

    def test_non_object_json_is_rejected(self, client):
        with patch.object(client._session, 'post', return_value=make_response(["not", "a", "dict"])):
            with pytest.raises(ClassificationUnavailable):
                client._post("classify", {})

    def test_no_timeout_by_default(self, client, found_payload):
        with patch.object(client._session, 'post', return_value=make_response(found_payload)) as mock_post:
            client.classify("x")
        assert mock_post.call_args.kwargs['timeout'] is None

    def test_custom_timeouts(self, session, capability, found_payload):
        timed = ClassifierClient(session, capability, connection_timeout=2.0, request_timeout=10.0)
        with patch.object(timed._session, 'post', return_value=make_response(found_payload)) as mock_post:
            timed.classify("x")
        assert mock_post.call_args.kwargs['timeout'] == (2.0, 10.0)

    def test_session_configuration(self, client):
        """Test that both schemes share a pooled adapter without retries."""
        adapter = client._session.get_adapter("https://sdk.test.ai")
        assert adapter.max_retries.total == 0
        assert client._session.verify is True

    def test_dev_server_disables_tls_verification(self, capability):
        session = Session(api_key=API_KEY, server_url="https://sdk.dev.test.ai", multiplier=1.0)
        dev_client = ClassifierClient(session, capability)
        assert dev_client._session.verify is False

    def test_context_manager_closes_session(self, session, capability):
        c = ClassifierClient(session, capability)
        with patch.object(c._session, 'close') as mock_close:
            with c:
                pass
            mock_close.assert_called_once()
