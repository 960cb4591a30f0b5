"""Tests for error classification and translation."""

import json
import socket
import threading

import pytest
import requests

from finance_client.services.error_classifier import (
    CLIENT_ERROR_MESSAGE,
    CONNECTIVITY_ERROR_MESSAGE,
    SERVER_ERROR_FALLBACK,
    ClientError,
    ConnectivityError,
    ErrorClassifier,
    ErrorType,
    ServerError,
    extract_server_message,
)


def http_error(status_code, body=None, raw=None):
    """Build the HTTPError requests raises for an error response."""
    response = requests.Response()
    response.status_code = status_code
    if raw is not None:
        response._content = raw
    else:
        response._content = json.dumps(body).encode("utf-8") if body is not None else b""
    return requests.exceptions.HTTPError(f"{status_code} Error", response=response)


@pytest.fixture
def classifier():
    return ErrorClassifier()


class TestExtractServerMessage:
    def test_message_field(self):
        assert extract_server_message({"message": "Rechnung nicht gefunden"}) == (
            "Rechnung nicht gefunden"
        )

    def test_error_field(self):
        assert extract_server_message({"error": "Ungültige Daten"}) == "Ungültige Daten"

    def test_message_preferred_over_error(self):
        payload = {"message": "Zuerst", "error": "Danach"}
        assert extract_server_message(payload) == "Zuerst"

    @pytest.mark.parametrize(
        "payload", [None, {}, {"message": ""}, {"message": 42}, "text", ["x"]]
    )
    def test_fallback(self, payload):
        assert extract_server_message(payload) == SERVER_ERROR_FALLBACK


class TestClassify:
    def test_http_error_with_response_is_server(self, classifier):
        assert classifier.classify(http_error(500)) == ErrorType.SERVER

    def test_http_error_without_response_is_client(self, classifier):
        error = requests.exceptions.HTTPError("no response")
        assert classifier.classify(error) == ErrorType.CLIENT

    @pytest.mark.parametrize(
        "exception",
        [
            requests.exceptions.ConnectionError("refused"),
            requests.exceptions.Timeout("slow"),
            requests.exceptions.ReadTimeout("slow"),
            socket.timeout("slow"),
        ],
    )
    def test_network_errors_are_connectivity(self, classifier, exception):
        assert classifier.classify(exception) == ErrorType.CONNECTIVITY

    @pytest.mark.parametrize(
        "exception",
        [
            ValueError("bad json"),
            requests.exceptions.InvalidURL("bad url"),
            TypeError("not serializable"),
        ],
    )
    def test_other_errors_are_client(self, classifier, exception):
        assert classifier.classify(exception) == ErrorType.CLIENT

    def test_statistics(self, classifier):
        classifier.classify(http_error(404))
        classifier.classify(requests.exceptions.ConnectionError())
        classifier.classify(ValueError())

        assert classifier.get_statistics() == {
            "server": 1,
            "connectivity": 1,
            "client": 1,
            "total": 3,
        }

        classifier.reset_statistics()
        assert classifier.get_statistics()["total"] == 0

    def test_statistics_from_worker_threads(self, classifier):
        def classify_many():
            for _ in range(500):
                classifier.classify(requests.exceptions.Timeout())

        threads = [threading.Thread(target=classify_many) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        stats = classifier.get_statistics()
        assert stats["connectivity"] == 4000
        assert stats["total"] == 4000


class TestTranslate:
    def test_server_error_carries_backend_message(self, classifier):
        error = classifier.translate(
            http_error(404, {"message": "Rechnung nicht gefunden"})
        )

        assert isinstance(error, ServerError)
        assert error.message == "Rechnung nicht gefunden"
        assert error.status_code == 404
        assert error.payload == {"message": "Rechnung nicht gefunden"}

    def test_server_error_uses_error_field(self, classifier):
        error = classifier.translate(http_error(400, {"error": "Betrag fehlt"}))

        assert error.message == "Betrag fehlt"

    def test_server_error_without_json_body_uses_fallback(self, classifier):
        error = classifier.translate(http_error(502, raw=b"<html>Bad Gateway</html>"))

        assert isinstance(error, ServerError)
        assert error.message == SERVER_ERROR_FALLBACK
        assert error.status_code == 502
        assert error.payload is None

    def test_connectivity_error_message(self, classifier):
        error = classifier.translate(requests.exceptions.ConnectionError("refused"))

        assert isinstance(error, ConnectivityError)
        assert error.message == CONNECTIVITY_ERROR_MESSAGE
        assert str(error) == CONNECTIVITY_ERROR_MESSAGE

    def test_client_error_message(self, classifier):
        error = classifier.translate(ValueError("boom"))

        assert isinstance(error, ClientError)
        assert error.message == CLIENT_ERROR_MESSAGE

    def test_translated_errors_pass_through(self, classifier):
        original = ServerError("Schon übersetzt", status_code=409)

        assert classifier.translate(original) is original
        assert classifier.get_statistics()["total"] == 0


class TestErrorDescription:
    def test_http_description(self, classifier):
        description = classifier.get_error_description(http_error(503))
        assert description == "Server error (HTTP 503) - server"

    def test_timeout_description(self, classifier):
        description = classifier.get_error_description(
            requests.exceptions.Timeout("slow")
        )
        assert description == "Network timeout error - connectivity"

    def test_generic_description(self, classifier):
        description = classifier.get_error_description(KeyError("data"))
        assert description == "KeyError: 'data' - client"
