"""Tests for the backend HTTP client."""

import json
from unittest.mock import Mock

import pytest
import requests

from finance_client.services.api_client import ApiClient, unwrap_envelope
from finance_client.services.error_classifier import (
    ClientError,
    ConnectivityError,
    ServerError,
)
from finance_client.services.response_cache import ResponseCache

BASE_URL = "http://backend.test/api"


def make_response(status_code=200, body=None, raw=None):
    """Build a real requests.Response with the given body."""
    response = requests.Response()
    response.status_code = status_code
    if raw is not None:
        response._content = raw
    elif body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = b""
    return response


@pytest.fixture
def session():
    session = Mock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def client(session):
    return ApiClient(BASE_URL, cache=ResponseCache(), session=session, timeout=5)


class TestUnwrapEnvelope:
    @pytest.mark.parametrize(
        "body,expected",
        [
            ({"data": [1, 2]}, [1, 2]),
            ({"data": []}, []),
            ({"data": 0}, 0),
            ({"data": None}, None),
            ({"success": True}, {"success": True}),
            ([{"_id": "1"}], [{"_id": "1"}]),
            (None, None),
        ],
    )
    def test_unwrap(self, body, expected):
        assert unwrap_envelope(body) == expected


class TestGet:
    def test_get_sends_request_and_unwraps(self, client, session):
        session.request.return_value = make_response(body={"data": [{"_id": "r1"}]})

        result = client.get("/finanzen/rechnungen", {"status": "offen", "jahr": None})

        assert result == [{"_id": "r1"}]
        session.request.assert_called_once_with(
            "GET",
            f"{BASE_URL}/finanzen/rechnungen",
            params={"status": "offen"},
            json=None,
            timeout=5,
        )

    def test_empty_data_list_is_not_an_error(self, client, session):
        session.request.return_value = make_response(body={"data": []})

        assert client.get("/finanzen/rechnungen") == []

    def test_second_read_served_from_cache(self, client, session):
        session.request.return_value = make_response(body={"data": {"total": 1}})

        first = client.get("/finanzen/uebersicht", {"a": 1, "b": 2})
        second = client.get("/finanzen/uebersicht", {"b": 2, "a": 1})

        assert first == second == {"total": 1}
        assert session.request.call_count == 1

    def test_use_cache_false_always_fetches(self, client, session):
        session.request.return_value = make_response(body={"data": []})

        client.get("/finanzen/suche", {"q": "x"}, use_cache=False)
        client.get("/finanzen/suche", {"q": "x"}, use_cache=False)

        assert session.request.call_count == 2
        assert len(client.cache) == 0

    def test_empty_body_is_none(self, client, session):
        session.request.return_value = make_response(status_code=204)

        assert client.get("/finanzen/rechnungen/1") is None

    def test_failed_read_is_not_cached(self, client, session):
        session.request.side_effect = [
            make_response(500, {"message": "Datenbankfehler"}),
            make_response(body={"data": [1]}),
        ]

        with pytest.raises(ServerError):
            client.get("/finanzen/rechnungen")

        assert len(client.cache) == 0
        assert client.get("/finanzen/rechnungen") == [1]


class TestErrorTranslation:
    def test_server_error(self, client, session):
        session.request.return_value = make_response(
            404, {"message": "Rechnung nicht gefunden"}
        )

        with pytest.raises(ServerError) as exc_info:
            client.get("/finanzen/rechnungen/missing")

        assert exc_info.value.message == "Rechnung nicht gefunden"
        assert exc_info.value.status_code == 404
        assert isinstance(exc_info.value.__cause__, requests.exceptions.HTTPError)

    def test_connectivity_error(self, client, session):
        session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(ConnectivityError):
            client.get("/finanzen/rechnungen")

    def test_timeout_is_connectivity_error(self, client, session):
        session.request.side_effect = requests.exceptions.ReadTimeout("slow")

        with pytest.raises(ConnectivityError):
            client.post("/finanzen/rechnungen", {"gesamtbetrag": 1})

    def test_invalid_json_is_client_error(self, client, session):
        session.request.return_value = make_response(raw=b"<html>ok</html>")

        with pytest.raises(ClientError):
            client.get("/finanzen/rechnungen")

    def test_single_attempt_only(self, client, session):
        session.request.side_effect = requests.exceptions.ConnectionError()

        with pytest.raises(ConnectivityError):
            client.get("/finanzen/rechnungen")

        assert session.request.call_count == 1


class TestWrites:
    @pytest.mark.parametrize("method", ["post", "put", "delete"])
    def test_write_clears_cache(self, client, session, method):
        session.request.return_value = make_response(body={"data": [1]})
        client.get("/finanzen/rechnungen")
        assert len(client.cache) == 1

        getattr(client, method)("/finanzen/rechnungen/1", {"status": "bezahlt"})

        assert len(client.cache) == 0
        client.get("/finanzen/rechnungen")
        assert session.request.call_count == 3

    def test_failed_write_still_clears_cache(self, client, session):
        session.request.side_effect = [
            make_response(body={"data": [1]}),
            make_response(400, {"error": "Ungültig"}),
        ]
        client.get("/finanzen/rechnungen")

        with pytest.raises(ServerError) as exc_info:
            client.post("/finanzen/rechnungen", {})

        assert exc_info.value.message == "Ungültig"
        assert len(client.cache) == 0

    def test_post_sends_json_body(self, client, session):
        session.request.return_value = make_response(201, {"data": {"_id": "new"}})

        result = client.post("/finanzen/rechnungen", {"gesamtbetrag": "500"})

        assert result == {"_id": "new"}
        session.request.assert_called_once_with(
            "POST",
            f"{BASE_URL}/finanzen/rechnungen",
            params=None,
            json={"gesamtbetrag": "500"},
            timeout=5,
        )


class TestClientSetup:
    def test_get_binary_is_not_cached(self, client, session):
        session.request.return_value = make_response(raw=b"col1;col2\n")

        assert client.get_binary("/finanzen/export/rechnungen") == b"col1;col2\n"
        assert len(client.cache) == 0

    def test_from_config(self, test_config):
        client = ApiClient.from_config(test_config)

        assert client.base_url == "http://backend.test/api"
        assert client.timeout == 5.0
        assert client.cache.ttl_seconds == 300.0
        assert client.session.headers["Authorization"] == "Bearer test-token"
        client.close()

    def test_base_url_join(self, session):
        client = ApiClient("http://backend.test/api/", session=session)

        assert client._url("/finanzen") == "http://backend.test/api/finanzen"

    def test_context_manager_closes_session(self, session):
        with ApiClient(BASE_URL, session=session):
            pass

        session.close.assert_called_once()
