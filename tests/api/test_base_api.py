"""Tests for the base API implementation."""

import json
from unittest.mock import MagicMock, Mock

import pytest
import requests
from requests.exceptions import ConnectionError, Timeout

from forma.api.base_api import DEFAULT_ERROR_MESSAGE, BaseAPI
from forma.error_codes import ErrorCode
from forma.exceptions import (
    ApiConnectionError,
    ApiInvalidResponseError,
    ApiResponseError,
    ApiTimeoutError,
)


def make_response(status_code=200, body=None, text=None):
    """Build a response double; ``body`` is JSON-encoded unless ``text`` is given."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response.text = text
    if body is not None:
        response.json.return_value = body
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    return response

@pytest.fixture
def mock_session():
    """Create a mock requests session."""
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.request.return_value = make_response(body={"key": "value"})
    return session

@pytest.fixture
def base_api(mock_session):
    return BaseAPI("https://api.test.com/", api_key="public-key", session=mock_session)

def test_base_api_initialization(base_api, mock_session):
    assert base_api.base_url == "https://api.test.com"
    assert base_api.timeout == (7, 20)
    assert mock_session.headers["x-api-key"] == "public-key"
    assert mock_session.headers["Content-Type"] == "application/json"

def test_default_session_never_retries():
    api = BaseAPI("https://api.test.com")
    adapter = api.session.get_adapter("https://api.test.com/api/memberships")
    assert adapter.max_retries.total == 0

def test_make_request_success(base_api, mock_session):
    result = base_api._make_request('GET', '/api/memberships', params={'gymId': 'gym-1', 'status': None})

    assert result == {"key": "value"}
    mock_session.request.assert_called_once_with(
        method='GET',
        url='https://api.test.com/api/memberships',
        params={'gymId': 'gym-1'},
        json=None,
        headers=None,
        timeout=(7, 20)
    )

def test_make_request_absolute_url_and_headers(base_api, mock_session):
    base_api._make_request(
        'POST', '', data={'gymId': 'gym-1'},
        headers={'X-API-Key': 'secret'}, url='https://other.test/activate'
    )

    kwargs = mock_session.request.call_args.kwargs
    assert kwargs['url'] == 'https://other.test/activate'
    assert kwargs['headers'] == {'X-API-Key': 'secret'}
    assert kwargs['json'] == {'gymId': 'gym-1'}

def test_error_status_uses_error_field(base_api, mock_session):
    mock_session.request.return_value = make_response(400, {"error": "Invalid gym"})

    with pytest.raises(ApiResponseError) as exc_info:
        base_api._make_request('GET', '/api/payments')

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid gym"
    assert exc_info.value.code is ErrorCode.REQUEST_FAILED

def test_server_error_without_message(base_api, mock_session):
    mock_session.request.return_value = make_response(500, {})

    with pytest.raises(ApiResponseError) as exc_info:
        base_api._make_request('GET', '/api/payments')

    assert exc_info.value.message == DEFAULT_ERROR_MESSAGE
    assert exc_info.value.code is ErrorCode.SERVER_ERROR

def test_success_false_is_an_error(base_api, mock_session):
    mock_session.request.return_value = make_response(200, {"success": False, "error": "Payment locked"})

    with pytest.raises(ApiResponseError) as exc_info:
        base_api._make_request('PATCH', '/api/payments')

    assert exc_info.value.status_code == 200
    assert str(exc_info.value) == "Payment locked"

def test_non_json_response(base_api, mock_session):
    mock_session.request.return_value = make_response(502, text="<html>Bad Gateway</html>")

    with pytest.raises(ApiInvalidResponseError) as exc_info:
        base_api._make_request('GET', '/api/memberships')

    assert exc_info.value.status_code == 502
    assert exc_info.value.code is ErrorCode.INVALID_RESPONSE

def test_empty_body_is_empty_dict(base_api, mock_session):
    mock_session.request.return_value = make_response(204)

    assert base_api._make_request('DELETE', '/api/daily-workouts') == {}

def test_non_object_body_is_wrapped(base_api, mock_session):
    mock_session.request.return_value = make_response(200, [1, 2])

    assert base_api._make_request('GET', '/api/things') == {"data": [1, 2]}

def test_timeout(base_api, mock_session):
    mock_session.request.side_effect = Timeout("read timed out")

    with pytest.raises(ApiTimeoutError) as exc_info:
        base_api._make_request('GET', '/api/memberships')

    assert exc_info.value.status_code == 0
    assert exc_info.value.code is ErrorCode.TIMEOUT

def test_connection_error(base_api, mock_session):
    mock_session.request.side_effect = ConnectionError("connection refused")

    with pytest.raises(ApiConnectionError) as exc_info:
        base_api._make_request('GET', '/api/memberships')

    assert exc_info.value.status_code == 0
    assert "connection refused" in exc_info.value.message
