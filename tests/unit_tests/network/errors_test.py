# -*- coding: utf-8 -*-

import pytest
import requests

from autovalidate.network import errors


def _http_error(code, reason, content):
    response = requests.Response()
    response.status_code = code
    response.reason = reason
    response._content = content
    response.request = requests.Request('GET', 'http://localhost/').prepare()
    return requests.exceptions.HTTPError(response=response)


def _raise(error):
    @errors.handler
    def f():
        raise error
    return f


class TestErrorHandler(object):

    def test_no_error(self):
        assert errors.handler(lambda x: x * 2)(21) == 42

    @pytest.mark.parametrize('error, expected_class', [
        (requests.exceptions.ConnectionError(), errors.ConnectionError),
        (requests.exceptions.ReadTimeout(), errors.TimeoutError),
        (requests.exceptions.InvalidJSONError(), errors.InvalidResponseError),
        (requests.exceptions.TooManyRedirects(), errors.NetworkError),
    ])
    def test_requests_errors(self, error, expected_class):
        with pytest.raises(expected_class) as exc_info:
            _raise(error)()
        assert exc_info.value.reason is error

    @pytest.mark.parametrize('code, expected_class', [
        (400, errors.HTTPBadRequestError),
        (401, errors.HTTPUnauthorizedError),
        (403, errors.HTTPForbiddenError),
        (404, errors.HTTPNotFoundError),
        (429, errors.HTTPTooManyRequestsError),
        (500, errors.HTTPInternalServerError),
        (503, errors.HTTPServiceUnavailableError),
        (418, errors.HTTPError),
    ])
    def test_http_errors(self, code, expected_class):
        with pytest.raises(expected_class) as exc_info:
            _raise(_http_error(code, 'Reason', b'{}'))()
        assert type(exc_info.value) is expected_class
        assert exc_info.value.code == code


class TestHTTPError(object):

    def test_json_description(self):
        error = errors.HTTPError(_http_error(400, 'Bad Request',
                                             b'{"error": "Missing name"}'))
        assert error.err_description == 'Missing name'
        assert error.response == {'error': 'Missing name'}
        assert error.request == 'GET http://localhost/'
        assert 'Missing name' in repr(error)

    def test_text_response(self):
        error = errors.HTTPError(_http_error(502, 'Bad Gateway', b'oops'))
        assert error.err_description is None
        assert error.response == 'oops'
        assert error.message == 'The server has returned an HTTP error: ' \
                                '502 Bad Gateway'
        assert str(error) == error.message


class TestNetworkError(object):

    def test_message_with_args(self):
        error = errors.NetworkError(message='Error %s', msg_args=('foo',))
        assert error.message == 'Error foo'
        assert repr(error) == 'NetworkError("Error foo")'

    def test_default_message(self):
        assert str(errors.NetworkError()) == 'A network error has occurred.'
