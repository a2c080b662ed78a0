# -*- coding: utf-8 -*-
"""This module defines all errors which can occur in the network module.

requests exceptions can be converted to autovalidate.network errors using the
``handler`` decorator.

These errors have a human-readable message, ready to be displayed.
They are also more verbose when displayed using 'repr()`.
"""

from functools import wraps

import requests.exceptions


class NetworkError(Exception):
    """Base class for autovalidate.network errors.

    Attributes:
        message (str): Human readable message, describing the error.
        reason (Exception): internal exception which've produced this error. It
            exposes the inner mechanisms of the network module, and should not
            be used outside of the network module. Can be None.
    """

    def __init__(self, reason=None, message=None, msg_args=None):
        """
        Args:
            reason (Exception, optional): base error
            message (str, optional): User-friendly message.
            msg_args (any, optional): Optional arguments used when formatting
                the message with the '%' operator.
        """
        self.reason = reason
        self._message = message or "A network error has occurred."
        self._msg_args = msg_args
        Exception.__init__(self)

    @property
    def message(self):
        if self._msg_args is not None:
            return self._message % self._msg_args
        return self._message

    def __repr__(self):
        return '%s("%s")' % (self.__class__.__name__, self.message)

    def __str__(self):
        return self.message


class ConnectionError(NetworkError):
    def __init__(self, error):
        NetworkError.__init__(self, error, "Unable to connect to the server.")


class TimeoutError(NetworkError):
    def __init__(self, error):
        NetworkError.__init__(self, error,
                              "The server did not respond on time.")


class InvalidResponseError(NetworkError):
    def __init__(self, error):
        NetworkError.__init__(self, error,
                              "The server has returned an invalid response.")


class HTTPError(NetworkError):
    """Base class for HTTP errors.

    The class can be displayed for debug, using ``repr(error)``.

    Attributes:
        code (int): HTTP status code
        status_text (str): HTTP status text
        request (str): representation of the request.
        response (dict or text): If the response content was in json, the
            corresponding dict, else the content as text.
        err_description (str): If the response is a JSON error, the message
            given by the server.
    """

    def __init__(self, error, message=None, msg_args=None):
        """
        Args:
            error (requests.exceptions.HTTPError): base error.
        """
        if not message:
            message = ("The server has returned an HTTP error: "
                       "%(code)s %(reason)s")
            msg_args = {"code": error.response.status_code,
                        "reason": error.response.reason}

        NetworkError.__init__(self, error, message, msg_args)

        self.code = error.response.status_code
        self.status_text = error.response.reason
        self.request = '%s %s' % (error.request.method, error.request.url)
        self.err_description = None

        try:
            self.response = self.reason.response.json()
            if isinstance(self.response, dict):
                self.err_description = self.response.get('error')
        except ValueError:
            self.response = self.reason.response.text

    def __repr__(self):
        if isinstance(self.response, dict):
            response = '\tResponse: %s' % self.err_description
        else:
            response = '\tResponse: %s' % self.response

        return '\n'.join(("HTTP Error: %s %s" % (self.code, self.status_text),
                          "\tRequest: %s" % self.request,
                          response))


class HTTPBadRequestError(HTTPError):
    def __init__(self, error):
        HTTPError.__init__(self, error, "The HTTP request is invalid.")


class HTTPUnauthorizedError(HTTPError):
    def __init__(self, error):
        HTTPError.__init__(self, error, "The API key is missing or invalid.")


class HTTPForbiddenError(HTTPError):
    def __init__(self, error):
        HTTPError.__init__(self, error, "You don't have the permission to do "
                                        "this operation.")


class HTTPNotFoundError(HTTPError):
    def __init__(self, error):
        HTTPError.__init__(self, error, "The element you're looking for has "
                                        "not been found.")


class HTTPTooManyRequestsError(HTTPError):
    def __init__(self, error):
        HTTPError.__init__(self, error, "Too many requests. Please try again "
                                        "later.")


class HTTPInternalServerError(HTTPError):
    def __init__(self, error):
        HTTPError.__init__(self, error, "The server has encountered an "
                                        "unexpected error.")


class HTTPServiceUnavailableError(HTTPError):
    def __init__(self, error):
        HTTPError.__init__(self, error, "The server is temporarily "
                                        "unavailable. Please try again later.")


_code2error = {
    400: HTTPBadRequestError,
    401: HTTPUnauthorizedError,
    403: HTTPForbiddenError,
    404: HTTPNotFoundError,
    429: HTTPTooManyRequestsError,
    500: HTTPInternalServerError,
    503: HTTPServiceUnavailableError
}


def handler(func):
    """Decorator who handles errors of the requests.

    Converts requests.exceptions.* into autovalidate.network.errors.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except requests.exceptions.ConnectionError as error:
            raise ConnectionError(error)
        except requests.exceptions.Timeout as error:
            raise TimeoutError(error)
        except requests.exceptions.HTTPError as error:
            err_class = _code2error.get(error.response.status_code, HTTPError)
            raise err_class(error)
        except requests.exceptions.InvalidJSONError as error:
            raise InvalidResponseError(error)
        except requests.exceptions.RequestException as error:
            raise NetworkError(error)

    return wrapper
