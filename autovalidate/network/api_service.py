# -*- coding: utf-8 -*-

import logging
import os

import requests

from ..promise import Promise
from . import errors

_logger = logging.getLogger(__name__)


class ApiService(object):
    """Fetch a JSON document, identified by a name, from an HTTP API.

    Each call to `fetch()` performs one GET request on
    ``{base_url}/?name={identifier}``. The request itself is done when
    `fetch()` is called; only the settlement of the returned Promise is
    deferred.

    The Promise returned is never rejected: it's always fulfilled with a dict
    ``{'data': ..., 'error': ...}``. When the request fails (network error,
    HTTP error, invalid JSON, or JSON body containing an "error" key), `data`
    is None and `error` contains a human-readable message.

    Attributes:
        base_url (str): URL of the API endpoint, without trailing slash.
        timeout (float): maximum time allowed for a request, in seconds.
    """

    def __init__(self, base_url, api_key=None, session=None, timeout=10,
                 scheduler=None):
        """
        Args:
            base_url (str): URL of the API endpoint.
            api_key (str, optional): if set, sent in the 'X-Api-Key' header.
            session (requests.Session, optional): session used for the
                requests. If not set, a new session is created, and closed by
                `close()`.
            timeout (float, optional): request timeout, in seconds.
            scheduler (Scheduler, optional): scheduler of the promises.
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._api_key = api_key
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._scheduler = scheduler

    def fetch(self, identifier):
        """Fetch the data associated to an identifier.

        Args:
            identifier (str): value of the "name" query parameter.
        Returns:
            Promise<dict>: fulfilled with the keys 'data' and 'error'.
        """

        def executor(resolve, reject):
            try:
                data = self._json_request(identifier)
            except errors.HTTPError as error:
                _logger.warning('Fetch "%s" failed: %r', identifier, error)
                resolve({'data': None,
                         'error': error.err_description or error.message})
                return
            except errors.NetworkError as error:
                _logger.warning('Fetch "%s" failed: %s', identifier, error)
                resolve({'data': None, 'error': error.message})
                return

            if isinstance(data, dict) and data.get('error'):
                _logger.warning('Fetch "%s" returned an error: %s',
                                identifier, data['error'])
                resolve({'data': None, 'error': str(data['error'])})
            else:
                resolve({'data': data, 'error': None})

        return Promise(executor, scheduler=self._scheduler,
                       _name='FETCH %s' % identifier)

    @errors.handler
    def _json_request(self, identifier):
        headers = {}
        if self._api_key:
            headers['X-Api-Key'] = self._api_key

        response = self._session.get('%s/' % self.base_url,
                                     params={'name': identifier},
                                     headers=headers, timeout=self.timeout)

        _logger.log(5, 'request %s -> %s', response.url, response.status_code)

        response.raise_for_status()

        if not response.content:
            return None
        return response.json()

    def close(self):
        """Release the HTTP session, if created by this instance."""
        if self._owns_session:
            self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class CityApiService(ApiService):
    """Fetch the description of a city from the API Ninjas "city" endpoint.

    An API key is required. If not given, it's read from the environment
    variable NINJAS_API_KEY.
    """

    URL = 'https://api.api-ninjas.com/v1/city'

    def __init__(self, api_key=None, base_url=URL, **kwargs):
        if api_key is None:
            api_key = os.environ.get('NINJAS_API_KEY')
            if not api_key:
                _logger.warning('No API key set for %s', base_url)
        ApiService.__init__(self, base_url, api_key=api_key, **kwargs)
