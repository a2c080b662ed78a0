# -*- coding: utf-8 -*-
"""Network module

This module performs the HTTP requests to the data API. Requests are done
with the `requests` library; results are returned as Promises.

In case of error, the Promise is not rejected: the error message is given in
the result, ready to be displayed to the user.

Example:

    >>> with CityApiService(api_key='...') as service:
    ...     result = service.fetch('bangalore').result(10)
    ...     print(result['data'] or result['error'])
"""

from . import errors  # noqa
from .api_service import ApiService, CityApiService

__all__ = ['errors', 'ApiService', 'CityApiService']
