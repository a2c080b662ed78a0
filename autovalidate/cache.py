# -*- coding: utf-8 -*-
"""Cache of API results, refreshed at regular interval.

`ApiCache` wraps any object with a `fetch(identifier)` method returning a
Promise of ``{'data': ..., 'error': ...}`` (see `network.ApiService`). The
first request for an identifier is sent to the API; the next ones are served
from the cache. All cached identifiers are fetched again periodically, so the
cache stays fresh without the caller asking for it.

Example:

    >>> cache = ApiCache(CityApiService(), ttl=5)
    >>> cache.get_data('bangalore').result()['status']
    'Fresh'
    >>> cache.get_data('bangalore').result()['status']
    'Cached'
"""

import logging

from .common.periodic_task import PeriodicTask
from .promise import Promise

_logger = logging.getLogger(__name__)

FRESH = 'Fresh'
CACHED = 'Cached'


class ApiCache(object):
    """Time-driven cache of an API service, keyed by identifier.

    The refresh task starts at creation. If a fetch reports an error, the
    next refresh stops the task: the cached data are kept as is, until a
    new call to `set_refresh_rate()`.
    """

    def __init__(self, api_service, ttl=1.0, scheduler=None):
        """
        Args:
            api_service: object with a `fetch(identifier)` method.
            ttl (float, optional): delay between two refreshes, in seconds.
            scheduler (Scheduler, optional): scheduler running the refresh
                task and the promises.
        """
        self._api_service = api_service
        self._scheduler = scheduler
        self._cache = {}
        self._error = None
        self._refresh_task = None

        self.set_refresh_rate(ttl)

    @property
    def last_error(self):
        """str: error reported by the last fetch, or None."""
        return self._error

    def identifiers(self):
        """Returns the list of the identifiers present in cache."""
        return list(self._cache)

    def get_data(self, identifier, force=None):
        """Get the data of an identifier, from the cache or from the API.

        Args:
            identifier (str): identifier passed to the API service.
            force (bool, optional): if True, the data is fetched from the API
                even if it's in cache. By default, the API is used only if the
                identifier is not in cache.
        Returns:
            Promise<dict>: fulfilled with the keys 'data' and 'status'. The
                status is 'Fresh' if the data has just been fetched, and
                'Cached' if it comes from the cache.
        """
        if force is None:
            force = identifier not in self._cache

        if not force:
            return Promise.resolve({'data': self._cache.get(identifier),
                                    'status': CACHED},
                                   scheduler=self._scheduler)

        def on_fetched(result):
            self._cache[identifier] = result.get('data')
            self._error = result.get('error')
            return {'data': self._cache[identifier], 'status': FRESH}

        return self._api_service.fetch(identifier).then(on_fetched)

    def set_refresh_rate(self, ttl=1.0):
        """Refresh the cache every `ttl` seconds.

        The previous refresh task, if any, is stopped and replaced.

        Args:
            ttl (float, optional): delay between two refreshes, in seconds.
        """
        if self._refresh_task:
            self._refresh_task.stop()

        _logger.debug('Set cache refresh rate to %ss', ttl)
        self._refresh_task = PeriodicTask('ApiCache refresh', ttl,
                                          self._refresh,
                                          scheduler=self._scheduler)
        self._refresh_task.start(ttl)

    def refresh_now(self):
        """Refresh all cached identifiers without waiting the next period.

        Returns:
            Promise<list>: fulfilled when all identifiers are refreshed.
        """
        return self._refresh_task.apply_now()

    def stop(self):
        """Stop the refresh task. Cached data stay available."""
        self._refresh_task.stop()

    def _refresh(self, pt):
        # In case of API service error, there is no need to refetch the data.
        if self._error:
            _logger.info('Last fetch has failed (%s). Cache refresh stopped.',
                         self._error)
            pt.stop()
            return None

        _logger.debug('Refresh %d cached entries', len(self._cache))
        return Promise.all([self.get_data(identifier, True)
                            for identifier in list(self._cache)],
                           scheduler=self._scheduler)
