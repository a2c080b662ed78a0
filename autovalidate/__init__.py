# -*- coding: utf-8 -*-

from .__version__ import __version__  # noqa

import logging
import sys

from .cache import ApiCache
from .common import config
from .common import log
from .network import CityApiService
from .promise import Promise, reduce_coroutine


@reduce_coroutine()
def _fetch_twice(cache, identifier):
    """Fetch an identifier, then get it again (from the cache this time)."""
    first = yield cache.get_data(identifier)
    second = yield cache.get_data(identifier)
    return identifier, first, second


def main(argv=None):
    """Entry point of the autovalidate client.

    Fetch each city given in argument, twice: the first result comes from the
    API, the second one from the cache.
    """
    if argv is None:
        argv = sys.argv[1:]

    # Start log and load config
    with log.Context():
        logger = logging.getLogger(__name__)

        config.load()
        log.set_debug_mode(config.get('debug_mode'))
        log.set_logs_level(config.get('log_levels'))

        if not argv:
            logger.error('Usage: autovalidate CITY [CITY ...]')
            return 2

        with CityApiService(api_key=config.get('api_key'),
                            base_url=config.get('api_url'),
                            timeout=config.get('request_timeout')) as service:
            cache = ApiCache(service, ttl=config.get('refresh_rate'))
            try:
                results = Promise.all([_fetch_twice(cache, identifier)
                                       for identifier in argv]).result()
            finally:
                cache.stop()

        for identifier, first, second in results:
            print('%s: %s (%s), then %s' % (identifier, first['data'],
                                            first['status'],
                                            second['status']))
        if cache.last_error:
            logger.error('Last fetch has failed: %s', cache.last_error)
            return 1
        return 0


if __name__ == "__main__":
    sys.exit(main())
