# -*- coding: utf-8 -*-
"""Report of the rejected promises nobody listens to.

When a Promise is rejected while no rejection handler has been registered
(via `then()` or `catch()`), the error would be silently lost. Instead, the
Promise calls `report()`, who transmits an `UncaughtRejectionError` to the
process-wide handler.

The default handler logs the error. It can be replaced:

    >>> def on_uncaught(error):
    ...     print('Uncaught: %r' % error.reason)
    >>> previous = set_handler(on_uncaught)
"""

import logging

from .errors import UncaughtRejectionError

_logger = logging.getLogger(__name__)


def _log_uncaught_rejection(error):
    reason = error.reason
    if isinstance(reason, BaseException):
        _logger.error('[UNCAUGHT] %r', error.promise,
                      exc_info=(type(reason), reason, reason.__traceback__))
    else:
        _logger.error('[UNCAUGHT] %r rejected with %r', error.promise, reason)


_handler = _log_uncaught_rejection


def set_handler(handler):
    """Install a new handler for the uncaught rejections.

    Args:
        handler (callable): receives an `UncaughtRejectionError` as only
            argument.
    Returns:
        callable: the previous handler.
    """
    global _handler
    previous = _handler
    _handler = handler
    return previous


def reset_handler():
    """Restore the default handler, who logs the errors."""
    set_handler(_log_uncaught_rejection)


def report(promise, reason):
    """Send an uncaught rejection to the handler.

    Errors raised by the handler are logged, and never propagated.
    """
    error = UncaughtRejectionError(promise, reason)
    try:
        _handler(error)
    except Exception:
        _logger.exception('Uncaught rejection handler has raised an '
                          'exception')
