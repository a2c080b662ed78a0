# -*- coding: utf-8 -*-
"""Errors produced by the promise module."""


class TimeoutError(Exception):
    """An operation could not be executed within the time allowed."""
    pass


class CancelledError(Exception):
    """The operation has been stopped before producing a result."""
    pass


class CircularAdoptionError(TypeError):
    """A Promise has been resolved with itself, or with a chain of thenables
    leading back to itself.
    """

    def __init__(self, promise):
        self.promise = promise
        TypeError.__init__(self, 'Circular adoption: %r is resolved with '
                                 'itself' % (promise,))


class RejectionValueError(Exception):
    """Raised by `Promise.result()` when the rejection reason is not an
    exception, and so can't be raised as is.

    Attributes:
        reason: the original rejection reason.
    """

    def __init__(self, reason):
        self.reason = reason
        Exception.__init__(self, 'Promise rejected with non-exception value: '
                                 '%r' % (reason,))


class AggregateError(Exception):
    """All promises passed to `Promise.any()` have been rejected.

    Attributes:
        errors (list): rejection reasons, in the order of the input promises.
    """

    def __init__(self, errors, message='No promise has been fulfilled'):
        self.errors = list(errors)
        Exception.__init__(self, message)

    def __repr__(self):
        return 'AggregateError(%r)' % (self.errors,)


class UncaughtRejectionError(Exception):
    """A Promise has been rejected while nobody listens to its rejection.

    It's never raised by the promise module: it's the value passed to the
    uncaught rejection handler (see `reporter.set_handler()`).

    Attributes:
        promise (Promise): the rejected promise.
        reason: the rejection reason.
    """

    def __init__(self, promise, reason):
        self.promise = promise
        self.reason = reason
        Exception.__init__(self, '(in promise) %r' % (reason,))
