# -*- coding: utf-8 -*-

from . import reporter
from .decorators import wrap_promise
from .deferred import Deferred
from .errors import AggregateError, CancelledError, CircularAdoptionError, \
    RejectionValueError, TimeoutError, UncaughtRejectionError
from .promise import Promise, SettledResult
from .reduce_coroutine import reduce_coroutine
from .scheduler import get_scheduler, Scheduler, set_scheduler, TimerHandle
from .util import is_thenable

__all__ = ['is_thenable', 'reporter', 'AggregateError', 'CancelledError',
           'CircularAdoptionError', 'Deferred', 'Promise',
           'RejectionValueError', 'SettledResult', 'Scheduler', 'TimerHandle',
           'TimeoutError', 'UncaughtRejectionError', 'get_scheduler',
           'set_scheduler', 'reduce_coroutine', 'wrap_promise']
