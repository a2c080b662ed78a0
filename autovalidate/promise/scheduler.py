# -*- coding: utf-8 -*-
"""Deferred execution of the promise callbacks.

A Promise never runs a callback inside the call who registered it, nor
inside the call who settled it. Instead, the callback is handed to a
`Scheduler`, who runs it later, once the current call stack has returned to
the scheduler's loop.

Everything runs in a single thread: a callback is run to completion before
the next one starts. Callbacks deferred during the same turn are executed in
the order they have been deferred.

The scheduler also keeps a list of timers (`call_later()`), so periodic jobs
can be driven by the same loop.

Example:

    >>> scheduler = Scheduler()
    >>> scheduler.defer(print, 'later')
    >>> print('now')
    now
    >>> scheduler.run_pending()
    later
    1
"""

from collections import deque
import heapq
import itertools
import logging
import time

_logger = logging.getLogger(__name__)


class TimerHandle(object):
    """Handle of a callback scheduled by `Scheduler.call_later()`."""

    def __init__(self, when, callback, args):
        self.when = when
        self.cancelled = False
        self._callback = callback
        self._args = args

    def cancel(self):
        """Prevent the callback to be executed. No-op if already done."""
        self.cancelled = True
        self._callback = None
        self._args = None

    def _run(self):
        callback, args = self._callback, self._args
        self.cancel()
        if callback is not None:
            callback(*args)

    def __repr__(self):
        state = ' cancelled' if self.cancelled else ''
        return 'TimerHandle(when=%s%s)' % (self.when, state)


class Scheduler(object):
    """Single-threaded queue of deferred callbacks, plus timers.

    Attributes:
        clock (callable): returns the current time, in seconds.
    """

    def __init__(self, clock=time.monotonic, sleep=time.sleep):
        """
        Args:
            clock (callable, optional): monotonic clock, in seconds.
            sleep (callable, optional): function used to wait for the next
                timer. It receives the delay in seconds.
        """
        self.clock = clock
        self._sleep = sleep
        self._queue = deque()
        self._timers = []
        self._timer_sequence = itertools.count()
        self._running = False

    @property
    def pending(self):
        """Number of deferred callbacks waiting to be executed."""
        return len(self._queue)

    def defer(self, callback, *args):
        """Execute `callback(*args)` after the current turn.

        Callbacks are executed in FIFO order.
        """
        self._queue.append((callback, args))

    def call_later(self, delay, callback, *args):
        """Execute `callback(*args)` in (at least) `delay` seconds.

        Returns:
            TimerHandle: can be used to cancel the call.
        """
        handle = TimerHandle(self.clock() + max(delay, 0), callback, args)
        heapq.heappush(self._timers,
                       (handle.when, next(self._timer_sequence), handle))
        return handle

    def is_idle(self):
        """True if there is neither deferred callback nor active timer."""
        self._purge_cancelled_timers()
        return not self._queue and not self._timers

    def run_pending(self):
        """Execute all deferred callbacks, until the queue is empty.

        Callbacks deferred by a running callback are executed in the same
        call. If called from inside a callback, this method does nothing:
        the running callback must first return.

        Returns:
            int: number of callbacks executed.
        """
        if self._running:
            return 0

        count = 0
        while self._queue:
            callback, args = self._queue.popleft()
            count += 1
            self._call(callback, args)
        return count

    def _call(self, callback, args):
        self._running = True
        try:
            callback(*args)
        except Exception:
            _logger.exception('Scheduled callback %r has raised an exception',
                              callback)
        finally:
            self._running = False

    def run(self, until=None, timeout=None):
        """Run the loop: deferred callbacks first, then the due timers.

        Args:
            until (Promise, optional): if set, stops as soon as this promise
                is settled.
            timeout (float, optional): maximum time to run, in seconds. By
                default, it runs until there is nothing left to do.
        Returns:
            boolean: True if `until` is settled (or, without `until`, if the
                loop stopped because it has nothing to do); False if stopped
                by the timeout, or idle while `until` is still pending.
        Raises:
            RuntimeError: if called from inside a scheduled callback.
        """
        if self._running:
            raise RuntimeError('Scheduler.run() cannot be called from a '
                               'scheduled callback.')
        deadline = None if timeout is None else self.clock() + timeout

        while True:
            self.run_pending()
            if until is not None and not until.is_pending():
                return True

            self._purge_cancelled_timers()
            if not self._timers:
                return until is None

            now = self.clock()
            if deadline is not None and now >= deadline:
                return False
            next_when = self._timers[0][0]
            if next_when > now:
                if deadline is not None and next_when > deadline:
                    if deadline > now:
                        self._sleep(deadline - now)
                    return False
                self._sleep(next_when - now)
                continue

            __, __, handle = heapq.heappop(self._timers)
            self._call(handle._run, ())

    def _purge_cancelled_timers(self):
        while self._timers and self._timers[0][2].cancelled:
            heapq.heappop(self._timers)


_default_scheduler = Scheduler()


def get_scheduler():
    """Returns the process-wide Scheduler used by default by the Promises."""
    return _default_scheduler


def set_scheduler(scheduler):
    """Replace the process-wide Scheduler.

    Promises already created keep the scheduler they have been created with.

    Returns:
        Scheduler: the previous default scheduler.
    """
    global _default_scheduler
    previous = _default_scheduler
    _default_scheduler = scheduler
    return previous
