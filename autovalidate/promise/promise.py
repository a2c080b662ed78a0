# -*- coding: utf-8 -*-

from collections import namedtuple
from functools import partial
import logging

from . import reporter
from .errors import AggregateError, CircularAdoptionError, \
    RejectionValueError, TimeoutError
from .scheduler import get_scheduler
from .util import is_thenable

_logger = logging.getLogger(__name__)


SettledResult = namedtuple('SettledResult', ['state', 'value', 'reason'])
SettledResult.__doc__ = """Outcome of one promise, as given by all_settled().

Attributes:
    state (str): either `Promise.FULFILLED` or `Promise.REJECTED`.
    value: the result, if fulfilled. None otherwise.
    reason: the rejection reason, if rejected. None otherwise.
"""


class Promise(object):
    """It represents an operation expected to be completed in the future.

    A Promise is used for asynchronous computation. It contains a value not yet
    known when the Promise is created. It allows to set callbacks who will be
    called as soon as the result is known. It's a "promise" of a future value.

    Callbacks are never called synchronously: they are always executed by the
    Scheduler, after the call who registered them (or who settled the
    Promise) has returned. Callbacks registered on the same Promise are called
    in the order of registration.

    A Promise settled with another Promise (or with any object with a `then`
    method) adopts its state: it's settled only when the inner one is.
    Rejection reasons are never adopted: they are transmitted as is.
    """

    PENDING = 'pending'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'

    def __init__(self, executor, scheduler=None, _name=None, _previous=None):
        """Constructor of the Promise.

        Generate the two callbacks for the executor, then call the `executor`.
        It means the executor will be fully executed before the the constructor
        returns.
        If the executor raises an exception, it's caught and the Promise is
        rejected with this exception.

        Only the first call to one of the two callbacks is taken into account.

        Args:
            executor (callable): Takes 2 callable arguments:
                The first one, `on_fulfilled()` should be called when the
                Promise is fulfilled (ie the tasks is done) and must accept the
                result's value as its only argument.
                The second, `on_rejected()`, should be called when an error
                occurs. Its argument is the rejection reason, usually an
                instance of `Exception`.
            scheduler (Scheduler, optional): scheduler running the callbacks.
                Default to the process-wide scheduler.
            _name (str): if set, name used when converted to text.
        """

        self._state = self.PENDING
        self._value = None
        self._scheduler = scheduler or get_scheduler()
        self._name = _name or getattr(executor, '__name__', '???')
        self._previous = _previous
        self._adopted = None
        self._locked = False
        self._handled = False

        self._callbacks = []
        self._errbacks = []

        def on_fulfilled(value):
            if self._locked:
                _logger.warning('Try to fulfill Promise %r already resolved. '
                                'New result will be ignored: %r', self, value)
                return
            self._locked = True
            if isinstance(value, Promise):
                # The rejection, if any, is transferred to this promise.
                value._handled = True
            self._scheduler.defer(self._resolve, value)

        def on_rejected(reason):
            if self._locked:
                _logger.warning('Try to reject Promise %r already resolved. '
                                'New error will be ignored: %r', self, reason)
                return
            self._locked = True
            self._scheduler.defer(self._reject, reason)

        try:
            executor(on_fulfilled, on_rejected)
        except Exception as error:
            on_rejected(error)

    @property
    def scheduler(self):
        """Scheduler: scheduler running the callbacks of this promise."""
        return self._scheduler

    @property
    def state(self):
        """str: one of PENDING, FULFILLED or REJECTED."""
        return self._state

    def is_pending(self):
        return self._state == self.PENDING

    def is_fulfilled(self):
        return self._state == self.FULFILLED

    def is_rejected(self):
        return self._state == self.REJECTED

    def result(self, timeout=None):
        """Run the scheduler until the promise is settled, and returns it.

        Args:
            timeout (float, optional): if set, maximum time to wait the promise
                to be fulfilled. By default, it waits as long as the scheduler
                has something to do.
        Returns:
            *: value encapsulated, defined by the operation.
        Raises:
            TimeoutError: if the promise is not settled within the delay, or
                if it can't be settled anymore.
            RejectionValueError: if the promise is rejected with a value who
                is not an exception.
            *: If the promise is rejected, the rejection cause is raised.
        """
        self._scheduler.run(until=self, timeout=timeout)

        if self._state == self.PENDING:
            raise TimeoutError()
        elif self._state == self.REJECTED:
            if isinstance(self._value, BaseException):
                raise self._value
            raise RejectionValueError(self._value)
        return self._value

    def exception(self, timeout=None):
        """Run the scheduler until the promise is settled; returns its error.

        Args:
            timeout (float, optional): if set, maximum time to wait the promise
                to be rejected. By default, it waits as long as the scheduler
                has something to do.
        Returns:
            *: the reason of the rejection of the Promise.
            None: if the promise is fulfilled.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
        """
        self._scheduler.run(until=self, timeout=timeout)

        if self._state == self.PENDING:
            raise TimeoutError()
        elif self._state == self.REJECTED:
            return self._value
        return None

    def then(self, on_fulfilled=None, on_rejected=None):
        """Create a new promise from callbacks called when this one is settled.

        If the promise is fulfilled, the `on_fulfilled` callback will be
        called. Otherwise (the promise has been rejected), the `on_rejected`
        callback is called.
        In any case, the callback will define the state of the returned
        Promise. If the callback raises an exception, the new Promise is
        rejected. The callback can returns:
        - A value: the new promise will be fulfilled with this value.
        - Another Promise, or any object with a `then` method: when fulfilled
            or rejected, will transfer its status (state and result/error) to
            the Promise returned by this method.

        If a callback is not defined, the state of the "self" promise is
        transferred at the new promise (the state and the value/error).

        Args:
            on_fulfilled (callable, optional):  This callback will receive the
                result of the original promise as argument.
            on_rejected (callable, optional): This callback will receive the
                rejection reason of the original promise as argument.
        Returns:
            Promise<*>: new promise depending of self.
        """

        def chained_promise(fulfill, reject):

            def callback(value):
                if on_fulfilled is None:
                    return fulfill(value)
                try:
                    new_value = on_fulfilled(value)
                except Exception as error:
                    return reject(error)
                fulfill(new_value)

            def errback(reason):
                if on_rejected is None:
                    return reject(reason)
                try:
                    new_value = on_rejected(reason)
                except Exception as error:
                    return reject(error)
                fulfill(new_value)

            self._add_callbacks(callback, errback)

        if not on_rejected:
            name = '%s' % getattr(on_fulfilled, '__name__', '???')
        elif not on_fulfilled:
            name = '<None, %s>' % getattr(on_rejected, '__name__', '???')
        else:
            name = '<%s, %s>' % (getattr(on_fulfilled, '__name__', '???'),
                                 getattr(on_rejected, '__name__', '???'))
        return Promise(chained_promise, scheduler=self._scheduler, _name=name,
                       _previous=self)

    def catch(self, on_rejected):
        """Create a new promise with a callback called when an error occurs.

        Alias of `self.then(None, on_rejected)`

        Args:
            on_rejected (callable): will be called with the rejection reason,
                if `self` is rejected.
        returns:
            Promise<*>: new Promise chained to `self`. If `self` is fulfilled,
                the promised value will be the same as `self`. Otherwise, the
                value returned by the `on_rejected()` callback.
        """
        return self.then(None, on_rejected)

    def finally_(self, on_finally):
        """Create a new promise with a callback called in all cases.

        `on_finally()` is called without argument, when `self` is settled. Its
        return value is ignored: the new Promise is settled exactly like
        `self`. If `on_finally()` raises an exception, the new Promise is
        rejected with it.

        Args:
            on_finally (callable): callback without argument.
        Returns:
            Promise<*>: new Promise chained to `self`.
        """

        def chained_promise(fulfill, reject):

            def callback(value):
                try:
                    on_finally()
                except Exception as error:
                    return reject(error)
                fulfill(value)

            def errback(reason):
                try:
                    on_finally()
                except Exception as error:
                    return reject(error)
                reject(reason)

            self._add_callbacks(callback, errback)

        name = '<finally %s>' % getattr(on_finally, '__name__', '???')
        return Promise(chained_promise, scheduler=self._scheduler, _name=name,
                       _previous=self)

    def safeguard(self):
        """Catch all errors and log them with the most details possible.

        This method is aimed to protect the program from uncaught rejected
        Promise. If no error handler has been set (via then() or catch()), the
        rejection is sent to the uncaught rejection handler (see the
        `reporter` module).
        Calling `safeguard()` after all chains are set will catch these errors,
        and log them as ERROR with the maximum of details possible.
        """
        def guard(reason):
            if isinstance(reason, BaseException):
                _logger.error('[SAFEGUARD] %r', self, exc_info=(
                    type(reason), reason, reason.__traceback__))
            else:
                _logger.error('[SAFEGUARD] %r rejected with %r', self, reason)

        self._add_callbacks(None, guard)

    def __repr__(self):
        return 'Promise(%s)' % self._inner_print()

    def _inner_print(self):
        chain = []
        promise = self
        while promise is not None:
            if promise._state == self.REJECTED:
                state = 'R'
            elif promise._state == self.FULFILLED:
                state = 'F'
            else:
                state = 'P'
            chain.append('%s %s' % (promise._name, state))
            promise = promise._previous
        return ' -> '.join(reversed(chain))

    @classmethod
    def resolve(cls, value, scheduler=None):
        """Create a promise who resolves the selected value.

        Args:
            value: result of the promise. If it's a Promise running on the
                same scheduler, it's returned as is. If it's another
                thenable, the new Promise adopts its state.
            scheduler (Scheduler, optional): by default, the scheduler of
                `value` if it's a Promise, or the process-wide one.
        Returns:
            Promise: new Promise fulfilled (soon), containing the value
                passed in parameter.
        """
        if isinstance(value, Promise) and \
                scheduler in (None, value._scheduler):
            return value
        return cls(lambda ok, error: ok(value), scheduler=scheduler,
                   _name='RESOLVE')

    @classmethod
    def reject(cls, reason, scheduler=None):
        """Create a Promise rejected for the reason specified.

        Args:
            reason: rejection reason, usually an Exception.
            scheduler (Scheduler, optional)
        Returns:
            Promise: new Promise rejected (soon).
        """
        return cls(lambda ok, error: error(reason), scheduler=scheduler,
                   _name='REJECT')

    @classmethod
    def all(cls, promises, scheduler=None):
        """Create a Promise who wait a list of promises to be all fulfilled.

        The resulting Promise resolve when all of the promises in the list are
        resolved, and returns a list of all the resulting values, keeping the
        order of the promise list.
        If a promise is rejected, then the resulting promise is rejected with
        the same reason, and all results from other promises are ignored.

        Args:
            promises (iterable): promises, or plain values.
            scheduler (Scheduler, optional)
        Returns:
            Promise<list>: resulting promise, fulfilled when all promises are
                fulfilled, or rejected when one of the promises is rejected.
        """
        promises, scheduler = cls._as_promises(promises, scheduler)
        if not promises:
            return cls.resolve([], scheduler=scheduler)

        remaining_tasks = len(promises)
        results = [None] * len(promises)
        has_error = False

        def executor(resolve, reject):
            def resolve_one_promise(index, value):
                nonlocal remaining_tasks
                if has_error:
                    return
                results[index] = value
                remaining_tasks -= 1
                if remaining_tasks == 0:
                    resolve(results)

            def reject_one_promise(reason):
                nonlocal has_error
                if has_error:
                    return
                has_error = True
                reject(reason)

            for index, p in enumerate(promises):
                p.then(partial(resolve_one_promise, index), reject_one_promise)

        return cls(executor, scheduler=scheduler, _name='ALL')

    @classmethod
    def all_settled(cls, promises, scheduler=None):
        """Create a Promise who wait a list of promises to be all settled.

        The resulting Promise is never rejected. It resolves when all of the
        promises are either fulfilled or rejected, with the list of their
        outcomes, keeping the order of the promise list.

        Args:
            promises (iterable): promises, or plain values.
            scheduler (Scheduler, optional)
        Returns:
            Promise<list of SettledResult>
        """
        promises, scheduler = cls._as_promises(promises, scheduler)
        if not promises:
            return cls.resolve([], scheduler=scheduler)

        remaining_tasks = len(promises)
        results = [None] * len(promises)

        def executor(resolve, reject):
            def settle_one_promise(index, outcome):
                nonlocal remaining_tasks
                results[index] = outcome
                remaining_tasks -= 1
                if remaining_tasks == 0:
                    resolve(results)

            def on_fulfilled(index, value):
                settle_one_promise(
                    index, SettledResult(cls.FULFILLED, value, None))

            def on_rejected(index, reason):
                settle_one_promise(
                    index, SettledResult(cls.REJECTED, None, reason))

            for index, p in enumerate(promises):
                p.then(partial(on_fulfilled, index),
                       partial(on_rejected, index))

        return cls(executor, scheduler=scheduler, _name='ALL_SETTLED')

    @classmethod
    def race(cls, promises, scheduler=None):
        """Run all promises, then resolve or reject with the fastest Promise.

        Run all promises given in argument, and returns a new Promise. The
        resulting Promise will be settled as soon as the one the running
        Promises is done. Result value or rejection reason of the finished
        promise are transmitted.
        All other Promise result's will be ignored.
        With an empty list, the resulting Promise stays pending forever.

        Args:
            promises (iterable): list of promises to run at the same time.
            scheduler (Scheduler, optional)
        Returns:
            Promise: a promise
        """
        promises, scheduler = cls._as_promises(promises, scheduler)
        is_settled = False

        def executor(resolve, reject):
            def resolve_once(value):
                nonlocal is_settled
                if is_settled:
                    return
                is_settled = True
                resolve(value)

            def reject_once(reason):
                nonlocal is_settled
                if is_settled:
                    return
                is_settled = True
                reject(reason)

            for p in promises:
                p.then(resolve_once, reject_once)

        return cls(executor, scheduler=scheduler, _name='RACE')

    @classmethod
    def any(cls, promises, scheduler=None):
        """Create a Promise fulfilled by the first fulfilled promise.

        Rejections are ignored, unless all the promises are rejected. In this
        case, the resulting Promise is rejected with an `AggregateError`
        containing all the reasons, in the order of the promise list.

        Args:
            promises (iterable): promises, or plain values.
            scheduler (Scheduler, optional)
        Returns:
            Promise: a promise
        """
        promises, scheduler = cls._as_promises(promises, scheduler)
        if not promises:
            return cls.reject(AggregateError([]), scheduler=scheduler)

        remaining_tasks = len(promises)
        errors = [None] * len(promises)
        is_fulfilled = False

        def executor(resolve, reject):
            def resolve_once(value):
                nonlocal is_fulfilled
                if is_fulfilled:
                    return
                is_fulfilled = True
                resolve(value)

            def reject_one_promise(index, reason):
                nonlocal remaining_tasks
                errors[index] = reason
                remaining_tasks -= 1
                if remaining_tasks == 0:
                    reject(AggregateError(errors))

            for index, p in enumerate(promises):
                p.then(resolve_once, partial(reject_one_promise, index))

        return cls(executor, scheduler=scheduler, _name='ANY')

    @classmethod
    def _as_promises(cls, values, scheduler):
        """Convert the values into promises, all on the same scheduler.

        If no scheduler is given, the one of the first Promise is used.

        Returns:
            tuple (list of Promise, Scheduler)
        """
        values = list(values)
        if scheduler is None:
            scheduler = next((value._scheduler for value in values
                              if isinstance(value, Promise)), None)
        return ([cls.resolve(value, scheduler=scheduler) for value in values],
                scheduler)

    @staticmethod
    def _exec_callback(callback, value):
        try:
            callback(value)
        except Exception:
            _logger.exception('Promise callback %r raise an exception!',
                              callback)

    def _add_callbacks(self, callback, errback):
        """Register a callback and an errback. Both are optional.

        If the Promise is already settled, the matching one is deferred.
        """
        if errback is not None:
            self._handled = True
        if self._state == self.PENDING:
            if callback is not None:
                self._callbacks.append(callback)
            if errback is not None:
                self._errbacks.append(errback)
        elif self._state == self.FULFILLED:
            if callback is not None:
                self._scheduler.defer(self._exec_callback, callback,
                                      self._value)
        elif errback is not None:
            self._scheduler.defer(self._exec_callback, errback, self._value)

    def _resolve(self, value):
        if self._state != self.PENDING:
            return

        if is_thenable(value):
            if self._is_adoption_cycle(value):
                return self._reject(CircularAdoptionError(self))
            return self._adopt(value)

        self._settle(self.FULFILLED, value)

    def _reject(self, reason):
        if self._state != self.PENDING:
            return
        self._settle(self.REJECTED, reason)

    def _is_adoption_cycle(self, thenable):
        visited = set()
        current = thenable
        while isinstance(current, Promise) and id(current) not in visited:
            if current is self:
                return True
            visited.add(id(current))
            current = current._adopted
        return False

    def _adopt(self, thenable):
        """Follow the state of `thenable`, until it's settled."""
        self._adopted = thenable
        is_called = False

        def adopt_value(value):
            nonlocal is_called
            if is_called:
                return
            is_called = True
            self._scheduler.defer(self._resolve, value)

        def adopt_reason(reason):
            nonlocal is_called
            if is_called:
                return
            is_called = True
            self._scheduler.defer(self._reject, reason)

        if isinstance(thenable, Promise):
            thenable._add_callbacks(adopt_value, adopt_reason)
            return

        try:
            thenable.then(adopt_value, adopt_reason)
        except Exception as error:
            adopt_reason(error)

    def _settle(self, state, value):
        self._state = state
        self._value = value
        self._adopted = None

        if state == self.FULFILLED:
            callbacks = self._callbacks
        else:
            callbacks = self._errbacks
            if not self._handled:
                self._scheduler.defer(self._report_if_unhandled)

        # Free the references. Callbacks added from now are deferred.
        self._callbacks = None
        self._errbacks = None

        for callback in callbacks:
            self._exec_callback(callback, value)

    def _report_if_unhandled(self):
        # A handler may have been registered during the settlement turn, by
        # a promise adopting this one.
        if not self._handled:
            reporter.report(self, self._value)
