# -*- coding: utf-8 -*-

import pytest

from autovalidate import promise


class TestReduceCoroutine(object):

    def test_reduce_two_promises_coroutine(self):
        """Use @reduce_coroutine on a generator of two fulfilled promises.

        The most common Promise-generator case: a generator who yield two
        promises. the decorated coroutine must return a Promise who resolves
        when the generator is over.

        The last promise yielded contains the "result" value.
        """

        @promise.reduce_coroutine()
        def generator():
            first_value = yield promise.Promise.resolve(1)
            assert first_value
            yield promise.Promise.resolve(2)

        p = generator()
        assert isinstance(p, promise.Promise)
        assert p.result() == 2

    def test_reduce_direct_value_coroutine(self):
        """Use @reduce_coroutine on a generator yielding non-future result.

        The last value yielded by the generator is the "return" value. In this
        scenario, it's yielded without being wrapped in a Promise.
        """

        @promise.reduce_coroutine()
        def generator():
            first_value = yield promise.Promise.resolve(1)
            assert first_value
            second_value = yield promise.Promise.resolve(2)
            assert second_value == 2
            yield 3

        p = generator()
        assert isinstance(p, promise.Promise)
        assert p.result() == 3

    def test_reduce_coroutine_with_return_value(self):
        @promise.reduce_coroutine()
        def generator(a):
            b = yield promise.Promise.resolve(2)
            return a + b

        assert generator(40).result() == 42

    def test_reduce_coroutine_without_yield(self):
        @promise.reduce_coroutine()
        def generator(use_promise):
            if use_promise:
                yield promise.Promise.resolve(None)
            return 'no yield'

        assert generator(False).result() == 'no yield'

    def test_reduce_coroutine_with_failed_promise(self):
        """Use @reduce_coroutine on a generator who yield rejected Promise

        If not caught (like in this case), the error is transmitted to the
        Promise p.
        """
        class Err(Exception):
            pass

        @promise.reduce_coroutine()
        def generator():
            first_value = yield promise.Promise.resolve(1)
            assert first_value
            yield promise.Promise.reject(Err())

        p = generator()
        assert isinstance(p, promise.Promise)
        err = p.exception(0.01)
        assert isinstance(err, Err)

    def test_reduce_coroutine_with_non_exception_rejection(self):
        @promise.reduce_coroutine()
        def generator():
            yield promise.Promise.reject('reason')

        assert generator().exception() == 'reason'

    def test_reduce_coroutine_catching_error(self):
        class Err(Exception):
            pass

        @promise.reduce_coroutine()
        def generator():
            try:
                yield promise.Promise.reject(Err())
            except Err:
                value = yield promise.Promise.resolve('recovered')
            return value

        assert generator().result() == 'recovered'

    def test_reduce_coroutine_raising_exception(self):
        """Use @reduce_coroutine on a generator who raise an Exception."""
        class Err(Exception):
            pass

        @promise.reduce_coroutine()
        def generator():
            first_value = yield promise.Promise.resolve(1)
            assert first_value
            raise Err()

        p = generator()
        with pytest.raises(Err):
            p.result()

    def test_reduce_coroutine_raising_before_first_yield(self):
        class Err(Exception):
            pass

        @promise.reduce_coroutine()
        def generator():
            raise Err()
            yield promise.Promise.resolve(1)

        with pytest.raises(Err):
            generator().result()

    def test_reduce_coroutine_with_safeguard(self, uncaught_rejections):
        @promise.reduce_coroutine(safeguard=True)
        def generator():
            yield promise.Promise.reject(ValueError())

        assert isinstance(generator().exception(), ValueError)
        assert uncaught_rejections == []

    def test_reduce_coroutine_uses_scheduler_of_first_promise(self, clock,
                                                              scheduler):
        other = promise.Scheduler(clock=clock, sleep=clock.sleep)

        @promise.reduce_coroutine()
        def generator():
            a = yield promise.Promise.resolve(1, scheduler=other)
            b = yield promise.Promise.resolve(2, scheduler=other)
            return a + b

        p = generator()
        assert p.scheduler is other
        assert p.result(timeout=1) == 3
        assert scheduler.is_idle()

    def test_reduce_coroutine_with_explicit_scheduler(self, clock):
        other = promise.Scheduler(clock=clock, sleep=clock.sleep)

        @promise.reduce_coroutine(scheduler=other)
        def generator():
            return 'direct'
            yield

        p = generator()
        assert p.scheduler is other
        assert p.result() == 'direct'
