# -*- coding: utf-8 -*-

from functools import wraps

from .deferred import Deferred
from .errors import RejectionValueError
from .promise import Promise
from .util import is_thenable


def reduce_coroutine(safeguard=False, scheduler=None):
    """Decorator who converts a coroutine of promises into a single promise.

    The greatest interest is the ability to write a function in an
    synchronous-like style, using many asynchronous Promises.
    Whatever is the number of Promises or async calls used, the result will
    always be an unique Promise wrapping the whole process.

    Each yielded Promise is resolved, then its value is sent back into the
    generator. If the Promise is rejected, the reason is raised inside the
    generator (wrapped into a `RejectionValueError` if it's not an
    exception).
    The generator ends the coroutine either by yielding a value who is not a
    Promise, by returning a value, or by returning nothing (then the last
    value sent is the result).

    Args:
        safeguard (boolean): if true, use `Promise.safeguard()` on the
            resulting promise.
        scheduler (Scheduler, optional): scheduler of the resulting promise.
            By default, the scheduler of the first Promise yielded, or the
            process-wide one.

    Example:

        >>> @reduce_coroutine()
        ... def get_twice(cache, name):
        ...     first = yield cache.get_data(name)
        ...     second = yield cache.get_data(name)
        ...     return first, second
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            """
            Args:
                *args
                **kwargs
            Returns:
                Promise<*>
            """
            is_done, result, error = False, None, None
            first_value = None
            try:
                # Create generator, and run it until the first yield.
                gen = func(*args, **kwargs)
                first_value = next(gen)
            except StopIteration as stop:
                is_done, result = True, stop.value
            except Exception as err:
                is_done, error = True, err

            promise_scheduler = scheduler
            if promise_scheduler is None and isinstance(first_value, Promise):
                promise_scheduler = first_value.scheduler

            df = Deferred(scheduler=promise_scheduler,
                          _name='COROUTINE %s' % func.__name__)
            if safeguard:
                df.promise.safeguard()

            if is_done:
                if error is None:
                    df.resolve(result)
                else:
                    df.reject(error)
                return df.promise

            def _call_next_or_set_result(value):
                if is_thenable(value):
                    value.then(iter_next, iter_error)
                else:
                    gen.close()
                    df.resolve(value)

            def iter_next(yielded_value):
                try:
                    next_value = gen.send(yielded_value)
                except StopIteration as stop:
                    if stop.value is not None:
                        return df.resolve(stop.value)
                    return df.resolve(yielded_value)
                except Exception as error:
                    return df.reject(error)
                _call_next_or_set_result(next_value)

            def iter_error(reason):
                if isinstance(reason, Exception):
                    raised_error = reason
                else:
                    raised_error = RejectionValueError(reason)
                try:
                    next_value = gen.throw(raised_error)
                except StopIteration as stop:
                    return df.resolve(stop.value)
                except Exception as error:
                    if error is raised_error:
                        return df.reject(reason)
                    return df.reject(error)
                _call_next_or_set_result(next_value)

            # Resolve loop.
            _call_next_or_set_result(first_value)

            return df.promise

        return wrapper
    return decorator
