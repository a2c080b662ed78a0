# -*- coding: utf-8 -*-

import logging

from ..promise import CancelledError, Deferred, get_scheduler

_logger = logging.getLogger(__name__)


class PeriodicTask(object):
    """Generic service, executing a task at regular interval.

    The task is executed by the Scheduler: first right after the call to
    `start()`, then after each execution, the next execution is scheduled
    after the specified delay. The delay doesn't include the task's duration.

    Attributes:
        name (str): name of the task, used in the logs.
        delay (float): delay between two executions, in seconds. When
            modified, the new value will be used only after the next
            execution.
        context (dict): dict that can be used as a scope shared between the
            multiple executions and/or the caller.
        args (tuple): arguments passed to the task.
        kwargs (dict): keyword arguments passed to the task.

    Example:

        >>> def _task(pt, arg):
        ...     assert pt.context['value'] == 3
        ...     assert arg == 17
        >>> task = PeriodicTask('MyTask', 1, _task, 17)
        >>> task.context['value'] = 3
        >>> task.start()
        >>> task.stop()

    """

    def __init__(self, name, delay, task, *args, scheduler=None, **kwargs):
        """Constructor
        Args:
            name (str): task name.
            delay (float): Delay between two executions, in seconds
            task (Callable[[PeriodicTask, ...], T]): task to execute each
                periods. First argument is the PeriodicTask instance.
            *args (optional): arguments passed to the task.
            scheduler (Scheduler, optional): scheduler running the task.
                Default to the process-wide scheduler.
            **kwargs (optional): keywords arguments passed to the task.
        """
        self.name = name
        self.delay = delay
        self.context = {}
        self.args = args
        self.kwargs = kwargs

        self._task = task
        self._scheduler = scheduler or get_scheduler()
        self._timer = None
        self._canceled = False
        self._is_running = False
        self._apply_now = False
        self._deferred = None

    def _exec_task(self):
        df = self._deferred
        self._deferred = None
        self._is_running = True

        result, error = None, None
        try:
            result = self._task(self, *self.args, **self.kwargs)
        except Exception as err:
            error = err
            _logger.exception('Periodic task %s has raised exception',
                              self.name)
        self._is_running = False

        if self._apply_now:
            delay = 0
            self._apply_now = False
        else:
            delay = self.delay

        if not self._canceled:
            self._timer = self._scheduler.call_later(delay, self._exec_task)

        if df:
            if error is None:
                df.resolve(result)
            else:
                df.reject(error)

    def start(self, delay=0):
        """Start the task.

        Args:
            delay (float, optional): delay before the first execution, in
                seconds. By default, the first execution is immediate.
        """
        _logger.debug('Start periodic task %s', self.name)
        self._canceled = False
        self._timer = self._scheduler.call_later(delay, self._exec_task)

    def stop(self):
        """Stop the task.

        The method can be called from inside the task itself. In this case,
        the current execution is finished normally, but no other execution is
        scheduled.
        """
        _logger.debug('Stop periodic task %s', self.name)
        self._canceled = True
        if self._timer:
            self._timer.cancel()
        if self._deferred:
            self._deferred.reject(CancelledError('PeriodicTask stop now.'))
            self._deferred = None

    def is_stopped(self):
        return self._canceled

    def apply_now(self):
        """Apply the task as soon as possible.

        Note that if the task is currently running, it will wait the end, then
        another iteration will be executed immediately after that.

        The method can be called from inside the task itself.

        Returns:
            Promise[T]: resolved when the task has returned. The promise
                resolves with the value returned by the task. If the task
                raises an exception, the promise is rejected.
        """
        if self._deferred:
            # special case: twice or more apply_now() at the same time.
            return self._deferred.promise

        self._deferred = Deferred(scheduler=self._scheduler,
                                  _name='APPLY_NOW %s' % self.name)
        if self._is_running:
            # We can't stop the current task, so we set a flag to rerun as
            # soon as the task returns.
            self._apply_now = True
        else:
            if self._timer:
                self._timer.cancel()
            self._timer = self._scheduler.call_later(0, self._exec_task)

        return self._deferred.promise
