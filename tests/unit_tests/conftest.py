# -*- coding: utf-8 -*-

import pytest

from autovalidate.promise import reporter, Scheduler, set_scheduler


class FakeClock(object):
    """Clock whose time only moves when `sleep()` is called."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, delay):
        self.sleeps.append(delay)
        self.now += delay


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def scheduler(clock):
    """Install a new default Scheduler, driven by the fake clock."""
    scheduler = Scheduler(clock=clock, sleep=clock.sleep)
    previous = set_scheduler(scheduler)
    yield scheduler
    set_scheduler(previous)


@pytest.fixture(autouse=True)
def uncaught_rejections():
    """Collect the uncaught rejections, instead of logging them.

    Returns:
        list of UncaughtRejectionError
    """
    errors = []
    previous = reporter.set_handler(errors.append)
    yield errors
    reporter.set_handler(previous)
