from __future__ import annotations


class SchedulerError(ValueError):
    """
    Base class for rejected simulation requests.

    Subclasses ValueError so callers that already catch ValueError around
    workload loading and algorithm dispatch keep working.
    """


class InvalidInput(SchedulerError):
    """The process set (or a single process record) cannot be simulated."""


class InvalidConfiguration(SchedulerError):
    """The algorithm choice or its parameters are not usable."""
