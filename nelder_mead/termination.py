# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 dairin0d https://github.com/dairin0d

import enum
import threading

from .utils import *

class TerminationReason(enum.Enum):
    NONE = 0
    CANCELED = 1
    TIMEOUT = 2
    MAX_ITERATIONS = 3
    SIMPLEX_DIAMETER = 4
    VALUE_CONVERGENCE = 5

class CancellationToken:
    """
    Cooperative cancellation flag. The solver polls it once per iteration,
    so a function evaluation in progress is never interrupted.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def is_cancellation_requested(self):
        return self._event.is_set()

def bounding_diameter(simplex):
    return simplex.bounding_diameter()

def within_tolerance(tolerance):
    "Makes a value_converged predicate: best and worst outputs within the tolerance"
    def value_converged(best, worst):
        return abs(best - worst) <= tolerance
    return value_converged

class TerminationConfig(Immutable):
    """
    Stopping criteria of a solve, fixed once created. Each criterion left as None is disabled.

    diameter_tolerance: stop when the bounding diameter of the simplex
        drops below this (i.e. the inputs are all close to each other)
    max_iterations: stop when the iteration count exceeds this
    max_duration_ms: stop when the iterations have been running longer than this
        (the evaluations of the initial simplex do not count)
    value_converged: predicate (best_output, worst_output) -> bool
    value_tolerance: shortcut for a value_converged predicate that checks
        abs(best - worst) <= value_tolerance
    """

    def __init__(self, diameter_tolerance=None, max_iterations=None, max_duration_ms=None,
            value_converged=None, value_tolerance=None):
        check_non_negative("diameter_tolerance", diameter_tolerance)
        check_non_negative("max_iterations", max_iterations)
        check_non_negative("max_duration_ms", max_duration_ms)
        check_non_negative("value_tolerance", value_tolerance)

        if (value_converged is None) and (value_tolerance is not None):
            value_converged = within_tolerance(value_tolerance)

        object.__setattr__(self, "diameter_tolerance", diameter_tolerance)
        object.__setattr__(self, "max_iterations", max_iterations)
        object.__setattr__(self, "max_duration_ms", max_duration_ms)
        object.__setattr__(self, "value_converged", value_converged)
        object.__setattr__(self, "value_tolerance", value_tolerance)

    @property
    def has_criteria(self):
        return any(value is not None for value in (self.diameter_tolerance,
            self.max_iterations, self.max_duration_ms, self.value_converged))

    def check(self, simplex, iterations, elapsed_ms, token=None):
        """
        Returns the first matching TerminationReason, in priority order:
        cancellation, timeout, iteration count, simplex size, value convergence
        """

        if (token is not None) and token.is_cancellation_requested:
            return TerminationReason.CANCELED

        if (self.max_duration_ms is not None) and (elapsed_ms > self.max_duration_ms):
            return TerminationReason.TIMEOUT

        if (self.max_iterations is not None) and (iterations > self.max_iterations):
            return TerminationReason.MAX_ITERATIONS

        if self.diameter_tolerance is not None:
            if bounding_diameter(simplex) < self.diameter_tolerance:
                return TerminationReason.SIMPLEX_DIAMETER

        if self.value_converged is not None:
            if self.value_converged(simplex.best().output, simplex.worst().output):
                return TerminationReason.VALUE_CONVERGENCE

        return TerminationReason.NONE
