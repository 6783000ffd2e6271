# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 dairin0d https://github.com/dairin0d

import time
import logging

import numpy as np

from .utils import *
from .simplex import Direction, SimplexPoint, OrderedSimplex
from .transformation import TransformationConfig, SimplexTransformer, Variant
from .termination import TerminationConfig, TerminationReason

logger = logging.getLogger(__name__)

class IterationInfo(Immutable):
    "Passed to the iteration listeners after each completed iteration"

    __slots__ = ("simplex", "iteration", "action", "elapsed_ms")

    def __init__(self, simplex, iteration, action, elapsed_ms):
        object.__setattr__(self, "simplex", simplex)
        object.__setattr__(self, "iteration", iteration)
        object.__setattr__(self, "action", action)
        object.__setattr__(self, "elapsed_ms", elapsed_ms)

    def __repr__(self):
        return (f"IterationInfo(iteration={self.iteration}, action={self.action}, "
            f"elapsed_ms={self.elapsed_ms}, best={self.simplex.best()!r})")

class Result(Immutable):
    __slots__ = ("inputs", "output", "iterations_run", "elapsed_ms", "termination_reason")

    def __init__(self, inputs, output, iterations_run, elapsed_ms, termination_reason):
        object.__setattr__(self, "inputs", frozen(inputs))
        object.__setattr__(self, "output", output)
        object.__setattr__(self, "iterations_run", iterations_run)
        object.__setattr__(self, "elapsed_ms", elapsed_ms)
        object.__setattr__(self, "termination_reason", termination_reason)

    @classmethod
    def from_point(cls, point, iterations_run, elapsed_ms, termination_reason):
        return cls(point.inputs, point.output, iterations_run, elapsed_ms, termination_reason)

    def __repr__(self):
        return (f"Result(inputs={list(self.inputs)}, output={self.output!r}, "
            f"iterations_run={self.iterations_run}, elapsed_ms={self.elapsed_ms}, "
            f"termination_reason={self.termination_reason})")

def default_steps(x0):
    # Same perturbation as the 1.00025 * x (or 0.05 for zeros) of the usual initial simplex
    steps = 0.00025 * x0
    steps[steps == 0] = 0.05
    return steps

class NelderMead:
    """
    Derivative-free optimization with the Nelder-Mead simplex method.

    function: f(x) -> output, where x is a read-only float array and the
        outputs can be compared with < and > (floats, tuples, ...)
    initial_guess: starting point (N-dimensional vector)
    step_sizes: offset of each additional initial vertex from the guess,
        along the corresponding axis (derived from the guess if None)
    lower_bounds, upper_bounds: box constraints, None means unbounded
    termination_config: TerminationConfig with the stopping criteria
    transformation_config: TransformationConfig, defaults to (1, 2, 0.5, 0.5)
    variant: Variant.NORMAL or Variant.GREEDY_EXPANSION
    on_iteration: optional listener, see add_listener()

    Candidate points are clamped to the bounds, so the function is never
    evaluated outside of them.
    """

    def __init__(self, function, initial_guess, step_sizes=None, lower_bounds=None, upper_bounds=None,
            termination_config=None, transformation_config=None, variant=Variant.NORMAL, on_iteration=None):
        x0 = as_vector(initial_guess, "initial_guess")
        n = len(x0)
        if n == 0:
            raise ConfigurationError("initial_guess must have at least one dimension")

        steps = (default_steps(x0) if step_sizes is None else as_vector(step_sizes, "step_sizes"))
        lower = (np.full(n, -inf) if lower_bounds is None else as_vector(lower_bounds, "lower_bounds"))
        upper = (np.full(n, inf) if upper_bounds is None else as_vector(upper_bounds, "upper_bounds"))

        check_lengths(initial_guess=x0, step_sizes=steps, lower_bounds=lower, upper_bounds=upper)

        if np.any(lower > upper):
            raise ConfigurationError(f"lower_bounds must not exceed upper_bounds: {lower} > {upper}")

        self.function = function
        self.initial_guess = frozen(x0)
        self.step_sizes = frozen(steps)
        self.lower_bounds = frozen(lower)
        self.upper_bounds = frozen(upper)

        self.termination_config = termination_config or TerminationConfig()
        self.transformation_config = transformation_config or TransformationConfig.default()
        self.variant = Variant(variant)

        self.transformer = SimplexTransformer(function, self.lower_bounds, self.upper_bounds,
            self.transformation_config, self.variant)

        self.listeners = []
        if on_iteration: self.listeners.append(on_iteration)

    def add_listener(self, listener):
        """
        listener(info) is called with an IterationInfo after every iteration.
        It runs on the solver's thread, so a slow listener slows down the solve.
        """
        self.listeners.append(listener)

    def remove_listener(self, listener):
        self.listeners.remove(listener)

    def initial_vertices(self):
        """
        The guess plus one vertex per axis, stepped along that axis.
        A guess outside of the bounds is clamped to them, and a step
        that would leave the bounds is taken in the opposite direction.
        """
        lower, upper = self.lower_bounds, self.upper_bounds
        x0 = clamp(self.initial_guess, lower, upper)
        steps = self.step_sizes

        vertices = [x0]
        for i in range(len(x0)):
            x = x0.copy()
            x[i] += steps[i]
            if not (lower[i] <= x[i] <= upper[i]):
                x[i] = min(max(x0[i] - steps[i], lower[i]), upper[i])
            vertices.append(x)
        return vertices

    def create_initial_simplex(self, direction):
        points = [SimplexPoint(x, self.function(frozen(x))) for x in self.initial_vertices()]
        return OrderedSimplex(points, direction)

    def minimize(self, token=None):
        return self.optimize(Direction.MINIMIZE, token)

    def maximize(self, token=None):
        return self.optimize(Direction.MAXIMIZE, token)

    def optimize(self, direction, token=None):
        direction = Direction(direction)
        termination = self.termination_config

        if (token is None) and not termination.has_criteria:
            logger.warning("No termination criteria and no cancellation token: the solve will never stop")

        logger.info("Nelder-Mead: %s in %d dimension(s)", direction.name.lower(), len(self.initial_guess))

        simplex = self.create_initial_simplex(direction)
        iterations = 0

        # The clock covers the iterations only, not the initial evaluations
        start = time.perf_counter()
        elapsed_ms = (lambda: (time.perf_counter() - start) * 1000.0)

        while True:
            simplex, action = self.transformer.transform(simplex)
            iterations += 1

            elapsed = elapsed_ms()

            logger.debug("Iteration %d: %s, best=%r", iterations, action.name, simplex.best().output)

            if self.listeners:
                info = IterationInfo(simplex, iterations, action, int(elapsed))
                for listener in tuple(self.listeners):
                    listener(info)

            reason = termination.check(simplex, iterations, elapsed, token)
            if reason is not TerminationReason.NONE: break

        elapsed = int(elapsed_ms())
        best = simplex.best()

        logger.info("Nelder-Mead stopped (%s) after %d iterations, %d ms: best=%r",
            reason.name, iterations, elapsed, best.output)

        return Result.from_point(best, iterations, elapsed, reason)

def nelder_mead(f, x0, step=None, lower=None, upper=None, maximize=False, diameter_tolerance=1e-8,
        max_iterations=None, max_duration_ms=None, value_tolerance=None, variant=Variant.NORMAL,
        adaptive=False, token=None):
    """
    f: function f(x) to optimize
    x0: initial guess (N-dimensional vector)
    step: initial size of the simplex (a scalar or a per-axis vector)
    lower, upper: optional bounds (scalars or per-axis vectors)
    maximize: look for the largest value of f instead of the smallest
    diameter_tolerance, max_iterations, max_duration_ms, value_tolerance:
        stopping criteria (see TerminationConfig)
    variant: Variant.NORMAL or Variant.GREEDY_EXPANSION
    adaptive: whether to adjust parameters for high-dimensional cases
    token: optional CancellationToken

    Note: it's generally preferable to specify the initial simplex size, since
    with the default one the algorithm might take many more steps to converge
    """

    x0 = as_vector(x0, "x0")
    n = len(x0)

    # Scalars apply to every axis; vectors are validated by the solver
    def broadcast(value):
        if (value is None) or (np.ndim(value) > 0): return value
        return np.full(n, float(value))

    termination_config = TerminationConfig(diameter_tolerance=diameter_tolerance,
        max_iterations=max_iterations, max_duration_ms=max_duration_ms, value_tolerance=value_tolerance)
    transformation_config = (TransformationConfig.adaptive(n) if adaptive else None)

    solver = NelderMead(f, x0, broadcast(step), broadcast(lower), broadcast(upper),
        termination_config, transformation_config, variant)

    direction = (Direction.MAXIMIZE if maximize else Direction.MINIMIZE)
    return solver.optimize(direction, token)
